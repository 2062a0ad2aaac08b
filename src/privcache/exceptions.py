"""Exception hierarchy for privcache.

All exceptions inherit from :class:`PrivcacheError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`privcache.exit_codes`.

The cache engine itself never lets these escape to an HTTP exchange:
storage backends catch :class:`EntryDecodeError` and I/O failures and
report them as a miss (``None``) or a failed write (``False``).  The
exceptions surface only at the CLI and configuration boundaries, where
:func:`privcache.app.main` turns them into exit codes.

Subclass hierarchy::

    PrivcacheError          (exit 1)
    +-- ConfigError         (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- StorageError        (exit 3)
    +-- EntryDecodeError    (exit 4)
    +-- EntryNotFoundError  (exit 5)
"""

from privcache.exit_codes import (
    EXIT_DECODE_ERROR,
    EXIT_ENTRY_NOT_FOUND,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_STORAGE_ERROR,
)


class PrivcacheError(Exception):
    """Base exception for all privcache errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(PrivcacheError):
    """Raised for configuration problems (invalid JSON, unknown backend, bad env values)."""

    exit_code = EXIT_GENERIC_FAILURE


class InvalidUsageError(PrivcacheError):
    """Raised for invalid CLI arguments."""

    exit_code = EXIT_INVALID_USAGE


class StorageError(PrivcacheError):
    """Raised when a CLI operation needs to report a failed storage call."""

    exit_code = EXIT_STORAGE_ERROR


class EntryDecodeError(PrivcacheError):
    """Raised by :func:`~privcache.codec.decode_entry` for bytes that are not a valid entry."""

    exit_code = EXIT_DECODE_ERROR


class EntryNotFoundError(PrivcacheError):
    """Raised when a CLI lookup finds no entry under the requested key."""

    exit_code = EXIT_ENTRY_NOT_FOUND
