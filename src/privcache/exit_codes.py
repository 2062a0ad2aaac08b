"""Numeric process exit codes for the ``privcache`` CLI.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~privcache.exceptions.PrivcacheError` subclass.
Shell scripts can inspect the exit code to tell a missing entry apart
from a broken storage directory without parsing stderr.

Example::

    $ privcache show 0123abcd
    $ echo $?
    5   # EXIT_ENTRY_NOT_FOUND -- no entry stored under that key
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_STORAGE_ERROR = 3
"""The storage backend failed to read, write, or delete an entry."""

EXIT_DECODE_ERROR = 4
"""A stored payload could not be decoded into a cache entry."""

EXIT_ENTRY_NOT_FOUND = 5
"""No entry is stored under the requested key."""
