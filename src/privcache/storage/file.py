"""Durable file-backed cache storage.

Each cache key maps to exactly one file under a root directory, named
exactly as the key.  File content is the versioned encoding produced by
:func:`~privcache.codec.encode_entry`.

Writes are atomic: content goes to a temporary file in the same directory,
is fsynced, then renamed over the target with ``os.replace``.  A reader
therefore sees either the previous entry or the new one, never a partial
write, and concurrent writers to the same key resolve as last-writer-wins.
Files are created with ``0o600`` permissions since a private cache may hold
authenticated responses.

Reads tolerate whatever is on disk: a missing file is a miss, and so is a
file whose bytes do not decode into an entry (a foreign file, or one left
behind by an older format version).
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from privcache.codec import decode_entry, encode_entry
from privcache.entry import CacheEntry
from privcache.exceptions import EntryDecodeError
from privcache.storage.base import CacheStorage

logger = logging.getLogger(__name__)

_MAX_NAME_BYTES = 255


class FileStorage(CacheStorage):
    """One-file-per-key :class:`~privcache.storage.base.CacheStorage`.

    Args:
        directory: Root directory holding the entry files.  Created on
            first write if it does not exist.

    Example::

        storage = FileStorage("/tmp/http-cache")
        storage.save(key, entry)
        assert storage.fetch(key) == entry
    """

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        """The root directory holding entry files."""
        return self._directory

    def path_for(self, key: str) -> Optional[Path]:
        """Return the file path for *key*, or ``None`` if *key* is not a plain file name.

        Names longer than 255 bytes are rejected since most filesystems cannot
        store them.
        """
        if not key or key.startswith(".") or "/" in key or "\\" in key or "\0" in key:
            return None
        if len(key.encode("utf-8", "surrogatepass")) > _MAX_NAME_BYTES:
            return None
        return self._directory / key

    def fetch(self, key: str) -> Optional[CacheEntry]:
        path = self.path_for(key)
        if path is None:
            logger.warning("Rejected invalid cache key %r", key)
            return None
        try:
            if not path.is_file():
                return None
            data = path.read_bytes()
        except OSError as exc:
            logger.warning("Failed to read cache entry %s: %s", path, exc)
            return None
        try:
            return decode_entry(data)
        except EntryDecodeError as exc:
            logger.debug("Ignoring undecodable cache entry %s: %s", path, exc)
            return None

    def save(self, key: str, entry: CacheEntry) -> bool:
        path = self.path_for(key)
        if path is None:
            logger.warning("Rejected invalid cache key %r", key)
            return False
        try:
            self._atomic_write(path, encode_entry(entry))
        except OSError as exc:
            logger.warning("Failed to write cache entry %s: %s", path, exc)
            return False
        return True

    def delete(self, key: str) -> bool:
        path = self.path_for(key)
        if path is None:
            logger.warning("Rejected invalid cache key %r", key)
            return False
        try:
            path.unlink()
        except FileNotFoundError:
            return True
        except OSError as exc:
            logger.warning("Failed to delete cache entry %s: %s", path, exc)
            return False
        return True

    def keys(self) -> list[str]:
        """Return stored keys, sorted.  In-flight temporary files are skipped."""
        if not self._directory.is_dir():
            return []
        return sorted(
            p.name
            for p in self._directory.iterdir()
            if p.is_file() and not p.name.startswith(".")
        )

    def _atomic_write(self, path: Path, data: bytes) -> None:
        """Write *data* to *path* atomically using temp file + rename."""
        path.parent.mkdir(parents=True, exist_ok=True)

        fd = None
        tmp_path: Optional[str] = None
        try:
            fd = tempfile.NamedTemporaryFile(
                mode="wb",
                dir=path.parent,
                prefix=f".{path.name}.",
                suffix=".tmp",
                delete=False,
            )
            tmp_path = fd.name
            os.chmod(tmp_path, 0o600)
            fd.write(data)
            fd.flush()
            os.fsync(fd.fileno())
            fd.close()
            fd = None
            os.replace(tmp_path, path)
        except BaseException:
            if fd is not None:
                fd.close()
            if tmp_path is not None:
                try:
                    os.unlink(tmp_path)
                except OSError:
                    pass
            raise
