"""Cache storage backed by :mod:`diskcache`.

Stores the encoded entry bytes in a :class:`diskcache.Cache` directory
(SQLite index plus value files).  Unlike :class:`~privcache.storage.file.FileStorage`
this backend can evict on its own: ``size_limit`` bounds the directory
and diskcache culls least-recently-stored entries when it is exceeded.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Optional

import diskcache

from privcache.codec import decode_entry, encode_entry
from privcache.entry import CacheEntry
from privcache.exceptions import EntryDecodeError
from privcache.storage.base import CacheStorage

logger = logging.getLogger(__name__)

DEFAULT_SIZE_LIMIT = 2**30


class DiskCacheStorage(CacheStorage):
    """:class:`~privcache.storage.base.CacheStorage` on top of :class:`diskcache.Cache`.

    Args:
        directory: Directory for the diskcache database.
        size_limit: Maximum size of the cache directory in bytes.
    """

    def __init__(self, directory: str | Path, size_limit: int = DEFAULT_SIZE_LIMIT) -> None:
        self._directory = Path(directory)
        self._cache = diskcache.Cache(str(self._directory), size_limit=size_limit)

    @property
    def directory(self) -> Path:
        return self._directory

    def fetch(self, key: str) -> Optional[CacheEntry]:
        try:
            data = self._cache.get(key)
        except (OSError, sqlite3.Error) as exc:
            logger.warning("Failed to read cache entry %s: %s", key, exc)
            return None
        if data is None:
            return None
        if not isinstance(data, bytes):
            logger.debug("Ignoring non-bytes value stored under %s", key)
            return None
        try:
            return decode_entry(data)
        except EntryDecodeError as exc:
            logger.debug("Ignoring undecodable cache entry %s: %s", key, exc)
            return None

    def save(self, key: str, entry: CacheEntry) -> bool:
        try:
            return bool(self._cache.set(key, encode_entry(entry)))
        except (OSError, sqlite3.Error) as exc:
            logger.warning("Failed to write cache entry %s: %s", key, exc)
            return False

    def delete(self, key: str) -> bool:
        try:
            self._cache.delete(key)
        except (OSError, sqlite3.Error) as exc:
            logger.warning("Failed to delete cache entry %s: %s", key, exc)
            return False
        return True

    def keys(self) -> list[str]:
        return sorted(str(key) for key in self._cache.iterkeys())

    def clear(self) -> int:
        return self._cache.clear()

    def close(self) -> None:
        """Close the underlying :class:`diskcache.Cache`."""
        self._cache.close()
