"""In-memory cache storage.

Entries live in a plain ``dict`` for the lifetime of the process.  Useful
for tests and short-lived scripts; nothing is persisted.
"""

from __future__ import annotations

import threading
from typing import Optional

from privcache.entry import CacheEntry
from privcache.storage.base import CacheStorage


class InMemoryStorage(CacheStorage):
    """Dictionary-backed :class:`~privcache.storage.base.CacheStorage`.

    A lock guards the dictionary so that concurrent requests sharing one
    strategy can read and write without tearing.  Entries are immutable,
    so they are stored and returned as-is.
    """

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def fetch(self, key: str) -> Optional[CacheEntry]:
        with self._lock:
            return self._entries.get(key)

    def save(self, key: str, entry: CacheEntry) -> bool:
        with self._lock:
            self._entries[key] = entry
        return True

    def delete(self, key: str) -> bool:
        with self._lock:
            self._entries.pop(key, None)
        return True

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._entries)

    def clear(self) -> int:
        with self._lock:
            removed = len(self._entries)
            self._entries.clear()
        return removed

    def __len__(self) -> int:
        return len(self._entries)
