"""Abstract base class for cache storage backends.

Every backend maps a cache key to a :class:`~privcache.entry.CacheEntry`
and must honour the same failure contract so that a broken cache degrades
to "always miss" instead of breaking the HTTP exchange:

* :meth:`CacheStorage.fetch` returns ``None`` for a missing key *and* for
  a stored payload that no longer decodes.  It never raises.
* :meth:`CacheStorage.save` reports I/O failures as ``False``.
* :meth:`CacheStorage.delete` reports success for keys that do not exist.

Example:
    Minimal backend::

        class DictStorage(CacheStorage):
            def __init__(self):
                self._data = {}

            def fetch(self, key):
                return self._data.get(key)

            def save(self, key, entry):
                self._data[key] = entry
                return True

            def delete(self, key):
                self._data.pop(key, None)
                return True
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from privcache.entry import CacheEntry


class CacheStorage(ABC):
    """Key to :class:`~privcache.entry.CacheEntry` persistence.

    Implementations must be safe to call concurrently for distinct keys.
    Writes to the same key follow a last-writer-wins policy.  Storage
    never invents or mutates entries.

    See Also:
        :class:`~privcache.strategy.private.PrivateCacheStrategy` -- the
        sole owner of a storage instance.
    """

    @abstractmethod
    def fetch(self, key: str) -> Optional[CacheEntry]:
        """Return the entry stored under *key*, or ``None`` on a miss.

        Args:
            key: Cache key produced by the strategy.

        Returns:
            The stored entry, or ``None`` if the key is absent or its
            payload cannot be decoded.
        """
        ...

    @abstractmethod
    def save(self, key: str, entry: CacheEntry) -> bool:
        """Persist *entry* under *key*, replacing any previous value.

        Returns:
            ``True`` if the write succeeded, ``False`` otherwise.
        """
        ...

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove the entry stored under *key*.

        Returns:
            ``True`` if the entry is gone afterwards (including when it never
            existed), ``False`` if the backend failed to remove it.
        """
        ...

    def keys(self) -> list[str]:
        """Return every stored key.  Backends that cannot enumerate return ``[]``."""
        return []

    def clear(self) -> int:
        """Remove every stored entry and return how many were removed."""
        removed = 0
        for key in self.keys():
            if self.delete(key):
                removed += 1
        return removed

    def close(self) -> None:
        """Release backend resources.  The default is a no-op."""
