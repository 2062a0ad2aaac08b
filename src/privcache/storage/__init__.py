"""Pluggable persistence for cache entries.

- :class:`CacheStorage` -- the abstract key to entry contract.
- :class:`InMemoryStorage` -- process-local dictionary.
- :class:`FileStorage` -- one file per key, durable across runs.
- :class:`DiskCacheStorage` -- :mod:`diskcache`-backed, size bounded.
- :func:`create_storage` -- builds the backend named by a
  :class:`~privcache.models.CacheConfig`.
"""

from __future__ import annotations

from privcache.models import CacheConfig, StorageBackend
from privcache.storage.base import CacheStorage
from privcache.storage.disk import DiskCacheStorage
from privcache.storage.file import FileStorage
from privcache.storage.memory import InMemoryStorage


def create_storage(config: CacheConfig) -> CacheStorage:
    """Build the storage backend selected by *config*.

    Durable backends use :func:`~privcache.config.resolve_storage_dir`,
    i.e. ``config.directory`` or the XDG cache directory.
    """
    from privcache.config import resolve_storage_dir

    if config.backend == StorageBackend.MEMORY:
        return InMemoryStorage()
    directory = resolve_storage_dir(config)
    if config.backend == StorageBackend.DISK:
        return DiskCacheStorage(directory)
    return FileStorage(directory)


__all__ = [
    "CacheStorage",
    "DiskCacheStorage",
    "FileStorage",
    "InMemoryStorage",
    "create_storage",
]
