"""privcache -- a private HTTP response cache for httpx clients.

This package decides whether an HTTP response may be stored, how long it
stays fresh, and how it is persisted and retrieved for reuse.  The rules
follow the cache-control negotiation model of RFC 7234 for a single
consumer ("private") cache.

Typical usage::

    from privcache import CachingClient, FileStorage, PrivateCacheStrategy

    strategy = PrivateCacheStrategy(FileStorage("/tmp/http-cache"))
    with CachingClient(strategy) as client:
        response = client.get("https://api.example.com/users")

Modules:
    entry: The immutable :class:`CacheEntry` model.
    codec: Versioned byte encoding for persisted entries.
    headers: Cache-Control directive parsing.
    storage: The :class:`CacheStorage` interface and its backends.
    strategy: Cache decision engine (:class:`PrivateCacheStrategy`).
    client: :class:`CachingClient`, an httpx wrapper using a strategy.
    config: XDG-aware configuration resolution.
    app: Typer CLI for inspecting and maintaining a cache.
"""

__version__ = "0.1.0"

from privcache.client import CachingClient  # noqa: E402
from privcache.entry import CacheEntry  # noqa: E402
from privcache.storage import (  # noqa: E402
    CacheStorage,
    DiskCacheStorage,
    FileStorage,
    InMemoryStorage,
    create_storage,
)
from privcache.strategy import (  # noqa: E402
    CacheStrategy,
    NullCacheStrategy,
    PrivateCacheStrategy,
    create_strategy,
)

__all__ = [
    "CacheEntry",
    "CacheStorage",
    "CacheStrategy",
    "CachingClient",
    "DiskCacheStorage",
    "FileStorage",
    "InMemoryStorage",
    "NullCacheStrategy",
    "PrivateCacheStrategy",
    "create_storage",
    "create_strategy",
]
