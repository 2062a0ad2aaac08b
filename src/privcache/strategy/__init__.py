"""Cache decision strategies.

- :class:`CacheStrategy` -- the abstract ``fetch`` / ``cache`` / ``delete``
  interface consumed by :class:`~privcache.client.CachingClient`.
- :class:`PrivateCacheStrategy` -- RFC 7234 rules for a private cache.
- :class:`NullCacheStrategy` -- never stores, always misses.
- :func:`create_strategy` -- builds a strategy from configuration.
"""

from __future__ import annotations

from privcache.models import CacheConfig
from privcache.strategy.base import CacheStrategy
from privcache.strategy.null import NullCacheStrategy
from privcache.strategy.private import (
    CACHEABLE_STATUS_CODES,
    PrivateCacheStrategy,
    cache_key,
)


def create_strategy(config: CacheConfig) -> CacheStrategy:
    """Return a :class:`PrivateCacheStrategy` over the configured backend.

    A disabled configuration yields a :class:`NullCacheStrategy`.
    """
    if not config.enabled:
        return NullCacheStrategy()

    from privcache.storage import create_storage

    return PrivateCacheStrategy(create_storage(config))


__all__ = [
    "CACHEABLE_STATUS_CODES",
    "CacheStrategy",
    "NullCacheStrategy",
    "PrivateCacheStrategy",
    "cache_key",
    "create_strategy",
]
