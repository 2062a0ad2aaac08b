"""HTTP client integration for privcache.

Classes:
    :class:`CachingClient` -- blocking client backed by :class:`httpx.Client`
    that serves fresh responses from a cache strategy.

Example::

    from privcache.client import CachingClient
    from privcache.strategy import PrivateCacheStrategy

    with CachingClient(PrivateCacheStrategy.in_memory()) as client:
        resp = client.get("https://api.example.com/users")
"""

from privcache.client.sync_client import CACHE_STATUS_HEADER, CachingClient

__all__ = ["CACHE_STATUS_HEADER", "CachingClient"]
