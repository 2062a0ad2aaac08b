"""A strategy that never caches."""

from __future__ import annotations

from typing import Optional

import httpx

from privcache.entry import CacheEntry
from privcache.strategy.base import CacheStrategy


class NullCacheStrategy(CacheStrategy):
    """Always misses and never stores.  Used when caching is disabled."""

    def fetch(self, request: httpx.Request) -> Optional[CacheEntry]:
        return None

    def cache(self, request: httpx.Request, response: httpx.Response) -> bool:
        return False

    def delete(self, request: httpx.Request) -> bool:
        return True
