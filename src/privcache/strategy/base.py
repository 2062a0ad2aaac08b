"""Abstract base class for cache strategies.

A strategy is consulted twice per HTTP exchange: :meth:`CacheStrategy.fetch`
before the network call and :meth:`CacheStrategy.cache` after it.  Neither
may raise for bad headers or storage faults; a broken cache degrades to a
miss.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

import httpx

from privcache.entry import CacheEntry


class CacheStrategy(ABC):
    """Decides what to store and looks entries up by request."""

    @abstractmethod
    def fetch(self, request: httpx.Request) -> Optional[CacheEntry]:
        """Return the stored entry for *request*, fresh or not, or ``None``."""
        ...

    @abstractmethod
    def cache(self, request: httpx.Request, response: httpx.Response) -> bool:
        """Store *response* for *request* if policy allows.

        Returns:
            ``True`` if an entry was written, ``False`` if the response was
            not cacheable or the write failed.
        """
        ...

    @abstractmethod
    def delete(self, request: httpx.Request) -> bool:
        """Drop any entry stored for *request*."""
        ...
