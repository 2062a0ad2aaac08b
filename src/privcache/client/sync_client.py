"""Synchronous HTTP client that consults a cache strategy.

This module provides :class:`CachingClient`, a thin wrapper around
:class:`httpx.Client` that wires a :class:`~privcache.strategy.base.CacheStrategy`
into the request pipeline:

- **Lookup** -- GET and HEAD requests ask :meth:`CacheStrategy.fetch`
  first.  A fresh entry is returned without network I/O.
- **Store** -- after a GET or HEAD goes to the network,
  :meth:`CacheStrategy.cache` decides whether to keep the response.
- **Invalidate** -- a successful unsafe request (POST, PUT, PATCH,
  DELETE) drops the cached GET entry for the same URL.

Every response carries an ``X-Privcache`` header set to ``HIT`` or
``MISS``.  Cache faults are logged and never interrupt the request: a
broken cache behaves like an empty one.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Optional

import httpx

from privcache.entry import utc_now
from privcache.strategy.base import CacheStrategy

logger = logging.getLogger(__name__)

CACHE_STATUS_HEADER = "X-Privcache"

CACHEABLE_METHODS = frozenset({"GET", "HEAD"})
INVALIDATING_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


class CachingClient:
    """HTTP client with a private response cache.

    Must be used as a context manager so that the underlying transport is
    properly opened and closed.

    Args:
        strategy: Cache strategy consulted before and after each request.
        base_url: Prefix for relative request URLs.
        timeout: Request timeout in seconds.
        headers: Default headers sent with every request.
        transport: Optional httpx transport, e.g. :class:`httpx.MockTransport`
            in tests.
        clock: Callable returning the current aware UTC time, used to
            decide whether a stored entry is still fresh.

    Example::

        strategy = PrivateCacheStrategy(FileStorage("/tmp/http-cache"))
        with CachingClient(strategy) as client:
            first = client.get("https://api.example.com/users")   # MISS
            second = client.get("https://api.example.com/users")  # HIT if max-age allows
    """

    def __init__(
        self,
        strategy: CacheStrategy,
        base_url: str = "",
        timeout: float = 30.0,
        headers: Optional[dict[str, str]] = None,
        transport: Optional[httpx.BaseTransport] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._strategy = strategy
        self._base_url = base_url
        self._timeout = timeout
        self._headers = headers or {}
        self._transport = transport
        self._clock = clock
        self._client: Optional[httpx.Client] = None

    @property
    def strategy(self) -> CacheStrategy:
        return self._strategy

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> CachingClient:
        self._client = httpx.Client(
            base_url=self._base_url,
            timeout=self._timeout,
            headers=self._headers,
            transport=self._transport,
            follow_redirects=True,
        )
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # Public request methods
    # ------------------------------------------------------------------ #

    def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send a request, serving GET/HEAD from the cache when fresh.

        Args:
            method: HTTP method.
            url: Absolute URL, or a path relative to ``base_url``.
            **kwargs: Forwarded to :meth:`httpx.Client.build_request`
                (``params``, ``headers``, ``json``, ``content``, ...).

        Returns:
            The cached or network :class:`httpx.Response`, with the
            ``X-Privcache`` header set.
        """
        assert self._client is not None, "Client not initialised -- use as context manager"

        request = self._client.build_request(method, url, **kwargs)
        method = request.method.upper()

        if method in CACHEABLE_METHODS:
            cached = self._lookup(request)
            if cached is not None:
                return cached

        response = self._client.send(request)

        if method in CACHEABLE_METHODS:
            self._store(request, response)
        elif method in INVALIDATING_METHODS and response.status_code < 400:
            self._invalidate(request)

        response.headers[CACHE_STATUS_HEADER] = "MISS"

        return response

    def get(self, url: str, **kwargs: Any) -> httpx.Response:
        """Send a GET request."""
        return self.request("GET", url, **kwargs)

    def head(self, url: str, **kwargs: Any) -> httpx.Response:
        """Send a HEAD request."""
        return self.request("HEAD", url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> httpx.Response:
        """Send a POST request."""
        return self.request("POST", url, **kwargs)

    def put(self, url: str, **kwargs: Any) -> httpx.Response:
        """Send a PUT request."""
        return self.request("PUT", url, **kwargs)

    def patch(self, url: str, **kwargs: Any) -> httpx.Response:
        """Send a PATCH request."""
        return self.request("PATCH", url, **kwargs)

    def delete(self, url: str, **kwargs: Any) -> httpx.Response:
        """Send a DELETE request."""
        return self.request("DELETE", url, **kwargs)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _lookup(self, request: httpx.Request) -> Optional[httpx.Response]:
        """Return a cached response for *request* if one is stored and fresh."""
        try:
            entry = self._strategy.fetch(request)
        except Exception as exc:
            logger.warning("Cache lookup failed for %s %s: %s", request.method, request.url, exc)
            return None
        if entry is None or not entry.is_fresh(self._clock()):
            return None

        logger.debug("Cache hit: %s %s", request.method, request.url)
        response = entry.to_response(request=request)
        response.headers[CACHE_STATUS_HEADER] = "HIT"
        return response

    def _store(self, request: httpx.Request, response: httpx.Response) -> None:
        try:
            stored = self._strategy.cache(request, response)
        except Exception as exc:
            logger.warning("Cache store failed for %s %s: %s", request.method, request.url, exc)
            return
        if stored:
            logger.debug("Cached: %s %s", request.method, request.url)

    def _invalidate(self, request: httpx.Request) -> None:
        """Drop the cached GET entry for the URL an unsafe request just changed."""
        for method in CACHEABLE_METHODS:
            try:
                self._strategy.delete(httpx.Request(method, request.url))
            except Exception as exc:
                logger.warning("Cache invalidation failed for %s: %s", request.url, exc)
