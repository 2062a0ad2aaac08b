"""Cache decision engine for a private (single-consumer) HTTP cache.

:class:`PrivateCacheStrategy` inspects a response's status code and
``Cache-Control`` / ``Expires`` headers and either rejects it or produces a
:class:`~privcache.entry.CacheEntry` with a concrete expiration time.  The
rules follow RFC 7234 for a private cache, so a response marked
``private, max-age=60`` is stored.

Rules, in precedence order:

1. Status codes outside :data:`CACHEABLE_STATUS_CODES` are rejected.
2. ``no-store`` is rejected.
3. ``no-cache`` yields an already-stale entry, kept only when it carries
   a validator (``ETag`` or ``Last-Modified``).
4. ``max-age`` expires ``max-age`` seconds after evaluation.
5. A valid RFC 1123 ``Expires`` date is used as-is.
6. Anything else yields an already-stale entry.

Malformed headers never raise: an unparsable ``max-age`` counts as ``0``
and an unparsable ``Expires`` is ignored.

Do not share a private cache's storage between users.
"""

from __future__ import annotations

import hashlib
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import httpx

from privcache.entry import CacheEntry, utc_now
from privcache.headers import KeyValueHeader, parse_http_date, parse_int
from privcache.storage.base import CacheStorage
from privcache.storage.memory import InMemoryStorage
from privcache.strategy.base import CacheStrategy

logger = logging.getLogger(__name__)

CACHEABLE_STATUS_CODES = frozenset(
    {200, 203, 204, 300, 301, 404, 405, 410, 414, 418, 501}
)

AGE_DIRECTIVES = ("max-age",)

_STALE_OFFSET = timedelta(seconds=1)
_MAX_DATETIME = datetime.max.replace(tzinfo=timezone.utc)


class PrivateCacheStrategy(CacheStrategy):
    """RFC 7234 private-cache strategy over a single :class:`CacheStorage`.

    The strategy owns *storage* for its lifetime and depends only on the
    :class:`~privcache.storage.base.CacheStorage` interface.  Freshness is
    computed against *clock*, which tests can replace with a fixed reading.

    Args:
        storage: Backend that persists entries.
        clock: Callable returning the current aware UTC time.

    Example::

        strategy = PrivateCacheStrategy(FileStorage("/tmp/http-cache"))
        if strategy.cache(request, response):
            entry = strategy.fetch(request)
    """

    def __init__(
        self,
        storage: CacheStorage,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._storage = storage
        self._clock = clock

    @classmethod
    def in_memory(cls, clock: Callable[[], datetime] = utc_now) -> PrivateCacheStrategy:
        """Build a strategy over a fresh :class:`~privcache.storage.memory.InMemoryStorage`."""
        return cls(InMemoryStorage(), clock=clock)

    @property
    def storage(self) -> CacheStorage:
        """The backend this strategy reads from and writes to."""
        return self._storage

    # ------------------------------------------------------------------ #
    # Policy
    # ------------------------------------------------------------------ #

    def evaluate(
        self,
        response: httpx.Response,
        now: Optional[datetime] = None,
    ) -> Optional[CacheEntry]:
        """Decide whether *response* may be stored and until when it is fresh.

        Args:
            response: The response to evaluate.
            now: Evaluation time; defaults to the strategy's clock.

        Returns:
            A new :class:`CacheEntry`, or ``None`` if the response must not
            be cached.
        """
        if response.status_code not in CACHEABLE_STATUS_CODES:
            logger.debug("Not caching status %d", response.status_code)
            return None

        now = now if now is not None else self._clock()
        cache_control = KeyValueHeader(response.headers.get_list("cache-control"))

        if cache_control.has("no-store"):
            logger.debug("Not caching: no-store")
            return None

        if cache_control.has("no-cache"):
            # Stored only for conditional revalidation, RFC 7234 section 5.2.1.4.
            entry = CacheEntry.from_response(response, now - _STALE_OFFSET, stored_at=now)
            if not entry.has_validation_information:
                logger.debug("Not caching: no-cache without validators")
                return None
            return entry

        for directive in AGE_DIRECTIVES:
            if cache_control.has(directive):
                seconds = parse_int(cache_control.get(directive))
                return CacheEntry.from_response(
                    response, _add_seconds(now, seconds), stored_at=now
                )

        expires_at = parse_http_date(response.headers.get("expires"))
        if expires_at is not None:
            return CacheEntry.from_response(response, expires_at, stored_at=now)

        return CacheEntry.from_response(response, now - _STALE_OFFSET, stored_at=now)

    def key(self, request: httpx.Request) -> str:
        """Return the cache key for *request*.  See :func:`cache_key`."""
        return cache_key(request)

    # ------------------------------------------------------------------ #
    # Storage access
    # ------------------------------------------------------------------ #

    def fetch(self, request: httpx.Request) -> Optional[CacheEntry]:
        """Return whatever storage holds for *request*.

        No freshness check is made; the caller decides how to treat a stale
        entry.
        """
        return self._storage.fetch(self.key(request))

    def cache(self, request: httpx.Request, response: httpx.Response) -> bool:
        entry = self.evaluate(response)
        if entry is None:
            return False
        saved = self._storage.save(self.key(request), entry)
        if not saved:
            logger.warning("Failed to store %s %s in cache", request.method, request.url)
        return saved

    def delete(self, request: httpx.Request) -> bool:
        return self._storage.delete(self.key(request))


def _add_seconds(now: datetime, seconds: int) -> datetime:
    """``now + seconds``, clamped to the datetime range."""
    try:
        return now + timedelta(seconds=seconds)
    except OverflowError:
        return _MAX_DATETIME if seconds > 0 else now - _STALE_OFFSET


def cache_key(request: httpx.Request) -> str:
    """SHA-1 fingerprint of the request method and full URL.

    Two requests with the same method and URL (scheme, host, path, query)
    always share a key.  Headers play no part.
    """
    raw = f"{request.method}{request.url}"
    return hashlib.sha1(raw.encode("utf-8")).hexdigest()
