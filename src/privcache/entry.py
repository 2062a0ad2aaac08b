"""Immutable snapshot of a cacheable HTTP response.

A :class:`CacheEntry` is created by the cache strategy at the moment a
response is evaluated and is owned thereafter by whichever storage backend
persists it.  Its expiration time is fixed at creation and never
recomputed.

See Also:
    :class:`~privcache.strategy.private.PrivateCacheStrategy` -- computes
    ``expires_at`` from the response's cache-control headers.
    :mod:`privcache.codec` -- the byte encoding used by durable backends.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator

VALIDATOR_HEADERS = ("etag", "last-modified")
_FRAMING_HEADERS = frozenset({"content-encoding", "content-length", "transfer-encoding"})


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class CacheEntry(BaseModel):
    """A cached response plus its absolute expiration time.

    Attributes:
        status_code: Status code of the captured response.
        headers: Response headers as ordered ``(name, value)`` pairs.
            Repeated headers appear once per value, in original order.
        content: The raw response body.
        expires_at: Absolute UTC time after which the entry is stale.
        stored_at: UTC time at which the entry was created.

    Example::

        entry = CacheEntry.from_response(response, expires_at=utc_now())
        entry.has_validation_information  # True if ETag/Last-Modified present
    """

    model_config = ConfigDict(frozen=True)

    status_code: int
    headers: tuple[tuple[str, str], ...] = Field(default_factory=tuple)
    content: bytes = b""
    expires_at: datetime
    stored_at: datetime = Field(default_factory=utc_now)

    @field_validator("expires_at", "stored_at")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    # ------------------------------------------------------------------ #
    # Construction
    # ------------------------------------------------------------------ #

    @classmethod
    def from_response(
        cls,
        response: httpx.Response,
        expires_at: datetime,
        stored_at: Optional[datetime] = None,
    ) -> CacheEntry:
        """Capture *response* into a new entry expiring at *expires_at*.

        A streaming response is read to completion first.
        """
        content = response.read()
        return cls(
            status_code=response.status_code,
            headers=tuple(
                (name, value) for name, value in response.headers.multi_items()
            ),
            content=content,
            expires_at=expires_at,
            stored_at=stored_at if stored_at is not None else utc_now(),
        )

    def to_response(self, request: Optional[httpx.Request] = None) -> httpx.Response:
        """Rebuild an :class:`httpx.Response` from the captured data.

        Framing headers are dropped since :attr:`content` is the decoded
        body; replaying ``Content-Encoding`` would make httpx decode it twice.
        """
        headers = [
            (name, value)
            for name, value in self.headers
            if name.lower() not in _FRAMING_HEADERS
        ]
        return httpx.Response(
            status_code=self.status_code,
            headers=headers,
            content=self.content,
            request=request,
        )

    # ------------------------------------------------------------------ #
    # Header access
    # ------------------------------------------------------------------ #

    def header(self, name: str) -> Optional[str]:
        """Return the first value of header *name* (case-insensitive), or ``None``."""
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return None

    @property
    def etag(self) -> Optional[str]:
        """The ``ETag`` validator, if the response carried one."""
        return self.header("etag")

    @property
    def last_modified(self) -> Optional[str]:
        """The ``Last-Modified`` validator, if the response carried one."""
        return self.header("last-modified")

    @property
    def has_validation_information(self) -> bool:
        """Whether the entry can be revalidated with a conditional request."""
        return any(self.header(name) is not None for name in VALIDATOR_HEADERS)

    # ------------------------------------------------------------------ #
    # Freshness
    # ------------------------------------------------------------------ #

    def ttl(self, now: Optional[datetime] = None) -> float:
        """Seconds left until expiry; negative once the entry is stale."""
        now = now if now is not None else utc_now()
        return (self.expires_at - now).total_seconds()

    def is_fresh(self, now: Optional[datetime] = None) -> bool:
        """Return ``True`` while *now* is before :attr:`expires_at`."""
        return self.ttl(now) > 0

    def is_stale(self, now: Optional[datetime] = None) -> bool:
        return not self.is_fresh(now)
