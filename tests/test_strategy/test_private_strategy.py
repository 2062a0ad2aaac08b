"""Tests for the private cache decision engine."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from conftest import NOW, make_request, make_response
from privcache.entry import CacheEntry
from privcache.storage import CacheStorage, InMemoryStorage
from privcache.strategy import CACHEABLE_STATUS_CODES, PrivateCacheStrategy


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def strategy(storage: InMemoryStorage, clock) -> PrivateCacheStrategy:
    return PrivateCacheStrategy(storage, clock=clock)


class FailingStorage(CacheStorage):
    """Storage whose writes always fail."""

    def __init__(self) -> None:
        self.saves = 0

    def fetch(self, key: str) -> Optional[CacheEntry]:
        return None

    def save(self, key: str, entry: CacheEntry) -> bool:
        self.saves += 1
        return False

    def delete(self, key: str) -> bool:
        return False


class CountingStorage(InMemoryStorage):
    def __init__(self) -> None:
        super().__init__()
        self.saves = 0

    def save(self, key: str, entry: CacheEntry) -> bool:
        self.saves += 1
        return super().save(key, entry)


# ------------------------------------------------------------------ #
# Status codes
# ------------------------------------------------------------------ #


class TestStatusCodes:
    @pytest.mark.parametrize("status", sorted(CACHEABLE_STATUS_CODES))
    def test_accepted_status_codes(self, strategy: PrivateCacheStrategy, status: int) -> None:
        response = make_response(status, headers=[("Cache-Control", "max-age=60")])
        assert strategy.evaluate(response) is not None

    @pytest.mark.parametrize("status", [201, 202, 206, 302, 304, 307, 400, 401, 403, 500, 502, 503])
    def test_rejected_status_codes(self, strategy: PrivateCacheStrategy, status: int) -> None:
        response = make_response(status, headers=[("Cache-Control", "max-age=60")])
        assert strategy.evaluate(response) is None


# ------------------------------------------------------------------ #
# Cache-Control directives
# ------------------------------------------------------------------ #


class TestNoStore:
    @pytest.mark.parametrize(
        "cache_control",
        ["no-store", "private, no-store", "no-store, max-age=60", "max-age=60, no-cache, no-store"],
    )
    def test_no_store_rejected(self, strategy: PrivateCacheStrategy, cache_control: str) -> None:
        response = make_response(
            headers=[("Cache-Control", cache_control), ("ETag", '"x"')],
        )
        assert strategy.evaluate(response) is None

    def test_no_store_in_second_header_value(self, strategy: PrivateCacheStrategy) -> None:
        response = make_response(
            headers=[("Cache-Control", "max-age=60"), ("Cache-Control", "no-store")],
        )
        assert strategy.evaluate(response) is None


class TestNoCache:
    def test_with_etag_is_stored_stale(self, strategy: PrivateCacheStrategy, now: datetime) -> None:
        response = make_response(headers=[("Cache-Control", "no-cache"), ("ETag", '"v1"')])
        entry = strategy.evaluate(response)
        assert entry is not None
        assert entry.expires_at <= now
        assert entry.expires_at == now - timedelta(seconds=1)

    def test_with_last_modified_is_stored(self, strategy: PrivateCacheStrategy) -> None:
        response = make_response(
            headers=[
                ("Cache-Control", "no-cache"),
                ("Last-Modified", "Thu, 01 Jan 2026 00:00:00 GMT"),
            ],
        )
        assert strategy.evaluate(response) is not None

    def test_without_validators_rejected(self, strategy: PrivateCacheStrategy) -> None:
        response = make_response(headers=[("Cache-Control", "no-cache")])
        assert strategy.evaluate(response) is None

    def test_no_cache_takes_precedence_over_max_age(
        self, strategy: PrivateCacheStrategy, now: datetime
    ) -> None:
        response = make_response(
            headers=[("Cache-Control", "max-age=600, no-cache"), ("ETag", '"v1"')],
        )
        entry = strategy.evaluate(response)
        assert entry is not None
        assert entry.is_stale(now)


class TestMaxAge:
    def test_max_age_sets_expiry(self, strategy: PrivateCacheStrategy, now: datetime) -> None:
        response = make_response(headers=[("Cache-Control", "private, max-age=60")])
        entry = strategy.evaluate(response)
        assert entry is not None
        assert entry.expires_at == now + timedelta(seconds=60)
        assert entry.stored_at == now

    def test_max_age_overrides_expires(self, strategy: PrivateCacheStrategy, now: datetime) -> None:
        response = make_response(
            headers=[
                ("Cache-Control", "max-age=10"),
                ("Expires", "Thu, 01 Jan 2099 00:00:00 GMT"),
            ],
        )
        entry = strategy.evaluate(response)
        assert entry is not None
        assert entry.expires_at == now + timedelta(seconds=10)

    @pytest.mark.parametrize("value", ["abc", "", '""', "=="])
    def test_malformed_max_age_expires_immediately(
        self, strategy: PrivateCacheStrategy, now: datetime, value: str
    ) -> None:
        response = make_response(headers=[("Cache-Control", f"max-age={value}")])
        entry = strategy.evaluate(response)
        assert entry is not None
        assert entry.expires_at == now

    def test_valueless_max_age_expires_immediately(
        self, strategy: PrivateCacheStrategy, now: datetime
    ) -> None:
        response = make_response(headers=[("Cache-Control", "max-age")])
        entry = strategy.evaluate(response)
        assert entry is not None
        assert entry.expires_at == now

    def test_non_ascii_digit_max_age_expires_immediately(
        self, strategy: PrivateCacheStrategy, now: datetime
    ) -> None:
        # httpx decodes the raw 0xB2 byte as latin-1 superscript two
        response = make_response(headers=[(b"Cache-Control", b"max-age=\xb2")])
        assert strategy.cache(make_request(), response) is True
        entry = strategy.fetch(make_request())
        assert entry is not None
        assert entry.expires_at == now

    def test_huge_max_age_does_not_raise(self, strategy: PrivateCacheStrategy, now: datetime) -> None:
        response = make_response(headers=[("Cache-Control", "max-age=" + "9" * 30)])
        entry = strategy.evaluate(response)
        assert entry is not None
        assert entry.expires_at > now

    def test_explicit_now_overrides_clock(self, strategy: PrivateCacheStrategy) -> None:
        other = datetime(2030, 6, 1, tzinfo=timezone.utc)
        response = make_response(headers=[("Cache-Control", "max-age=5")])
        entry = strategy.evaluate(response, now=other)
        assert entry is not None
        assert entry.expires_at == other + timedelta(seconds=5)


class TestExpires:
    def test_valid_expires_used_exactly(self, strategy: PrivateCacheStrategy) -> None:
        response = make_response(headers=[("Expires", "Sun, 01 Feb 2026 08:30:00 GMT")])
        entry = strategy.evaluate(response)
        assert entry is not None
        assert entry.expires_at == datetime(2026, 2, 1, 8, 30, tzinfo=timezone.utc)

    @pytest.mark.parametrize(
        "value", ["0", "-1", "never", "2026-02-01", "Fri, 31 Dec 9999 23:59:59 -0100"]
    )
    def test_invalid_expires_falls_through(
        self, strategy: PrivateCacheStrategy, now: datetime, value: str
    ) -> None:
        response = make_response(headers=[("Expires", value)])
        entry = strategy.evaluate(response)
        assert entry is not None
        assert entry.expires_at == now - timedelta(seconds=1)


class TestDefault:
    def test_no_freshness_signal_is_stored_stale(
        self, strategy: PrivateCacheStrategy, now: datetime
    ) -> None:
        entry = strategy.evaluate(make_response())
        assert entry is not None
        assert entry.expires_at == now - timedelta(seconds=1)

    def test_unrelated_directives_ignored(self, strategy: PrivateCacheStrategy, now: datetime) -> None:
        response = make_response(headers=[("Cache-Control", "private, must-revalidate")])
        entry = strategy.evaluate(response)
        assert entry is not None
        assert entry.expires_at == now - timedelta(seconds=1)


# ------------------------------------------------------------------ #
# Keys
# ------------------------------------------------------------------ #


class TestKey:
    def test_same_method_and_url_share_key(self, strategy: PrivateCacheStrategy) -> None:
        a = make_request("GET", "https://api.example.com/users?page=1")
        b = make_request("GET", "https://api.example.com/users?page=1")
        assert strategy.key(a) == strategy.key(b)

    def test_headers_do_not_affect_key(self, strategy: PrivateCacheStrategy) -> None:
        import httpx

        a = httpx.Request("GET", "https://api.example.com/users", headers={"Accept": "text/html"})
        b = httpx.Request("GET", "https://api.example.com/users", headers={"Accept": "application/json"})
        assert strategy.key(a) == strategy.key(b)

    @pytest.mark.parametrize(
        "method, url",
        [
            ("POST", "https://api.example.com/users?page=1"),
            ("GET", "http://api.example.com/users?page=1"),
            ("GET", "https://other.example.com/users?page=1"),
            ("GET", "https://api.example.com/groups?page=1"),
            ("GET", "https://api.example.com/users?page=2"),
        ],
    )
    def test_different_method_or_url_changes_key(
        self, strategy: PrivateCacheStrategy, method: str, url: str
    ) -> None:
        base = make_request("GET", "https://api.example.com/users?page=1")
        assert strategy.key(base) != strategy.key(make_request(method, url))

    def test_key_is_sha1_hex(self, strategy: PrivateCacheStrategy) -> None:
        import hashlib

        request = make_request("GET", "https://api.example.com/users")
        expected = hashlib.sha1(b"GEThttps://api.example.com/users").hexdigest()
        assert strategy.key(request) == expected


# ------------------------------------------------------------------ #
# fetch / cache / delete
# ------------------------------------------------------------------ #


class TestCacheAndFetch:
    def test_max_age_scenario(self, strategy: PrivateCacheStrategy, now: datetime) -> None:
        request = make_request()
        response = make_response(headers=[("Cache-Control", "max-age=60")], content=b"users")
        assert strategy.cache(request, response) is True
        entry = strategy.fetch(request)
        assert entry is not None
        assert entry.status_code == 200
        assert entry.content == b"users"
        assert entry.expires_at == now + timedelta(seconds=60)

    def test_fetch_miss(self, strategy: PrivateCacheStrategy) -> None:
        assert strategy.fetch(make_request()) is None

    def test_fetch_returns_stale_entries(self, strategy: PrivateCacheStrategy, now: datetime) -> None:
        request = make_request()
        strategy.cache(request, make_response())
        entry = strategy.fetch(request)
        assert entry is not None
        assert entry.is_stale(now)

    def test_uncacheable_response_does_not_touch_storage(self, clock) -> None:
        storage = CountingStorage()
        strategy = PrivateCacheStrategy(storage, clock=clock)
        response = make_response(headers=[("Cache-Control", "no-store")])
        assert strategy.cache(make_request(), response) is False
        assert storage.saves == 0
        assert storage.keys() == []

    def test_single_write_per_call(self, clock) -> None:
        storage = CountingStorage()
        strategy = PrivateCacheStrategy(storage, clock=clock)
        strategy.cache(make_request(), make_response(headers=[("Cache-Control", "max-age=5")]))
        assert storage.saves == 1

    def test_storage_failure_reported_as_false(self, clock) -> None:
        storage = FailingStorage()
        strategy = PrivateCacheStrategy(storage, clock=clock)
        response = make_response(headers=[("Cache-Control", "max-age=60")])
        assert strategy.cache(make_request(), response) is False
        assert storage.saves == 1

    def test_entry_keyed_by_request(self, strategy: PrivateCacheStrategy, storage: InMemoryStorage) -> None:
        request = make_request()
        strategy.cache(request, make_response(headers=[("Cache-Control", "max-age=5")]))
        assert storage.keys() == [strategy.key(request)]

    def test_delete(self, strategy: PrivateCacheStrategy) -> None:
        request = make_request()
        strategy.cache(request, make_response(headers=[("Cache-Control", "max-age=5")]))
        assert strategy.delete(request) is True
        assert strategy.fetch(request) is None
        assert strategy.delete(request) is True


class TestConstruction:
    def test_in_memory_factory(self, clock) -> None:
        strategy = PrivateCacheStrategy.in_memory(clock=clock)
        assert isinstance(strategy.storage, InMemoryStorage)

    def test_storage_is_required(self) -> None:
        with pytest.raises(TypeError):
            PrivateCacheStrategy()  # type: ignore[call-arg]
