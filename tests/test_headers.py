"""Tests for Cache-Control and HTTP date parsing."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from privcache.headers import KeyValueHeader, format_http_date, parse_http_date, parse_int


class TestKeyValueHeader:
    def test_valued_and_valueless_directives(self) -> None:
        cc = KeyValueHeader(["private, max-age=60"])
        assert cc.has("private")
        assert cc.get("private") == ""
        assert cc.get("max-age") == "60"

    def test_multiple_header_values_are_merged(self) -> None:
        cc = KeyValueHeader(["no-cache", "max-age=10"])
        assert cc.has("no-cache")
        assert cc.get("max-age") == "10"

    def test_names_are_case_insensitive(self) -> None:
        cc = KeyValueHeader(["No-Store, MAX-AGE=5"])
        assert cc.has("no-store")
        assert cc.has("NO-STORE")
        assert cc.get("max-age") == "5"

    def test_quoted_values_are_unquoted(self) -> None:
        cc = KeyValueHeader(['no-cache="Set-Cookie, X-Token", max-age=3'])
        assert cc.get("no-cache") == "Set-Cookie, X-Token"
        assert cc.get("max-age") == "3"

    def test_whitespace_and_empty_parts_ignored(self) -> None:
        cc = KeyValueHeader([" ,  max-age = 30 ,, public "])
        assert cc.get("max-age") == "30"
        assert cc.has("public")
        assert len(cc) == 2

    def test_first_occurrence_wins(self) -> None:
        cc = KeyValueHeader(["max-age=10, max-age=20"])
        assert cc.get("max-age") == "10"

    def test_missing_directive_returns_default(self) -> None:
        cc = KeyValueHeader([])
        assert not cc.has("max-age")
        assert cc.get("max-age") == ""
        assert cc.get("max-age", "0") == "0"


class TestParseInt:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("60", 60),
            (" 120 ", 120),
            ("30abc", 30),
            ("abc", 0),
            ("", 0),
            ("-5", -5),
            ("+7", 7),
            ("\u00b2", 0),
            ("1\u2460", 1),
        ],
    )
    def test_parse_int(self, raw: str, expected: int) -> None:
        assert parse_int(raw) == expected


class TestHttpDates:
    def test_parse_gmt_date(self) -> None:
        parsed = parse_http_date("Thu, 01 Jan 2026 00:00:00 GMT")
        assert parsed == datetime(2026, 1, 1, tzinfo=timezone.utc)

    def test_parse_numeric_offset(self) -> None:
        parsed = parse_http_date("Thu, 01 Jan 2026 02:00:00 +0200")
        assert parsed == datetime(2026, 1, 1, tzinfo=timezone.utc)
        assert parsed.tzinfo == timezone.utc

    @pytest.mark.parametrize(
        "raw",
        [
            None,
            "",
            "0",
            "-1",
            "tomorrow",
            "2026-01-01T00:00:00Z",
            "Fri, 31 Dec 9999 23:59:59 -0100",
        ],
    )
    def test_invalid_dates_are_none(self, raw) -> None:
        assert parse_http_date(raw) is None

    def test_format_round_trips(self) -> None:
        value = datetime(2026, 3, 4, 5, 6, 7, tzinfo=timezone.utc)
        assert format_http_date(value) == "Wed, 04 Mar 2026 05:06:07 GMT"
        assert parse_http_date(format_http_date(value)) == value
