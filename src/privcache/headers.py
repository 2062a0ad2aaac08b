"""Header parsing helpers for cache-control negotiation.

:class:`KeyValueHeader` turns the raw values of a multi-valued header such
as ``Cache-Control`` into a directive map with ``has`` / ``get`` lookups.
:func:`parse_http_date` reads RFC 1123 timestamps (``Expires``,
``Last-Modified``).  Neither ever raises on malformed input: a directive
that cannot be split is kept as a valueless name and a date that cannot be
parsed is reported as ``None``.
"""

from __future__ import annotations

import string
from datetime import datetime, timezone
from typing import Iterable, Optional

_RFC1123_FORMATS = (
    "%a, %d %b %Y %H:%M:%S GMT",
    "%a, %d %b %Y %H:%M:%S %z",
)


def _split_outside_quotes(value: str) -> list[str]:
    """Split *value* on commas that are not inside a quoted string."""
    parts: list[str] = []
    current: list[str] = []
    in_quotes = False
    for char in value:
        if char == '"':
            in_quotes = not in_quotes
        if char == "," and not in_quotes:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    parts.append("".join(current))
    return parts


class KeyValueHeader:
    """Directive map built from the values of a ``name=value, name`` style header.

    Directive names are case-insensitive and stored lowercased.  A
    directive without ``=`` is present with an empty value.  Values wrapped
    in double quotes are unquoted.  When a directive repeats, the first
    occurrence wins.

    Args:
        values: Every raw value of the header, e.g. from
            ``response.headers.get_list("Cache-Control")``.

    Example::

        cc = KeyValueHeader(["private, max-age=60"])
        cc.has("private")   # True
        cc.get("max-age")   # "60"
    """

    def __init__(self, values: Iterable[str]) -> None:
        self._directives: dict[str, str] = {}
        for raw in values:
            for part in _split_outside_quotes(raw):
                name, sep, value = part.partition("=")
                name = name.strip().lower()
                if not name or name in self._directives:
                    continue
                value = value.strip() if sep else ""
                if len(value) >= 2 and value[0] == value[-1] == '"':
                    value = value[1:-1]
                self._directives[name] = value

    def has(self, name: str) -> bool:
        """Return ``True`` if the directive *name* is present."""
        return name.lower() in self._directives

    def get(self, name: str, default: str = "") -> str:
        """Return the value of directive *name*, or *default* when absent."""
        return self._directives.get(name.lower(), default)

    def __len__(self) -> int:
        return len(self._directives)

    def __repr__(self) -> str:
        return f"KeyValueHeader({self._directives!r})"


def parse_int(value: str) -> int:
    """Parse a leading integer the way ``max-age`` values are read.

    Leading digits are used and the rest ignored; anything without leading
    digits (including an empty string) parses as ``0``.
    """
    value = value.strip()
    sign = 1
    if value[:1] in ("-", "+"):
        sign = -1 if value[0] == "-" else 1
        value = value[1:]
    digits = ""
    for char in value:
        if char not in string.digits:
            break
        digits += char
    return sign * int(digits) if digits else 0


def parse_http_date(value: Optional[str]) -> Optional[datetime]:
    """Parse an RFC 1123 date into an aware UTC :class:`datetime`.

    Returns:
        The parsed timestamp, or ``None`` when *value* is missing or not a
        valid RFC 1123 date (e.g. ``Expires: 0``).
    """
    if not value:
        return None
    value = value.strip()
    for fmt in _RFC1123_FORMATS:
        try:
            parsed = datetime.strptime(value, fmt)
            if parsed.tzinfo is None:
                return parsed.replace(tzinfo=timezone.utc)
            return parsed.astimezone(timezone.utc)
        except (ValueError, OverflowError):
            continue
    return None


def format_http_date(value: datetime) -> str:
    """Format *value* as an RFC 1123 ``GMT`` date string."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%a, %d %b %Y %H:%M:%S GMT")
