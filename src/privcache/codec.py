"""Versioned byte encoding for persisted cache entries.

Durable backends store entries as a UTF-8 JSON document::

    {
      "format": "privcache-entry",
      "version": 1,
      "entry": {
        "status_code": 200,
        "headers": [["Content-Type", "application/json"], ...],
        "content": "<base64>",
        "expires_at": "2026-01-01T00:00:00+00:00",
        "stored_at": "2025-12-31T23:59:00+00:00"
      }
    }

The format marker and version make corruption detection well-defined:
anything that is not exactly this shape raises :class:`EntryDecodeError`,
which storage backends translate into a cache miss.
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any

from pydantic import ValidationError

from privcache.entry import CacheEntry
from privcache.exceptions import EntryDecodeError

FORMAT_MARKER = "privcache-entry"
FORMAT_VERSION = 1


def encode_entry(entry: CacheEntry) -> bytes:
    """Serialise *entry* to bytes suitable for writing to a storage slot."""
    document = {
        "format": FORMAT_MARKER,
        "version": FORMAT_VERSION,
        "entry": {
            "status_code": entry.status_code,
            "headers": [list(pair) for pair in entry.headers],
            "content": base64.b64encode(entry.content).decode("ascii"),
            "expires_at": entry.expires_at.isoformat(),
            "stored_at": entry.stored_at.isoformat(),
        },
    }
    return json.dumps(document, separators=(",", ":")).encode("utf-8")


def decode_entry(data: bytes) -> CacheEntry:
    """Decode bytes produced by :func:`encode_entry`.

    Raises:
        EntryDecodeError: If *data* is not UTF-8 JSON (including JSON
            nested too deeply to parse), carries the wrong format marker or
            an unsupported version, or its payload does not validate as a
            :class:`CacheEntry`.
    """
    try:
        document = json.loads(data.decode("utf-8"))
    except (ValueError, RecursionError) as exc:
        raise EntryDecodeError(f"Payload is not a JSON document: {exc}") from exc

    if not isinstance(document, dict) or document.get("format") != FORMAT_MARKER:
        raise EntryDecodeError("Payload is not a privcache entry")
    version = document.get("version")
    if version != FORMAT_VERSION:
        raise EntryDecodeError(f"Unsupported entry format version: {version!r}")

    payload: Any = document.get("entry")
    if not isinstance(payload, dict):
        raise EntryDecodeError("Entry payload is missing")

    try:
        content = base64.b64decode(payload.get("content", ""), validate=True)
    except (binascii.Error, TypeError, ValueError) as exc:
        raise EntryDecodeError(f"Entry body is not valid base64: {exc}") from exc

    try:
        return CacheEntry.model_validate({**payload, "content": content})
    except ValidationError as exc:
        raise EntryDecodeError(f"Invalid entry payload: {exc}") from exc
