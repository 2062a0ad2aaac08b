"""Configuration models shared across privcache modules.

These are serialised as JSON in the user's config directory and loaded by
:func:`~privcache.config.load_config`.  The cache entry itself lives in
:mod:`privcache.entry` because it is a domain object rather than
configuration.
"""

from __future__ import annotations

import enum
from typing import Optional

from pydantic import BaseModel, Field


class StorageBackend(str, enum.Enum):
    """Storage backends selectable from configuration."""

    MEMORY = "memory"
    FILE = "file"
    DISK = "disk"


class CacheConfig(BaseModel):
    """HTTP response cache settings persisted at ``~/.config/privcache/config.json``.

    Fields here have the lowest precedence and can be overridden by
    environment variables or CLI flags.  See
    :func:`~privcache.config.resolve_config` for the full precedence chain.

    Example::

        CacheConfig(backend="disk", directory="/var/tmp/http-cache")
    """

    enabled: bool = Field(default=True, description="Enable response caching")
    backend: StorageBackend = Field(
        default=StorageBackend.FILE,
        description="Storage backend: memory, file, disk",
    )
    directory: Optional[str] = Field(
        default=None,
        description="Directory for durable backends (defaults to the XDG cache dir)",
    )
