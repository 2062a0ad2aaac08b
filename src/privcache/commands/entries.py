"""Entry commands -- inspect, list, delete, and fetch cached responses.

All commands operate on the storage selected by the effective
configuration (config file, ``PRIVCACHE_*`` environment variables, and the
global ``--backend`` / ``--dir`` flags).  Storage faults surface as exit
codes from :mod:`privcache.exit_codes`.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, NoReturn, Optional

import httpx
import typer

from privcache.entry import CacheEntry, utc_now
from privcache.exceptions import (
    EntryNotFoundError,
    InvalidUsageError,
    PrivcacheError,
    StorageError,
)
from privcache.output import (
    error,
    format_response,
    info,
    print_data,
    print_table,
    success,
    warning,
)
from privcache.storage.base import CacheStorage


def _fail(exc: PrivcacheError) -> NoReturn:
    error(str(exc))
    raise typer.Exit(code=exc.exit_code)


@contextmanager
def _open_storage(ctx: typer.Context) -> Iterator[CacheStorage]:
    """Yield the configured storage backend and close it afterwards."""
    from privcache.config import resolve_config
    from privcache.models import StorageBackend
    from privcache.storage import create_storage

    obj = ctx.obj or {}
    try:
        config = resolve_config(obj.get("backend"), obj.get("directory"))
    except PrivcacheError as exc:
        _fail(exc)
    if config.backend == StorageBackend.MEMORY:
        warning("The memory backend keeps nothing between runs")

    storage = create_storage(config)
    try:
        yield storage
    finally:
        storage.close()


def _entry_summary(key: str, entry: CacheEntry) -> dict:
    now = utc_now()
    return {
        "key": key,
        "status_code": entry.status_code,
        "stored_at": entry.stored_at.isoformat(),
        "expires_at": entry.expires_at.isoformat(),
        "fresh": entry.is_fresh(now),
        "ttl_seconds": int(entry.ttl(now)),
        "etag": entry.etag,
        "last_modified": entry.last_modified,
        "size": len(entry.content),
        "headers": [list(pair) for pair in entry.headers],
    }


def key_command(
    method: str = typer.Argument(help="HTTP method, e.g. GET."),
    url: str = typer.Argument(help="Full request URL including query string."),
) -> None:
    """Print the cache key for a request.

    Example::

        privcache key GET "https://api.example.com/users?page=2"
    """
    from privcache.strategy.private import cache_key

    try:
        request = httpx.Request(method.upper(), url)
    except (httpx.InvalidURL, ValueError) as exc:
        _fail(InvalidUsageError(f"Invalid URL {url!r}: {exc}"))
    print_data(cache_key(request))


def show_command(
    ctx: typer.Context,
    key: str = typer.Argument(help="Cache key (see `privcache key`)."),
    body: bool = typer.Option(False, "--body", help="Print the stored body instead."),
) -> None:
    """Show a stored entry's status, headers, expiry, and freshness."""
    with _open_storage(ctx) as storage:
        entry = storage.fetch(key)
    if entry is None:
        _fail(EntryNotFoundError(f"No cache entry for key {key}"))
    if body:
        print_data(entry.content.decode("utf-8", errors="replace"))
        return
    format_response(_entry_summary(key, entry))


def delete_command(
    ctx: typer.Context,
    key: str = typer.Argument(help="Cache key to delete."),
) -> None:
    """Delete a stored entry.  Deleting a missing key succeeds."""
    with _open_storage(ctx) as storage:
        deleted = storage.delete(key)
    if not deleted:
        _fail(StorageError(f"Failed to delete cache entry {key}"))
    success(f"Deleted {key}")


def list_command(ctx: typer.Context) -> None:
    """List stored entries with status and expiry."""
    now = utc_now()
    rows: list[list[str]] = []
    with _open_storage(ctx) as storage:
        for key in storage.keys():
            entry = storage.fetch(key)
            if entry is None:
                rows.append([key, "-", "-", "unreadable"])
                continue
            rows.append([
                key,
                str(entry.status_code),
                entry.expires_at.isoformat(),
                "fresh" if entry.is_fresh(now) else "stale",
            ])
    if not rows:
        info("Cache is empty")
        return
    print_table(["key", "status", "expires_at", "state"], rows, title="Cached entries")


def clear_command(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation."),
) -> None:
    """Remove every stored entry."""
    if not force and not typer.confirm("Remove all cached entries?"):
        info("Aborted")
        raise typer.Exit()
    with _open_storage(ctx) as storage:
        removed = storage.clear()
    success(f"Removed {removed} entries")


def fetch_command(
    ctx: typer.Context,
    url: str = typer.Argument(help="URL to GET through the cache."),
    header: Optional[list[str]] = typer.Option(
        None, "--header", "-H", help="Extra request header, 'Name: value'."
    ),
    timeout: float = typer.Option(30.0, "--timeout", help="Request timeout in seconds."),
) -> None:
    """GET a URL through the cache and print the body.

    The status line on stderr reports whether the response was a cache
    ``HIT`` or ``MISS``.
    """
    from privcache.client import CACHE_STATUS_HEADER, CachingClient
    from privcache.strategy import PrivateCacheStrategy

    headers: dict[str, str] = {}
    for raw in header or []:
        name, sep, value = raw.partition(":")
        if not sep or not name.strip():
            _fail(InvalidUsageError(f"Invalid header {raw!r}, expected 'Name: value'"))
        headers[name.strip()] = value.strip()

    with _open_storage(ctx) as storage:
        strategy = PrivateCacheStrategy(storage)
        try:
            with CachingClient(strategy, timeout=timeout) as client:
                response = client.get(url, headers=headers)
        except httpx.HTTPError as exc:
            error(f"Request failed: {exc}")
            raise typer.Exit(code=1) from None

    info(
        f"HTTP {response.status_code} {response.reason_phrase or ''} "
        f"({response.headers.get(CACHE_STATUS_HEADER, 'MISS')})"
    )
    if response.content:
        print_data(response.text)


def register_entry_commands(app: typer.Typer) -> None:
    """Attach the entry commands to the root *app*."""
    app.command("key")(key_command)
    app.command("show")(show_command)
    app.command("delete")(delete_command)
    app.command("list")(list_command)
    app.command("clear")(clear_command)
    app.command("fetch")(fetch_command)
