"""Shared test fixtures for privcache.

Provides a fixed clock, response builders, isolated XDG directories, and
CLI helpers.  These fixtures are automatically discovered by pytest and
available to all test modules without explicit imports.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import httpx
import pytest

from privcache.output import reset_output

NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time, which go stale once CliRunner restores the streams.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Clock and message builders
# ---------------------------------------------------------------------------


@pytest.fixture
def now() -> datetime:
    """The fixed evaluation time used by strategy tests."""
    return NOW


@pytest.fixture
def clock():
    """A clock callable frozen at :data:`NOW`."""
    return lambda: NOW


def make_response(
    status_code: int = 200,
    headers: Optional[list[tuple[str, str]]] = None,
    content: bytes = b'{"id": 1}',
) -> httpx.Response:
    """Build an in-memory httpx.Response with the given headers."""
    return httpx.Response(
        status_code=status_code,
        headers=headers or [],
        content=content,
    )


def make_request(method: str = "GET", url: str = "https://api.example.com/users") -> httpx.Request:
    return httpx.Request(method, url)


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_CACHE_HOME to subdirectories of tmp_path
    so that tests never touch real user config, and clears all
    PRIVCACHE_* environment variables.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.setattr("privcache.config._is_xdg_platform", lambda: True)

    for var in ["PRIVCACHE_BACKEND", "PRIVCACHE_DIR", "PRIVCACHE_ENABLED"]:
        monkeypatch.delenv(var, raising=False)

    return tmp_path


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
