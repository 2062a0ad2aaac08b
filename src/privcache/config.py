"""Configuration management with XDG paths, atomic writes, and precedence resolution.

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.privcache/`` on macOS and Windows.  See :func:`get_config_dir` and
  :func:`get_cache_dir`.
* **Config file** -- a single :class:`~privcache.models.CacheConfig` JSON
  file at ``<config_dir>/config.json``.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, and the config file into the effective
  configuration.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from privcache.exceptions import ConfigError
from privcache.models import CacheConfig, StorageBackend

_APP_NAME = "privcache"
_CONFIG_FILENAME = "config.json"

ENV_BACKEND = "PRIVCACHE_BACKEND"
ENV_DIRECTORY = "PRIVCACHE_DIR"
ENV_ENABLED = "PRIVCACHE_ENABLED"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/privcache/`` (default ``~/.config/privcache/``).
    On macOS/Windows: ``~/.privcache/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_cache_dir() -> Path:
    """Return the cache directory, creating it if necessary.

    Cached data can be safely deleted at any time.

    On Linux/BSD: ``$XDG_CACHE_HOME/privcache/`` (default ``~/.cache/privcache/``).
    On macOS/Windows: ``~/.privcache/cache/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CACHE_HOME", (".cache",)) / _APP_NAME
    else:
        path = _fallback_base_dir() / "cache"
    path.mkdir(parents=True, exist_ok=True)
    return path


def resolve_storage_dir(config: CacheConfig) -> Path:
    """Return the directory a durable backend should use for *config*."""
    if config.directory:
        return Path(config.directory).expanduser()
    return get_cache_dir() / "entries"


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename."""
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Config file ---


def _config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_config() -> CacheConfig:
    """Load the configuration file from the XDG config directory.

    Returns:
        The deserialised :class:`~privcache.models.CacheConfig`.  If the
        file does not exist, a default instance is returned.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = _config_path()
    if not path.is_file():
        return CacheConfig()
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
        return CacheConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc


def save_config(config: CacheConfig) -> None:
    """Persist the configuration atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(_config_path(), json.dumps(data, indent=2) + "\n")


# --- Precedence resolution ---


def parse_bool(name: str, value: str) -> bool:
    """Parse an on/off string; anything unrecognised raises :class:`ConfigError`."""
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ConfigError(f"Invalid boolean for {name}: {value!r}")


def resolve_config(
    cli_backend: Optional[str] = None,
    cli_directory: Optional[str] = None,
) -> CacheConfig:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_backend``, ``cli_directory``)
        2. Environment variables (``PRIVCACHE_BACKEND``, ``PRIVCACHE_DIR``,
           ``PRIVCACHE_ENABLED``)
        3. User config (``~/.config/privcache/config.json``)
        4. Defaults

    Raises:
        ConfigError: If the config file is invalid or an override names an
            unknown backend.
    """
    data = load_config().model_dump(mode="json")

    env_backend = os.environ.get(ENV_BACKEND)
    if env_backend:
        data["backend"] = env_backend
    env_directory = os.environ.get(ENV_DIRECTORY)
    if env_directory:
        data["directory"] = env_directory
    env_enabled = os.environ.get(ENV_ENABLED)
    if env_enabled:
        data["enabled"] = parse_bool(ENV_ENABLED, env_enabled)

    if cli_backend is not None:
        data["backend"] = cli_backend
    if cli_directory is not None:
        data["directory"] = cli_directory

    try:
        return CacheConfig.model_validate(data)
    except ValidationError as exc:
        choices = ", ".join(b.value for b in StorageBackend)
        raise ConfigError(f"Invalid cache configuration (backends: {choices}): {exc}") from exc
