"""Config commands -- view and modify the cache configuration.

Provides the ``privcache config`` sub-command group for reading and
updating the configuration file (:class:`~privcache.models.CacheConfig`).
"""

from __future__ import annotations

import typer

from privcache.output import error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Show the effective configuration.

    Applies environment variables and the global ``--backend`` / ``--dir``
    flags on top of the config file, and reports the storage directory a
    durable backend would use.

    Example::

        privcache config show
        privcache --json config show
    """
    from privcache.config import get_config_dir, resolve_config, resolve_storage_dir
    from privcache.exceptions import ConfigError
    from privcache.models import StorageBackend

    obj = ctx.obj or {}
    try:
        config = resolve_config(obj.get("backend"), obj.get("directory"))
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    info(f"Config directory: {get_config_dir()}")
    data = config.model_dump(mode="json")
    if config.backend != StorageBackend.MEMORY:
        data["storage_directory"] = str(resolve_storage_dir(config))
    format_response(data)


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Config key: enabled, backend, or directory."),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value in the config file.

    The value is coerced to the field's type and the result is validated
    against :class:`~privcache.models.CacheConfig` before saving.

    Example::

        privcache config set backend disk
        privcache config set directory ~/.cache/my-api
        privcache config set enabled false
    """
    from pydantic import ValidationError

    from privcache.config import load_config, parse_bool, save_config
    from privcache.exceptions import ConfigError
    from privcache.models import CacheConfig

    try:
        config = load_config()
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    data = config.model_dump(mode="json")
    if key not in data:
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    coerced: object = value
    if isinstance(data[key], bool):
        try:
            coerced = parse_bool(key, value)
        except ConfigError as exc:
            error(str(exc))
            raise typer.Exit(code=2) from None
    elif key == "directory" and value.lower() in ("", "none", "null"):
        coerced = None
    data[key] = coerced

    try:
        new_config = CacheConfig.model_validate(data)
    except ValidationError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_config(new_config)
    success(f"Set {key} = {coerced}")
