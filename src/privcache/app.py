"""Typer application and CLI entry point for privcache.

The CLI inspects and maintains a durable cache: print the key for a
request, show or delete stored entries, list and clear the storage, and
fetch URLs through :class:`~privcache.client.CachingClient`.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``.  Unhandled :class:`~privcache.exceptions.PrivcacheError`
instances exit with their ``exit_code``; anything else is written to a
crash log under the cache directory.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from privcache import __version__
from privcache.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="privcache",
    help="Inspect and maintain a private HTTP response cache.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"privcache {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    backend: Optional[str] = typer.Option(
        None, "--backend", "-b", help="Storage backend: memory, file, disk."
    ),
    directory: Optional[str] = typer.Option(
        None, "--dir", "-d", help="Cache directory for durable backends."
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~privcache.output.OutputManager` and stores
    the storage overrides in ``ctx.obj`` for sub-commands.
    """
    from privcache.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet))

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="[debug] %(name)s: %(message)s",
        )

    ctx.ensure_object(dict)
    ctx.obj["backend"] = backend
    ctx.obj["directory"] = directory


from privcache.commands.config import config_app  # noqa: E402
from privcache.commands.entries import register_entry_commands  # noqa: E402

register_entry_commands(app)
app.add_typer(config_app, name="config", help="Configuration management.")


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from privcache.config import get_cache_dir

    logs_dir = get_cache_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``privcache`` console script.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from privcache.exceptions import PrivcacheError
        from privcache.output import error

        if isinstance(exc, PrivcacheError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
