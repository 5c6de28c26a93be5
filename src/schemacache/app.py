"""Typer application and CLI entry point for schemacache.

This module wires together the top-level Typer application and registers the
schema commands (``fetch``, ``register``, ``subjects``, ``versions``,
``show``, ``check``) and the ``config`` sub-group.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app.
:class:`~schemacache.exceptions.SchemacacheError` is mapped to its exit
code; any other exception is written to a crash log under the data
directory.

See Also:
    :mod:`schemacache.config`: Configuration resolution.
    :mod:`schemacache.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from schemacache import __version__
from schemacache.commands.config import config_app
from schemacache.commands.schemas import (
    check_command,
    fetch_command,
    register_command,
    show_command,
    subjects_command,
    versions_command,
)
from schemacache.exit_codes import EXIT_GENERIC_FAILURE
from schemacache.output import OutputFormat


app = typer.Typer(
    name="schemacache",
    help="Cached schema registry lookups.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("fetch")(fetch_command)
app.command("register")(register_command)
app.command("subjects")(subjects_command)
app.command("versions")(versions_command)
app.command("show")(show_command)
app.command("check")(check_command)
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"schemacache {__version__}")
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
    registry_url: Optional[str] = typer.Option(
        None, "--registry-url", "-r", help="Schema registry base URL."
    ),
    cache_dir: Optional[str] = typer.Option(
        None, "--cache-dir", help="Directory for cache snapshots."
    ),
    no_cache: bool = typer.Option(
        False, "--no-cache", help="Keep the cache in memory only."
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
    force: bool = typer.Option(
        False, "--force", "-f", help="Skip confirmations."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~schemacache.output.OutputManager` from
    CLI flags, falling back to the ``output.format`` config value, and
    stores the connection overrides in ``ctx.obj`` for the
    commands to resolve. ``--verbose`` also routes library log records
    (cache hits and misses, snapshot reads and writes) to stderr.
    """
    from schemacache.output import OutputManager, set_output

    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    else:
        fmt = _stored_format()

    set_output(
        OutputManager(
            format=fmt,
            no_color=no_color,
            quiet=quiet,
            verbose=verbose,
        )
    )
    if verbose:
        _setup_logging()

    ctx.ensure_object(dict)
    ctx.obj["registry_url"] = registry_url
    ctx.obj["cache_dir"] = cache_dir
    ctx.obj["no_cache"] = no_cache
    ctx.obj["force"] = force
    ctx.obj["verbose"] = verbose


def _stored_format() -> OutputFormat:
    """Return ``output.format`` from the global config.

    An unreadable config file yields ``AUTO`` here; commands that need the
    config report the error themselves, and ``config reset`` must still run.
    """
    from schemacache.config import load_global_config
    from schemacache.exceptions import ConfigError

    try:
        return OutputFormat(load_global_config().output.format)
    except ConfigError:
        return OutputFormat.AUTO


def _setup_logging() -> None:
    """Send ``schemacache`` debug logs to stderr through Rich."""
    from rich.console import Console
    from rich.logging import RichHandler

    handler = RichHandler(console=Console(stderr=True), show_path=False)
    package_logger = logging.getLogger("schemacache")
    package_logger.handlers[:] = [handler]
    package_logger.setLevel(logging.DEBUG)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from schemacache.config import get_data_dir

    logs_dir = get_data_dir()
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``schemacache`` console script.

    Unhandled :class:`~schemacache.exceptions.SchemacacheError` instances
    cause a clean exit with the error's ``exit_code``. All other exceptions
    produce a crash log and a generic failure exit.

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
        from schemacache.exceptions import SchemacacheError
        from schemacache.output import error

        if isinstance(exc, SchemacacheError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
