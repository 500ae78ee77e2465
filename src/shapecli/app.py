"""Typer application and CLI entry point for shapecli.

This module builds the root Typer application and registers the built-in
commands: ``generate``, ``signatures``, ``validate`` and ``example`` on the
root, plus the ``inspect`` and ``config`` groups.

:func:`main` is the console-script entry point declared in
``pyproject.toml``.  It installs a SIGINT handler, invokes the app, maps
:class:`~shapecli.exceptions.ShapecliError` to its exit code, and writes a
crash log under the data directory for anything else.

See Also:
    :mod:`shapecli.config`: Configuration resolution.
    :mod:`shapecli.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import TYPE_CHECKING, Any

import typer

from shapecli import __version__
from shapecli.exit_codes import EXIT_GENERIC_FAILURE

if TYPE_CHECKING:
    from shapecli.output import OutputFormat


app = typer.Typer(
    name="shapecli",
    help="Compile AWS service models into typed shell command signatures.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

# ------------------------------------------------------------------ #
# Commands
# ------------------------------------------------------------------ #

from shapecli.commands.config import config_app  # noqa: E402
from shapecli.commands.generate import (  # noqa: E402
    example_command,
    generate_command,
    signatures_command,
    validate_command,
)
from shapecli.commands.inspect import inspect_app  # noqa: E402

app.command("generate")(generate_command)
app.command("signatures")(signatures_command)
app.command("validate")(validate_command)
app.command("example")(example_command)
app.add_typer(inspect_app, name="inspect", help="Inspect what a model compiles to.")
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"shapecli {__version__}")
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
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output and logging."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~shapecli.output.OutputManager` from the
    flags.  Without ``--json`` or ``--plain`` the format stored in the
    global config applies.  ``--verbose`` additionally routes library
    ``logging`` output at DEBUG level to stderr.
    """
    from shapecli.output import OutputFormat, OutputManager, set_output

    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    else:
        fmt = _configured_format()

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(levelname)s %(name)s: %(message)s",
        )

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


def _configured_format() -> OutputFormat:
    """Output format from the global config, ``AUTO`` when unset or unknown."""
    from shapecli.config import load_global_config
    from shapecli.exceptions import ConfigError
    from shapecli.output import OutputFormat

    try:
        stored = load_global_config().output.format
    except ConfigError:
        # Unreadable config: fall back to AUTO.
        return OutputFormat.AUTO
    try:
        return OutputFormat(stored)
    except ValueError:
        return OutputFormat.AUTO


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write the current traceback to ``<data_dir>/logs`` and return the path."""
    from shapecli.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``shapecli`` console script.

    Unhandled :class:`~shapecli.exceptions.ShapecliError` instances exit
    with the error's ``exit_code``.  Any other exception produces a crash
    log and a generic failure exit.

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
        from shapecli.exceptions import ShapecliError
        from shapecli.output import error

        if isinstance(exc, ShapecliError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
