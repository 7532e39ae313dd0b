"""Typer application and CLI entry point for crudwizard.

This module wires together the top-level Typer application and registers
the built-in commands (``init``, ``operations``, ``resources``, ``inspect``,
``invoke``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app.
Unhandled exceptions are written to a crash log under the data directory.

See Also:
    :mod:`crudwizard.config`: Profile and global configuration resolution.
    :mod:`crudwizard.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from crudwizard import __version__
from crudwizard.commands.init import init_command
from crudwizard.commands.inspect import inspect_command, operations_command, resources_command
from crudwizard.commands.invoke import invoke_command
from crudwizard.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="crudwizard",
    help="Invoke Swagger 2.0 operations by operationId.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"crudwizard {__version__}")
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
    profile: Optional[str] = typer.Option(
        None, "--profile", "-p", help="Profile name to use."
    ),
    spec: Optional[str] = typer.Option(
        None, "--spec", "-s", help="Use this Swagger document instead of a profile."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output and log records."
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-n", help="Print requests instead of sending them."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~crudwizard.output.OutputManager`, routes
    package log records to stderr, and stores shared options in
    ``ctx.obj`` for the sub-commands.
    """
    from crudwizard.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    output = OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose)
    set_output(output)
    output.install_log_handler()

    ctx.ensure_object(dict)
    ctx.obj["profile"] = profile
    ctx.obj["spec"] = spec
    ctx.obj["dry_run"] = dry_run
    ctx.obj["verbose"] = verbose


app.command("init")(init_command)
app.command("operations")(operations_command)
app.command("resources")(resources_command)
app.command("inspect")(inspect_command)
app.command("invoke")(invoke_command)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from crudwizard.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``crudwizard`` console script.

    :class:`~crudwizard.exceptions.CrudWizardError` instances cause a clean
    exit with the error's ``exit_code``. All other exceptions produce a crash
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
        from crudwizard.exceptions import CrudWizardError
        from crudwizard.output import error

        if isinstance(exc, CrudWizardError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
