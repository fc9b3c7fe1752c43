"""Typer application and CLI entry point for fzfkit.

This module wires together the top-level Typer application:

* ``init`` -- print the load script for ``eval`` in a shell rc file.
* ``env`` -- show the variables a load would export.
* ``preview`` -- show the preview expression chosen for a command.
* ``comprun`` -- run the preview dispatcher against the real fzf.
* ``config`` -- view and modify the configuration file.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app;
:class:`~fzfkit.exceptions.FzfkitError` maps to its exit code and any other
exception is written to a crash log under the data directory.
"""

from __future__ import annotations

import logging
import os
import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from fzfkit import __version__
from fzfkit.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="fzfkit",
    help="Wire fzf into your shell with fd listings and eza/bat previews.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"fzfkit {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool, no_color: bool) -> None:
    """Route library log records to stderr; debug level with ``--verbose``."""
    root = logging.getLogger("fzfkit")
    root.handlers.clear()
    handler = RichHandler(
        console=Console(stderr=True, no_color=no_color),
        show_time=False,
        show_path=False,
    )
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)
    root.propagate = False


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
    shell: Optional[str] = typer.Option(
        None, "--shell", "-s", help="Target shell (zsh or bash)."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmations."),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~fzfkit.output.OutputManager`, configures
    logging, and stores shared options in ``ctx.obj``.
    """
    from fzfkit.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))
    _configure_logging(verbose, no_color)

    ctx.ensure_object(dict)
    ctx.obj["shell"] = shell
    ctx.obj["force"] = force


def _plugin_and_config(ctx: typer.Context, shell: Optional[str] = None):
    """Resolve config (CLI > env > file) and build the fzf plugin."""
    from fzfkit.config import resolve_config
    from fzfkit.plugins import FzfPlugin

    obj = ctx.obj or {}
    config = resolve_config(cli_shell=shell or obj.get("shell"))
    return FzfPlugin(config), config


def _scratch_load(plugin: Any):
    """Load *plugin* into a session over a copy of the current environment."""
    from fzfkit.session import ShellSession

    session = ShellSession(environ=dict(os.environ))
    plugin.initialize(session)
    return session


@app.command("init")
def init_command(
    ctx: typer.Context,
    shell: Optional[str] = typer.Argument(
        None, help="Shell to generate for (zsh, bash). Defaults to the configured shell."
    ),
) -> None:
    """Print the script that loads the fzf integration.

    The script exports the ``FZF_*`` variables, defines the completion
    helpers and ``_fzf_comprun``, sources the companion script when present,
    and defines ``fzf_plugin_unload`` to reverse all of it.

    Example::

        eval "$(fzfkit init zsh)"
        eval "$(fzfkit init bash)"
    """
    from fzfkit.output import debug, print_data
    from fzfkit.plugins.fzf.plugin import UNLOAD_FUNCTION
    from fzfkit.render import render_script

    plugin, config = _plugin_and_config(ctx, shell)
    session = _scratch_load(plugin)
    debug(f"Rendering {len(session.journal)} operations for {config.shell.value}")
    print_data(render_script(session.journal, config.shell, guard=UNLOAD_FUNCTION))


@app.command("env")
def env_command(ctx: typer.Context) -> None:
    """Show the environment variables a load would export.

    Each row shows the new value next to the value in the current
    environment (``-`` when unset).
    """
    from fzfkit.output import print_table
    from fzfkit.session import Export

    plugin, _ = _plugin_and_config(ctx)
    session = _scratch_load(plugin)
    rows = [
        [op.name, op.value, os.environ.get(op.name, "-")]
        for op in session.journal
        if isinstance(op, Export)
    ]
    print_table(["Variable", "Value", "Current"], rows, title="fzf environment")


@app.command("preview")
def preview_command(
    ctx: typer.Context,
    command: str = typer.Argument(help="Command being completed (e.g. cd, ssh)."),
) -> None:
    """Print the preview expression used when completing COMMAND."""
    from fzfkit.output import print_data

    plugin, _ = _plugin_and_config(ctx)
    print_data(plugin.dispatcher.preview_for(command))


@app.command(
    "comprun",
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
)
def comprun_command(
    ctx: typer.Context,
    command: str = typer.Argument(help="Command being completed."),
    args: Optional[list[str]] = typer.Argument(None, help="Arguments passed on to fzf."),
) -> None:
    """Run fzf with the preview chosen for COMMAND.

    Selected items are printed to stdout; the exit code is fzf's own
    (1 when nothing matched, 130 when aborted).
    """
    from fzfkit.output import print_data

    plugin, _ = _plugin_and_config(ctx)
    result = plugin.dispatcher.dispatch(command, [*(args or []), *ctx.args])
    for line in result.selected:
        print_data(line)
    if result.returncode != 0:
        raise typer.Exit(code=result.returncode)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from fzfkit.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def _register_commands() -> None:
    from fzfkit.commands.config import config_app

    if not any(group.name == "config" for group in app.registered_groups):
        app.add_typer(config_app, name="config", help="Configuration management.")


_register_commands()


def main() -> None:
    """CLI entry point invoked by the ``fzfkit`` console script.

    Unhandled :class:`~fzfkit.exceptions.FzfkitError` instances cause a
    clean exit with the error's ``exit_code``. All other exceptions produce
    a crash log and a generic failure exit.

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
        from fzfkit.exceptions import FzfkitError
        from fzfkit.output import error

        if isinstance(exc, FzfkitError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
