"""Typer application wiring for the agentguides CLI."""

from __future__ import annotations

import os

import typer

from agentguides import __version__
from agentguides.core.configuration.constants import VERBOSITY_ENV_VAR

from .commands import build, guidelines, start

app = typer.Typer(
    name="agentguides",
    help="Select coding guidelines and bundle them into AI assistant configuration files.",
    invoke_without_command=True,
    add_completion=False,
    no_args_is_help=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"agentguides {__version__}")
        raise typer.Exit(0)


def _restore_env(key: str, value: str | None) -> None:
    if value is None:
        os.environ.pop(key, None)
    else:
        os.environ[key] = value


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging for this run."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the installed version and exit.",
    ),
) -> None:
    if verbose:
        previous = os.environ.get(VERBOSITY_ENV_VAR)
        os.environ[VERBOSITY_ENV_VAR] = "verbose"
        ctx.call_on_close(lambda: _restore_env(VERBOSITY_ENV_VAR, previous))
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)


build.register(app)
guidelines.register(app)
start.register(app)
