"""Main Typer application — entry point for the ``sessionprobe`` CLI."""

from __future__ import annotations

import typer

from sessionprobe import __version__
from sessionprobe.cli.list_cmd import list_cmd
from sessionprobe.cli.run import run_cmd

app = typer.Typer(
    name="sessionprobe",
    help="Verify session-fixation protection for HTTP Basic authentication.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.command("run", help="Run fixation scenarios against a target.")(run_cmd)
app.command("list", help="List the available scenarios.")(list_cmd)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"sessionprobe {__version__}")
        raise typer.Exit


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """SessionProbe — verify session-fixation protection for HTTP Basic auth."""
