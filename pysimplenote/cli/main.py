#!/usr/bin/env python
"""Command line client for Simplenote."""

import logging
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from pysimplenote.cli.commands import config, notes

app = typer.Typer(help="Command Line Interface for Simplenote")
console = Console()

app.command("new")(notes.new_note)
app.command("list")(notes.list_notes)
app.command("get")(notes.get_note)
app.command("edit")(notes.edit_note)
app.command("delete")(notes.delete_note)
app.command("version")(notes.version)
app.add_typer(config.app, name="config")


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[
            RichHandler(
                rich_tracebacks=True,
                markup=False,
                show_time=True,
                log_time_format="%H:%M:%S",
            )
        ],
    )
    # urllib3 is chatty at DEBUG and would leak query strings.
    logging.getLogger("urllib3").setLevel(logging.WARNING)


@app.callback()
def callback(
    ctx: typer.Context,
    email: Optional[str] = typer.Option(None, help="Simplenote account email"),
    password: Optional[str] = typer.Option(None, help="Simplenote password"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logs"),
):
    """Take notes from the terminal and keep them in Simplenote."""
    setup_logging(verbose)
    ctx.obj = {"email": email, "password": password}


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
