"""Configuration commands for the pysimplenote CLI."""

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from pysimplenote.cli.utils import config as config_utils
from pysimplenote.utils import (
    delete_password_in_keyring,
    mask_secret,
    password_exists_in_keyring,
)

app = typer.Typer(help="Configuration commands")
console = Console()


@app.command("show")
def show_config():
    """Show the active configuration."""
    config = config_utils.load_config()
    if config is None:
        console.print(
            f"[yellow]No configuration found at {config_utils.config_path()}[/yellow]"
        )
        return

    table = Table("Setting", "Value")
    table.add_row("path", str(config_utils.config_path()))
    table.add_row("email", config.email)
    table.add_row("password", mask_secret(config.password) or "(keyring/prompt)")
    table.add_row("markdown", str(config.markdown).lower())
    table.add_row("editor", config.editor)
    console.print(table)


@app.command("set")
def set_config(
    email: Optional[str] = typer.Option(None, help="Simplenote account email"),
    markdown: Optional[bool] = typer.Option(
        None, help="Flag new notes as markdown"
    ),
    editor: Optional[str] = typer.Option(None, help="Editor used for notes"),
):
    """Update configuration values."""
    if email is None and markdown is None and editor is None:
        console.print("[yellow]Warning:[/yellow] No updates specified")
        return

    config = config_utils.load_config() or config_utils.UserConfig()
    if email is not None:
        config.email = email
    if markdown is not None:
        config.markdown = markdown
    if editor is not None:
        config.editor = editor
    config_utils.save_config(config)
    console.print(f"Saved configuration to {config_utils.config_path()}")


@app.command("forget-password")
def forget_password(
    email: Optional[str] = typer.Option(None, help="Simplenote account email"),
):
    """Remove the saved password from the keyring."""
    config = config_utils.load_config()
    account = email or (config.email if config else "")
    if not account:
        console.print("[yellow]Warning:[/yellow] No account configured")
        raise typer.Exit(1)
    if not password_exists_in_keyring(account):
        console.print(f"No password stored in keyring for {account}")
        return
    delete_password_in_keyring(account)
    console.print(f"Removed keyring password for {account}")
