"""Credential resolution and service construction for the pysimplenote CLI."""

from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel

from pysimplenote.services.notes import Credentials, NotesService
from pysimplenote.utils import (
    get_password_from_keyring,
    password_exists_in_keyring,
    store_password_in_keyring,
)

from .config import UserConfig, load_config, save_config

console = Console()


def _create_config(email: Optional[str] = None) -> UserConfig:
    """Prompt for the account details and write a fresh config file."""
    console.print("Creating new pysimplenote configuration file")
    resolved_email: str = email or typer.prompt("Simplenote email")
    password: str = typer.prompt("Simplenote password", hide_input=True)

    config = UserConfig(email=resolved_email.strip())
    if typer.confirm("Save password in keyring?", default=True):
        store_password_in_keyring(config.email, password)
    else:
        config.password = password
    save_config(config)
    return config


def get_config(email: Optional[str] = None) -> UserConfig:
    """Loaded config, created interactively on first run."""
    config = load_config()
    if config is None or not config.email:
        config = _create_config(email)
    if email:
        config.email = email
    return config


def _get_password(config: UserConfig, provided_password: Optional[str] = None) -> str:
    """Password from the option, the config file, the keyring, or a prompt."""
    if provided_password:
        return provided_password
    if config.password:
        return config.password

    password = get_password_from_keyring(config.email)
    if not password:
        password = typer.prompt("Simplenote password", hide_input=True)
        if not password_exists_in_keyring(config.email) and typer.confirm(
            "Save password in keyring?", default=False
        ):
            store_password_in_keyring(config.email, password)
    return password


def auth_help_panel() -> Panel:
    return Panel(
        "Please check your Simplenote email and password are correct.\n"
        "Run 'pysimplenote config set --email ...' to change the account, "
        "or remove the saved password from your keyring.",
        title="Authentication Help",
        border_style="red",
    )


def get_service(
    email: Optional[str] = None,
    password: Optional[str] = None,
    config: Optional[UserConfig] = None,
) -> NotesService:
    """Build a NotesService for the configured account.

    Authorization itself is lazy: the first request logs in.
    """
    resolved = config or get_config(email)
    credentials = Credentials(
        email=resolved.email, password=_get_password(resolved, password)
    )
    return NotesService(credentials, markdown=resolved.markdown)
