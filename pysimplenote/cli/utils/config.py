"""Configuration file handling for the pysimplenote CLI."""

import json
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from rich.console import Console

console = Console()

DEFAULT_EDITOR = "vim"


def config_dir() -> Path:
    """Directory holding config.json (``PYSIMPLENOTE_CONFIG_DIR`` overrides it)."""
    override = os.getenv("PYSIMPLENOTE_CONFIG_DIR")
    if override:
        return Path(override).expanduser()
    return Path("~/.config/pysimplenote").expanduser()


def config_path() -> Path:
    return config_dir() / "config.json"


class UserConfig(BaseModel):
    """Settings persisted between runs."""

    model_config = ConfigDict(extra="ignore")

    email: str = ""
    password: Optional[str] = Field(default=None, repr=False)
    markdown: bool = True
    editor: str = Field(default_factory=lambda: os.getenv("EDITOR") or DEFAULT_EDITOR)


def load_config() -> Optional[UserConfig]:
    """Load configuration from file, ``None`` when there is none yet."""
    path = config_path()
    if not path.exists():
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            return UserConfig.model_validate(json.load(f))
    except (json.JSONDecodeError, OSError, ValidationError) as exc:
        console.print(f"[yellow]Warning:[/yellow] Could not load config file: {exc}")
    return None


def save_config(config: UserConfig) -> None:
    """Save configuration to file."""
    path = config_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(config.model_dump(exclude_none=True), f, indent=2)
        # Ensure file has restrictive permissions
        os.chmod(path, 0o600)
    except OSError as exc:
        console.print(f"[yellow]Warning:[/yellow] Could not save config file: {exc}")
