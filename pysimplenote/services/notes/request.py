"""Immutable request descriptor handed over by the command-line layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from pysimplenote.const import NOTE_KEY_LENGTH
from pysimplenote.exceptions import RequestValidationError


class Action(str, Enum):
    CREATE = "create"
    LIST = "list"
    EDIT = "edit"
    DELETE = "delete"
    GET = "get"
    VERSION = "version"
    NONE = "none"

    @property
    def requires_key(self) -> bool:
        return self in (Action.EDIT, Action.DELETE, Action.GET)


def validate_key(key: Optional[str]) -> str:
    """Return ``key`` or raise before anything touches the network."""
    if not key:
        raise RequestValidationError("Missing note key parameter.")
    # Length is checked as given; padding makes a key invalid.
    if len(key) != NOTE_KEY_LENGTH or key != key.strip():
        raise RequestValidationError(
            f"Invalid identifier passed: keys are {NOTE_KEY_LENGTH} characters long"
        )
    return key


def _flag_bool(value: Optional[str]) -> bool:
    return (value or "").strip().lower() == "true"


@dataclass(frozen=True)
class RequestDescriptor:
    action: Action = Action.NONE
    key: Optional[str] = None
    content: str = ""
    tags: List[str] = field(default_factory=list)
    flags: Dict[str, str] = field(default_factory=dict)

    @property
    def limit(self) -> int:
        """``-n``: how many notes to show; -1 (or garbage) means all."""
        try:
            return int(self.flags.get("n", "-1"))
        except ValueError:
            return -1

    @property
    def include_deleted(self) -> bool:
        return _flag_bool(self.flags.get("deleted"))

    @property
    def permanently(self) -> bool:
        return _flag_bool(self.flags.get("permanently"))

    def validate(self) -> "RequestDescriptor":
        if self.action.requires_key:
            validate_key(self.key)
        return self
