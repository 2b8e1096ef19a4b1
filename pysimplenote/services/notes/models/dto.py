"""High-level Notes data transfer objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from pysimplenote.const import MARKDOWN_SYSTEM_TAG


@dataclass(frozen=True)
class NoteSummary:
    """Index entry: enough metadata to decide which bodies to fetch."""

    key: str
    tags: List[str]
    deleted: bool
    modify_timestamp: int


@dataclass(frozen=True)
class Note:
    """Full note payload returned by /api2/data/<key>."""

    key: str = ""
    content: str = ""
    tags: List[str] = field(default_factory=list)
    system_tags: List[str] = field(default_factory=list)
    deleted: bool = False
    modify_timestamp: int = 0
    create_timestamp: int = 0

    @property
    def is_persisted(self) -> bool:
        """``False`` until the server has assigned a key."""
        return self.key != ""

    @property
    def is_markdown(self) -> bool:
        return MARKDOWN_SYSTEM_TAG in self.system_tags


@dataclass(frozen=True)
class NoteIndexPage:
    items: List[NoteSummary]
    continuation_mark: Optional[str] = None

    @property
    def has_more(self) -> bool:
        return bool(self.continuation_mark)


@dataclass(frozen=True)
class Credentials:
    email: str
    password: str = field(repr=False)
