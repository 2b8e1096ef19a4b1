"""
Simplenote "wire" models for /api2/data and /api2/index payloads.

The API is loose with types: timestamps come back as float strings
("1418243413.123456"), bare numbers, or empty strings, and ``deleted`` is an
integer flag. These models normalize all of that at the boundary and convert
to/from the frozen DTOs in ``dto``.
"""

from __future__ import annotations

from typing import Annotated, List, Optional

from pydantic import BeforeValidator, Field, PlainSerializer, WithJsonSchema

from ._sn_base import SNModel
from .dto import Note, NoteIndexPage, NoteSummary

# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _to_epoch_seconds(v):
    # Fractions are dropped; only whole seconds are meaningful to the client.
    if v is None:
        return None
    if isinstance(v, bool):
        raise ValueError("Expected seconds since epoch, got a boolean")
    if isinstance(v, (int, float)):
        return int(v)
    if isinstance(v, str):
        head = v.strip().split(".")[0]
        if not head:
            return None
        if head.lstrip("-").isdigit():
            return int(head)
    raise ValueError("Expected seconds since epoch as number or numeric string")


def _to_flag(v):
    if isinstance(v, str):
        return v.strip().lower() in {"1", "true"}
    return bool(v)


EpochSeconds = Annotated[
    Optional[int],
    BeforeValidator(_to_epoch_seconds),
    PlainSerializer(
        lambda v: None if v is None else str(v),
        return_type=Optional[str],
        when_used="json",
    ),
    WithJsonSchema(
        {"type": ["string", "null"], "description": "seconds since Unix epoch"}
    ),
]

IntFlag = Annotated[
    bool,
    BeforeValidator(_to_flag),
    PlainSerializer(lambda v: 1 if v else 0, return_type=int, when_used="json"),
    WithJsonSchema({"type": "integer", "enum": [0, 1]}),
]


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


class NoteRecord(SNModel):
    """A note as sent to and returned by /api2/data (and summarized by /api2/index)."""

    key: str = ""
    content: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    systemtags: List[str] = Field(default_factory=list)
    deleted: IntFlag = False
    modifydate: EpochSeconds = None
    createdate: EpochSeconds = None
    sharekey: Optional[str] = None
    publishkey: Optional[str] = None
    version: Optional[int] = None
    syncnum: Optional[int] = None
    minversion: Optional[int] = None

    @classmethod
    def from_note(cls, note: Note) -> "NoteRecord":
        return cls(
            key=note.key,
            content=note.content,
            tags=list(note.tags),
            systemtags=list(note.system_tags),
            deleted=note.deleted,
            modifydate=note.modify_timestamp or None,
            createdate=note.create_timestamp or None,
        )

    def to_payload(self) -> dict:
        """JSON-ready body; unset fields are left for the server to fill."""
        payload = self.model_dump(mode="json", exclude_none=True)
        if not self.key:
            payload.pop("key", None)
        return payload

    def to_note(self) -> Note:
        return Note(
            key=self.key,
            content=self.content or "",
            tags=list(self.tags),
            system_tags=list(self.systemtags),
            deleted=self.deleted,
            modify_timestamp=self.modifydate or 0,
            create_timestamp=self.createdate or 0,
        )

    def to_summary(self) -> NoteSummary:
        return NoteSummary(
            key=self.key,
            tags=list(self.tags),
            deleted=self.deleted,
            modify_timestamp=self.modifydate or 0,
        )


class NoteIndexResponse(SNModel):
    """One page of /api2/index."""

    count: int = 0
    data: List[NoteRecord] = Field(default_factory=list)
    mark: Optional[str] = None

    def to_page(self) -> NoteIndexPage:
        return NoteIndexPage(
            items=[rec.to_summary() for rec in self.data],
            continuation_mark=self.mark or None,
        )


__all__ = ["EpochSeconds", "IntFlag", "NoteIndexResponse", "NoteRecord"]
