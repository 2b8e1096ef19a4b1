"""
Turns fetched notes into display records.

Pure functions, no I/O: ordering, limiting and text shaping happen here and
the CLI only decides colours.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Sequence

from .models import Note

NOTE_HEADER_LENGTH = 80
TAG_PREFIX = "@"
ELLIPSIS = "..."
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class FormattedRecord:
    key: str
    text: str
    modified: str
    tags: str


def format_timestamp(ts: int) -> str:
    return datetime.fromtimestamp(ts).strftime(DATE_FORMAT)


def format_tags(tags: Iterable[str]) -> str:
    return ", ".join(f"{TAG_PREFIX}{t}" for t in tags)


def _strip_leading_blank_lines(content: str) -> List[str]:
    lines = content.split("\n")
    for i, line in enumerate(lines):
        if line.strip():
            return lines[i:]
    return []


def format_text(content: str, shorten: bool = True) -> str:
    """First non-blank line (capped at 80 chars) or the whole body from there on."""
    lines = _strip_leading_blank_lines(content)
    if not lines:
        return ""
    if not shorten:
        return "\n".join(lines)
    header = lines[0]
    if len(header) > NOTE_HEADER_LENGTH:
        return header[:NOTE_HEADER_LENGTH] + ELLIPSIS
    return header


def format_record(note: Note, shorten: bool = True) -> FormattedRecord:
    return FormattedRecord(
        key=note.key,
        text=format_text(note.content, shorten=shorten),
        modified=format_timestamp(note.modify_timestamp),
        tags=format_tags(note.tags),
    )


def select(notes: Sequence[Note], limit: int = -1) -> List[Note]:
    """Oldest-first, non-empty notes; with ``limit >= 0`` only the newest ``limit``."""
    ordered = sorted(notes, key=lambda n: n.modify_timestamp)
    kept = [n for n in ordered if n.content != ""]
    if limit >= 0:
        kept = kept[len(kept) - min(limit, len(kept)) :]
    return kept


def present(
    notes: Sequence[Note], limit: int = -1, shorten: bool = True
) -> List[FormattedRecord]:
    return [format_record(n, shorten=shorten) for n in select(notes, limit)]
