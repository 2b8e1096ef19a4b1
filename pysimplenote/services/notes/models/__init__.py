"""Public exports for Notes service data models."""

from __future__ import annotations

from .dto import Credentials, Note, NoteIndexPage, NoteSummary
from .wire import NoteIndexResponse, NoteRecord

__all__ = [
    "Credentials",
    "Note",
    "NoteIndexPage",
    "NoteIndexResponse",
    "NoteRecord",
    "NoteSummary",
]
