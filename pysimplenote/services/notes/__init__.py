"""Public API for the Notes service."""

from .client import RequestDispatcher, RetryPolicy
from .fetcher import NoteBodyFetcher
from .index import NoteIndexFetcher
from .models import Credentials, Note, NoteIndexPage, NoteSummary
from .presenter import FormattedRecord, present
from .request import Action, RequestDescriptor
from .service import NotesResult, NotesService
from .session import SessionManager

__all__ = [
    "Action",
    "Credentials",
    "FormattedRecord",
    "Note",
    "NoteBodyFetcher",
    "NoteIndexFetcher",
    "NoteIndexPage",
    "NoteSummary",
    "NotesResult",
    "NotesService",
    "RequestDescriptor",
    "RequestDispatcher",
    "RetryPolicy",
    "SessionManager",
    "present",
]
