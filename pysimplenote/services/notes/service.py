"""
High-level Notes service.

Public API:
  - NotesService.authorize() -> str
  - NotesService.list(tags=(), include_deleted=False) -> List[Note]
  - NotesService.get(key) -> Note
  - NotesService.create(content, tags=()) -> Note
  - NotesService.update(note) -> Note
  - NotesService.edit(key, editor) -> Note
  - NotesService.delete(key, permanently=False) -> Note
  - NotesService.handle(request, editor=None) -> NotesResult

The service only wires the narrow components together (session, dispatcher,
index fetcher, body fetcher, presenter); each of them can be used on its own.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, replace
from typing import Callable, Iterable, List, Optional

import requests
from pydantic import ValidationError

from pysimplenote.const import (
    API_ROOT,
    AUTH_PATH,
    DATA_PATH,
    DEFAULT_FETCH_TIMEOUT,
    DEFAULT_MAX_WORKERS,
    DEFAULT_REQUEST_TIMEOUT,
    INDEX_PATH,
    MARKDOWN_SYSTEM_TAG,
    VERSION,
)
from pysimplenote.exceptions import (
    NotesDecodeError,
    NotesRequestError,
    RequestValidationError,
)

from .client import RequestDispatcher, RetryPolicy, _SimplenoteHTTP
from .fetcher import NoteBodyFetcher
from .index import NoteIndexFetcher
from .models import Credentials, Note, NoteRecord
from .presenter import FormattedRecord, format_record, present
from .request import Action, RequestDescriptor, validate_key
from .session import SessionManager

LOGGER = logging.getLogger(__name__)

Editor = Callable[[str], str]


@dataclass(frozen=True)
class NotesResult:
    """What ``handle`` hands back to the renderer."""

    action: Action
    notes: List[Note] = field(default_factory=list)
    records: List[FormattedRecord] = field(default_factory=list)
    message: Optional[str] = None


def version_string() -> str:
    return f"pysimplenote {VERSION}"


class NotesService:
    """Simplenote account access: list, read, create, edit and delete notes."""

    def __init__(
        self,
        credentials: Credentials,
        session: Optional[requests.Session] = None,
        *,
        api_root: str = API_ROOT,
        markdown: bool = False,
        retry_policy: Optional[RetryPolicy] = None,
        fetch_timeout: float = DEFAULT_FETCH_TIMEOUT,
        max_workers: int = DEFAULT_MAX_WORKERS,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ):
        root = api_root.rstrip("/")
        self._markdown = markdown
        self._fetch_timeout = fetch_timeout
        self._data_url = f"{root}{DATA_PATH}"

        transport = _SimplenoteHTTP(session, timeout=request_timeout)
        self._session = SessionManager(transport, credentials, f"{root}{AUTH_PATH}")
        self._dispatcher = RequestDispatcher(transport, self._session, retry_policy)
        self._index = NoteIndexFetcher(self._dispatcher, f"{root}{INDEX_PATH}")
        self._bodies = NoteBodyFetcher(
            self._dispatcher, self._data_url, max_workers=max_workers
        )
        LOGGER.debug("NotesService initialized for %s", root)

    # -------------------------- Components -----------------------------------

    @property
    def session(self) -> SessionManager:
        return self._session

    @property
    def dispatcher(self) -> RequestDispatcher:
        return self._dispatcher

    @property
    def index(self) -> NoteIndexFetcher:
        return self._index

    @property
    def bodies(self) -> NoteBodyFetcher:
        return self._bodies

    # -------------------------- Public API methods ---------------------------

    def authorize(self) -> str:
        return self._session.authorize()

    def list(
        self, tags: Iterable[str] = (), include_deleted: bool = False
    ) -> List[Note]:
        """Every note (with body) matching the tag and deletion filters."""
        summaries = self._index.list_all(tags, include_deleted=include_deleted)
        return self._bodies.fetch_all(summaries, timeout=self._fetch_timeout)

    def get(self, key: str) -> Note:
        return self._bodies.fetch_one(validate_key(key))

    def create(self, content: str, tags: Iterable[str] = ()) -> Note:
        """Store a new note; the returned note carries the server-assigned key."""
        system_tags = [MARKDOWN_SYSTEM_TAG] if self._markdown else []
        note = Note(content=content, tags=list(tags), system_tags=system_tags)
        LOGGER.info("Creating note with %d tags", len(note.tags))
        created = self._save(self._data_url, note)
        LOGGER.info("Created note %s", created.key)
        return created

    def update(self, note: Note) -> Note:
        """Overwrite the remote copy of ``note`` with the local one."""
        if not note.is_persisted:
            raise RequestValidationError("Missing key parameter in request.")
        key = validate_key(note.key)
        LOGGER.info("Updating note %s", key)
        return self._save(self._bodies.note_url(key), note)

    def edit(self, key: str, editor: Editor) -> Note:
        note = self.get(key)
        updated = editor(note.content)
        return self.update(replace(note, content=(updated or "").strip()))

    def delete(self, key: str, permanently: bool = False) -> Note:
        """Move a note to the trash, and purge it as well when ``permanently``."""
        note = self.get(key)
        trashed = self.update(replace(note, deleted=True))
        if permanently:
            LOGGER.info("Permanently deleting note %s", note.key)
            _, status = self._dispatcher.request(
                self._bodies.note_url(note.key), "DELETE"
            )
            if status != 200:
                LOGGER.error("Deleting note %s failed with code %d", note.key, status)
                raise NotesRequestError(
                    f"Simplenote request failed. Code was: {status}",
                    status_code=status,
                )
        return trashed

    def handle(
        self, request: RequestDescriptor, editor: Optional[Editor] = None
    ) -> NotesResult:
        """Run one command-line request end to end."""
        request.validate()
        action = request.action
        LOGGER.debug("Handling action %s", action.value)

        if action is Action.VERSION:
            return NotesResult(action, message=version_string())

        if action is Action.LIST:
            notes = self.list(request.tags, include_deleted=request.include_deleted)
            return NotesResult(
                action, notes=notes, records=present(notes, limit=request.limit)
            )

        if action is Action.GET:
            note = self.get(request.key or "")
            return NotesResult(
                action, notes=[note], records=[format_record(note, shorten=False)]
            )

        if action is Action.EDIT:
            if editor is None:
                raise RequestValidationError("Editing a note requires an editor.")
            note = self.edit(request.key or "", editor)
            return NotesResult(action, notes=[note], message="Note updated.")

        if action is Action.DELETE:
            note = self.delete(request.key or "", permanently=request.permanently)
            if request.permanently:
                message = "Note deleted permanently."
            else:
                message = "Note moved to trash."
            return NotesResult(action, notes=[note], message=message)

        # CREATE, or NONE carrying content.
        if not request.content.strip():
            LOGGER.info("Empty note, nothing to save")
            return NotesResult(action, message="Empty note, nothing saved.")
        note = self.create(request.content, request.tags)
        return NotesResult(
            action, notes=[note], records=[format_record(note, shorten=False)]
        )

    # -------------------------- Internal helpers -----------------------------

    def _save(self, url: str, note: Note) -> Note:
        body = json.dumps(NoteRecord.from_note(note).to_payload()).encode("utf-8")
        content, status = self._dispatcher.request(url, "POST", body)
        if status != 200:
            LOGGER.error("Saving note failed with code %d", status)
            raise NotesRequestError(
                f"Simplenote request failed. Code was: {status}", status_code=status
            )
        try:
            saved = NoteRecord.model_validate(json.loads(content)).to_note()
        except (ValueError, ValidationError) as e:
            LOGGER.error("Save response could not be decoded: %s", e)
            raise NotesDecodeError(
                "Save response validation failed", payload=content
            ) from e
        # The server does not echo content back on create.
        if not saved.content:
            saved = replace(saved, content=note.content)
        return saved
