"""Paginated retrieval of the note index (/api2/index)."""

from __future__ import annotations

import json
import logging
from typing import Iterable, Iterator, List, Optional, Set

from pydantic import ValidationError

from pysimplenote.const import INDEX_PAGE_LENGTH
from pysimplenote.exceptions import (
    NotesDecodeError,
    NotesRequestError,
    PaginationError,
)

from .client import RequestDispatcher
from .models import NoteIndexPage, NoteIndexResponse, NoteSummary

LOGGER = logging.getLogger(__name__)


def matches_tags(summary: NoteSummary, filter_tags: Iterable[str]) -> bool:
    """True when ``filter_tags`` is empty or shares at least one tag with the note."""
    wanted = set(filter_tags)
    if not wanted:
        return True
    return any(tag in wanted for tag in summary.tags)


class NoteIndexFetcher:
    """Walks /api2/index page by page, filtering as it goes."""

    def __init__(
        self,
        dispatcher: RequestDispatcher,
        index_url: str,
        *,
        page_length: int = INDEX_PAGE_LENGTH,
    ):
        self._dispatcher = dispatcher
        self._index_url = index_url
        self._page_length = page_length

    def fetch_page(self, mark: Optional[str] = None) -> NoteIndexPage:
        params = {"length": str(self._page_length)}
        if mark:
            params["mark"] = mark
        content, status = self._dispatcher.request(
            self._index_url, "GET", params=params
        )
        if status != 200:
            LOGGER.error("Index request failed with code %d", status)
            raise NotesRequestError(
                f"Simplenote request failed. Code was: {status}", status_code=status
            )
        try:
            resp = NoteIndexResponse.model_validate(json.loads(content))
        except (ValueError, ValidationError) as e:
            LOGGER.error("Index response could not be decoded: %s", e)
            raise NotesDecodeError(
                "Index response validation failed", payload=content
            ) from e
        return resp.to_page()

    def iter_pages(self) -> Iterator[NoteIndexPage]:
        """Yield raw pages until the server stops sending a continuation mark."""
        seen_marks: Set[str] = set()
        mark: Optional[str] = None
        page_num = 1
        while True:
            LOGGER.debug("Fetching index page %d", page_num)
            page = self.fetch_page(mark)
            LOGGER.info("Index page %d returned %d notes.", page_num, len(page.items))
            yield page

            if not page.has_more:
                LOGGER.debug("No more continuation mark, done.")
                return
            mark = page.continuation_mark
            if mark in seen_marks:
                LOGGER.error("Continuation mark %r repeated on page %d", mark, page_num)
                raise PaginationError(
                    "Index continuation mark did not advance", payload=mark
                )
            seen_marks.add(mark)
            page_num += 1

    def list_all(
        self,
        filter_tags: Iterable[str] = (),
        include_deleted: bool = False,
    ) -> List[NoteSummary]:
        """
        Every summary in the account, oldest page first.

        Deleted notes are dropped unless ``include_deleted``; with
        ``filter_tags`` only notes carrying any of those tags are kept. A key
        that shows up on more than one page is reported once.
        """
        tags = list(filter_tags)
        notes: List[NoteSummary] = []
        seen_keys: Set[str] = set()
        for page in self.iter_pages():
            for summary in page.items:
                if summary.deleted and not include_deleted:
                    continue
                if not matches_tags(summary, tags):
                    continue
                if summary.key in seen_keys:
                    LOGGER.debug("Skipping repeated index entry %s", summary.key)
                    continue
                seen_keys.add(summary.key)
                notes.append(summary)
        LOGGER.info("Index listed %d notes.", len(notes))
        return notes
