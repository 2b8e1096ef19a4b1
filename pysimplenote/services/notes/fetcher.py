"""
Note body retrieval (/api2/data/<key>), singly or as a bounded parallel batch.

A batch either returns every requested note or raises: the first failing
task, or the deadline, cancels the rest of the batch.
"""

from __future__ import annotations

import json
import logging
import threading
import time
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from typing import Dict, List, Optional, Sequence

from pydantic import ValidationError

from pysimplenote.const import DEFAULT_FETCH_TIMEOUT, DEFAULT_MAX_WORKERS
from pysimplenote.exceptions import (
    NotesDecodeError,
    NotesRequestError,
    NotesTimeoutError,
)

from .client import RequestDispatcher
from .models import Note, NoteRecord, NoteSummary

LOGGER = logging.getLogger(__name__)


class NoteBodyFetcher:
    def __init__(
        self,
        dispatcher: RequestDispatcher,
        data_url: str,
        *,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ):
        self._dispatcher = dispatcher
        self._data_url = data_url.rstrip("/")
        self._max_workers = max(1, max_workers)

    def note_url(self, key: str) -> str:
        return f"{self._data_url}/{key}"

    def fetch_one(
        self,
        key: str,
        *,
        cancel_event: Optional[threading.Event] = None,
        deadline: Optional[float] = None,
    ) -> Note:
        """Fetch a single full note."""
        content, status = self._dispatcher.request(
            self.note_url(key), "GET", cancel_event=cancel_event, deadline=deadline
        )
        if status != 200:
            LOGGER.error("Fetching note %s failed with code %d", key, status)
            raise NotesRequestError(
                f"Simplenote request failed. Code was: {status}", status_code=status
            )
        try:
            return NoteRecord.model_validate(json.loads(content)).to_note()
        except (ValueError, ValidationError) as e:
            LOGGER.error("Note %s could not be decoded: %s", key, e)
            raise NotesDecodeError(
                f"Note {key} response validation failed", payload=content
            ) from e

    def fetch_all(
        self,
        summaries: Sequence[NoteSummary],
        timeout: float = DEFAULT_FETCH_TIMEOUT,
    ) -> List[Note]:
        """
        Fetch the body of every summary in parallel within ``timeout`` seconds.

        Notes come back in the order of ``summaries``, whatever order the
        fetches complete in.
        """
        if not summaries:
            return []

        LOGGER.info(
            "Fetching %d note bodies (timeout=%ss, workers=%d)",
            len(summaries),
            timeout,
            min(self._max_workers, len(summaries)),
        )
        cancel_event = threading.Event()
        # In-flight requests time out with the batch instead of running on.
        deadline = time.monotonic() + timeout
        executor = ThreadPoolExecutor(
            max_workers=min(self._max_workers, len(summaries)),
            thread_name_prefix="note-fetch",
        )
        futures: Dict[Future, int] = {}
        try:
            for idx, summary in enumerate(summaries):
                fut = executor.submit(
                    self.fetch_one,
                    summary.key,
                    cancel_event=cancel_event,
                    deadline=deadline,
                )
                futures[fut] = idx

            done, pending = wait(futures, timeout=timeout, return_when=FIRST_EXCEPTION)
            for fut in done:
                exc = fut.exception()
                if exc is None:
                    continue
                if time.monotonic() >= deadline:
                    # A socket cut short by the deadline is still a batch timeout.
                    LOGGER.error("Timed out after %ss fetching notes", timeout)
                    raise NotesTimeoutError("Timeout when fetching notes") from exc
                LOGGER.error(
                    "Fetching note %s failed, aborting batch",
                    summaries[futures[fut]].key,
                )
                raise exc
            if pending:
                LOGGER.error(
                    "Timed out after %ss with %d of %d notes fetched",
                    timeout,
                    len(done),
                    len(summaries),
                )
                raise NotesTimeoutError("Timeout when fetching notes")

            results: List[Optional[Note]] = [None] * len(summaries)
            for fut, idx in futures.items():
                results[idx] = fut.result()
            LOGGER.info("Fetched %d note bodies.", len(results))
            return [note for note in results if note is not None]
        finally:
            cancel_event.set()
            executor.shutdown(wait=False, cancel_futures=True)
