"""Tests for single and concurrent note body retrieval."""

import random
import threading
import time
import unittest

from pysimplenote.exceptions import (
    NotesDecodeError,
    NotesRequestError,
    NotesTimeoutError,
)
from pysimplenote.services.notes.client import (
    RequestDispatcher,
    RetryPolicy,
    _SimplenoteHTTP,
)
from pysimplenote.services.notes.fetcher import NoteBodyFetcher
from pysimplenote.services.notes.models import Credentials, NoteSummary
from pysimplenote.services.notes.session import SessionManager

from .fakes import (
    AUTH_URL,
    DATA_URL,
    EMAIL,
    PASSWORD,
    FakeSession,
    note_json,
    note_key,
)


def summaries(count):
    return [NoteSummary(note_key(i), [], False, 1000 + i) for i in range(count)]


class NoteBodyFetcherTest(unittest.TestCase):
    def setUp(self):
        self.http = FakeSession().login("tok")
        transport = _SimplenoteHTTP(self.http)
        session = SessionManager(transport, Credentials(EMAIL, PASSWORD), AUTH_URL)
        session.authorize()
        dispatcher = RequestDispatcher(transport, session, RetryPolicy(backoff=0))
        self.fetcher = NoteBodyFetcher(dispatcher, DATA_URL, max_workers=4)

    def serve(self, key, *responses):
        self.http.route("GET", f"{DATA_URL}/{key}", *responses)

    def test_fetch_one_decodes_note(self):
        key = note_key(1)
        self.serve(
            key,
            (
                200,
                note_json(
                    key,
                    "hello\nworld",
                    modifydate=1418243413,
                    tags=["work"],
                    systemtags=["markdown"],
                ),
            ),
        )

        note = self.fetcher.fetch_one(key)

        self.assertEqual(note.key, key)
        self.assertEqual(note.content, "hello\nworld")
        self.assertEqual(note.tags, ["work"])
        self.assertTrue(note.is_markdown)
        self.assertEqual(note.modify_timestamp, 1418243413)
        self.assertEqual(note.create_timestamp, 900)
        self.assertFalse(note.deleted)

    def test_fetch_one_rejects_non_200(self):
        self.serve(note_key(1), (404, "not found"))

        with self.assertRaises(NotesRequestError) as ctx:
            self.fetcher.fetch_one(note_key(1))
        self.assertEqual(ctx.exception.status_code, 404)

    def test_fetch_one_rejects_undecodable_body(self):
        self.serve(note_key(1), (200, "{not json"))

        with self.assertRaises(NotesDecodeError):
            self.fetcher.fetch_one(note_key(1))

    def test_fetch_all_returns_every_note_once(self):
        batch = summaries(12)
        for s in batch:

            def respond(call, key=s.key):
                time.sleep(random.uniform(0, 0.02))
                return 200, note_json(key, f"note {key}")

            self.serve(s.key, respond)

        notes = self.fetcher.fetch_all(batch, timeout=5)

        self.assertEqual(len(notes), 12)
        self.assertEqual([n.key for n in notes], [s.key for s in batch])
        self.assertEqual(len({n.key for n in notes}), 12)

    def test_fetch_all_empty(self):
        self.assertEqual(self.fetcher.fetch_all([]), [])

    def test_fetch_all_times_out_instead_of_returning_partial_list(self):
        batch = summaries(3)
        release = threading.Event()
        self.addCleanup(release.set)
        self.serve(batch[0].key, (200, note_json(batch[0].key, "a")))
        self.serve(batch[1].key, (200, note_json(batch[1].key, "b")))

        def hang(call):
            release.wait(5)
            return 200, note_json(batch[2].key, "c")

        self.serve(batch[2].key, hang)

        with self.assertRaises(NotesTimeoutError):
            self.fetcher.fetch_all(batch, timeout=0.2)

    def test_timeout_bounds_requests_already_in_flight(self):
        batch = summaries(1)
        finished = threading.Event()

        def slow(call):
            # Stands in for a socket read that gives up after ``call.timeout``.
            time.sleep(min(call.timeout, 4))
            finished.set()
            return 200, note_json(batch[0].key, "late")

        self.serve(batch[0].key, slow)
        start = time.monotonic()

        with self.assertRaises(NotesTimeoutError):
            self.fetcher.fetch_all(batch, timeout=0.2)

        self.assertTrue(finished.wait(1.5))
        self.assertLess(time.monotonic() - start, 1.5)
        sent = self.http.calls_to("GET", f"{DATA_URL}/{batch[0].key}")[0]
        self.assertLessEqual(sent.timeout, 0.2)

    def test_single_failure_aborts_batch(self):
        batch = summaries(4)
        for s in batch:
            self.serve(s.key, (200, note_json(s.key, "ok")))
        self.serve(batch[2].key, (404, ""))

        with self.assertRaises(NotesRequestError):
            self.fetcher.fetch_all(batch, timeout=5)

    def test_parallelism_is_capped(self):
        batch = summaries(10)
        lock = threading.Lock()
        active = [0]
        peak = [0]

        def respond(call):
            with lock:
                active[0] += 1
                peak[0] = max(peak[0], active[0])
            time.sleep(0.02)
            with lock:
                active[0] -= 1
            return 200, note_json(call.url.rsplit("/", 1)[-1], "x")

        for s in batch:
            self.serve(s.key, respond)

        notes = self.fetcher.fetch_all(batch, timeout=5)

        self.assertEqual(len(notes), 10)
        self.assertLessEqual(peak[0], 4)


if __name__ == "__main__":
    unittest.main()
