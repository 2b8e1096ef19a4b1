"""Tests for the session manager."""

import base64
import threading
import unittest
from urllib.parse import parse_qs

from pysimplenote.exceptions import NotesAuthError
from pysimplenote.services.notes.client import _SimplenoteHTTP
from pysimplenote.services.notes.models import Credentials
from pysimplenote.services.notes.session import SessionManager

from .fakes import AUTH_URL, EMAIL, PASSWORD, FakeSession


class SessionManagerTest(unittest.TestCase):
    def setUp(self):
        self.http = FakeSession()
        self.session = SessionManager(
            _SimplenoteHTTP(self.http), Credentials(EMAIL, PASSWORD), AUTH_URL
        )

    def test_authorize_posts_encoded_credentials(self):
        self.http.login("token-abc\n")

        token = self.session.authorize()

        self.assertEqual(token, "token-abc")
        self.assertEqual(self.session.access_token, "token-abc")
        self.assertTrue(self.session.is_authorized)
        sent = self.http.calls_to("POST", AUTH_URL)[0]
        self.assertEqual(sent.params, {})
        decoded = parse_qs(base64.b64decode(sent.data).decode("utf-8"))
        self.assertEqual(decoded, {"email": [EMAIL], "password": [PASSWORD]})

    def test_rejected_credentials_raise_with_status(self):
        self.http.route("POST", AUTH_URL, (401, "bad"))

        with self.assertRaises(NotesAuthError) as ctx:
            self.session.authorize()

        self.assertEqual(ctx.exception.status_code, 401)
        self.assertIn("check your username or password", str(ctx.exception))
        self.assertIsNone(self.session.access_token)
        self.assertEqual(len(self.http.calls_to("POST", AUTH_URL)), 1)

    def test_unreadable_or_empty_token_is_an_auth_error(self):
        for body in (b"\xff\xfe\xfd", b"  \n"):
            with self.subTest(body=body):
                self.http.route("POST", AUTH_URL, (200, body))

                with self.assertRaises(NotesAuthError) as ctx:
                    self.session.authorize()

                self.assertEqual(ctx.exception.status_code, 200)
                self.assertIsNone(self.session.access_token)

    def test_refresh_skips_login_when_token_already_replaced(self):
        self.http.login("tok-1", "tok-2")
        self.session.authorize()
        self.session.refresh("tok-1")

        token = self.session.refresh("tok-1")

        self.assertEqual(token, "tok-2")
        self.assertEqual(len(self.http.calls_to("POST", AUTH_URL)), 2)

    def test_concurrent_refreshes_log_in_once(self):
        self.http.login("tok-1", "tok-2", "tok-3")
        self.session.authorize()
        workers = 8
        barrier = threading.Barrier(workers)
        tokens = []

        def refresh():
            barrier.wait()
            tokens.append(self.session.refresh("tok-1"))

        threads = [threading.Thread(target=refresh) for _ in range(workers)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(5)

        self.assertEqual(tokens, ["tok-2"] * workers)
        self.assertEqual(len(self.http.calls_to("POST", AUTH_URL)), 2)

    def test_credentials_repr_hides_password(self):
        self.assertNotIn(PASSWORD, repr(Credentials(EMAIL, PASSWORD)))


if __name__ == "__main__":
    unittest.main()
