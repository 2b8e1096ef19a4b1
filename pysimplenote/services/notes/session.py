"""Access-token lifecycle: credential exchange and guarded re-authorization."""

from __future__ import annotations

import base64
import logging
import threading
from typing import Optional
from urllib.parse import urlencode

from pysimplenote.exceptions import NotesAuthError

from .client import _SimplenoteHTTP
from .models import Credentials

LOGGER = logging.getLogger(__name__)


class SessionManager:
    """
    Holds the access token obtained from /api/login.

    The token is shared by every concurrent fetch, so reads and writes go
    through a lock, and ``refresh`` makes sure a burst of 401s from parallel
    requests results in a single login.
    """

    def __init__(
        self, transport: _SimplenoteHTTP, credentials: Credentials, auth_url: str
    ):
        self._transport = transport
        self._credentials = credentials
        self._auth_url = auth_url
        self._token: Optional[str] = None
        self._lock = threading.Lock()

    @property
    def email(self) -> str:
        return self._credentials.email

    @property
    def access_token(self) -> Optional[str]:
        with self._lock:
            return self._token

    @property
    def is_authorized(self) -> bool:
        return self.access_token is not None

    def authorize(self) -> str:
        """Exchange credentials for a fresh token."""
        with self._lock:
            return self._authorize_locked()

    def refresh(self, stale_token: Optional[str]) -> str:
        """
        Re-authorize unless another thread already replaced ``stale_token``.

        Returns the token to use for the next attempt.
        """
        with self._lock:
            if self._token is not None and self._token != stale_token:
                LOGGER.debug("Token already refreshed by another request")
                return self._token
            return self._authorize_locked()

    def _authorize_locked(self) -> str:
        payload = urlencode(
            {"email": self._credentials.email, "password": self._credentials.password}
        )
        body = base64.b64encode(payload.encode("utf-8"))
        LOGGER.info("Authorizing %s", self._credentials.email)
        content, status = self._transport.send("POST", self._auth_url, data=body)
        if status != 200:
            LOGGER.error("Authorization failed with status %d", status)
            raise NotesAuthError(
                "Error authorizing the client, check your username or password. "
                f"Status code was: {status}",
                status_code=status,
            )
        try:
            token = content.decode("utf-8").strip()
        except UnicodeDecodeError as e:
            LOGGER.error("Authorization response is not a token")
            raise NotesAuthError(
                "Error authorizing the client, the server sent an unreadable token.",
                status_code=status,
            ) from e
        if not token:
            LOGGER.error("Authorization response was empty")
            raise NotesAuthError(
                "Error authorizing the client, the server sent an empty token.",
                status_code=status,
            )
        self._token = token
        LOGGER.debug("Authorization succeeded")
        return self._token
