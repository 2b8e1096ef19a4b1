"""
Low-level HTTP client for the Simplenote API.

Two layers live here:
  - ``_SimplenoteHTTP``: a single request over a shared ``requests.Session``,
    returning the raw body and status code.
  - ``RequestDispatcher``: the choke point every authenticated call passes
    through. It attaches auth query params and standard headers, re-authorizes
    on 401/403 and retries 500/412 with backoff, all under a bounded
    ``RetryPolicy``.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Optional, Tuple

import requests

from pysimplenote.const import DEFAULT_REQUEST_TIMEOUT, VERSION
from pysimplenote.exceptions import (
    FetchCancelled,
    NotesConnectionError,
    NotesTimeoutError,
    RetryExhausted,
)

if TYPE_CHECKING:  # pragma: no cover - import for type checking only
    from .session import SessionManager

LOGGER = logging.getLogger(__name__)

DEFAULT_HEADERS: Dict[str, str] = {
    "User-Agent": f"pysimplenote/{VERSION}",
    "Accept": "application/json",
    "Content-Type": "application/json",
}

REAUTH_STATUSES = frozenset({401, 403})
TRANSIENT_STATUSES = frozenset({412, 500})


# ------------------------------- Transport -----------------------------------


class _SimplenoteHTTP:
    """
    Minimal HTTP transport:
      - one request per call, no status interpretation
      - per-request timeout, optionally shortened by the caller
      - network failures wrapped in NotesConnectionError
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ):
        self._session = session if session is not None else requests.Session()
        self._timeout = timeout

    @property
    def timeout(self) -> float:
        return self._timeout

    def send(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, str]] = None,
        data: Optional[bytes] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> Tuple[bytes, int]:
        LOGGER.info("%s to %s", method, url)
        try:
            resp = self._session.request(
                method,
                url,
                params=params,
                data=data,
                headers=headers,
                timeout=self._timeout if timeout is None else timeout,
            )
        except requests.RequestException as exc:
            LOGGER.error("%s to %s failed: %s", method, url, exc)
            raise NotesConnectionError(f"{method} {url} failed: {exc}") from exc
        code = getattr(resp, "status_code", 0)
        LOGGER.debug("%s to %s returned status %d", method, url, code)
        return resp.content or b"", code


# ------------------------------ Retry policy ---------------------------------


@dataclass(frozen=True)
class RetryPolicy:
    """Attempt budget shared by re-auth retries and transient-error retries."""

    max_attempts: int = 5
    backoff: float = 0.5
    multiplier: float = 2.0
    max_backoff: float = 8.0

    def delay(self, retry_number: int) -> float:
        """Seconds to wait before the ``retry_number``-th retry (1-based)."""
        if self.backoff <= 0:
            return 0.0
        return min(
            self.max_backoff, self.backoff * self.multiplier ** (retry_number - 1)
        )


# ------------------------------ Dispatcher -----------------------------------


class RequestDispatcher:
    """Authenticated request executor with bounded retry."""

    def __init__(
        self,
        transport: _SimplenoteHTTP,
        session: "SessionManager",
        retry_policy: Optional[RetryPolicy] = None,
    ):
        self._transport = transport
        self._session = session
        self._policy = retry_policy or RetryPolicy()

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._policy

    def request(
        self,
        url: str,
        method: str = "GET",
        body: Optional[bytes] = None,
        params: Optional[Dict[str, str]] = None,
        *,
        cancel_event: Optional[threading.Event] = None,
        deadline: Optional[float] = None,
    ) -> Tuple[bytes, int]:
        """
        Send ``method url`` and return ``(body, status)``.

        401/403 trigger a re-authorization, 500/412 a delayed retry. Any other
        status, 200 included, is handed back for the caller to interpret.

        ``deadline`` is a ``time.monotonic()`` value: no attempt starts after
        it, and the socket timeout of each attempt is cut down to what is left.
        """
        max_attempts = self._policy.max_attempts
        retries = 0
        status = 0
        for attempt in range(1, max_attempts + 1):
            if cancel_event is not None and cancel_event.is_set():
                LOGGER.debug("%s %s cancelled before attempt %d", method, url, attempt)
                raise FetchCancelled(f"{method} {url} cancelled")
            timeout = self._remaining(deadline, method, url)

            token = self._session.access_token
            if token is None:
                token = self._session.refresh(None)

            content, status = self._transport.send(
                method,
                url,
                params=self._build_params(token, params),
                data=body,
                headers=dict(DEFAULT_HEADERS),
                timeout=timeout,
            )

            if status in REAUTH_STATUSES:
                LOGGER.warning(
                    "%s %s returned %d, re-authorizing (attempt %d/%d)",
                    method,
                    url,
                    status,
                    attempt,
                    max_attempts,
                )
                if attempt < max_attempts:
                    self._session.refresh(token)
                continue

            if status in TRANSIENT_STATUSES:
                retries += 1
                delay = self._policy.delay(retries)
                LOGGER.warning(
                    "%s %s returned %d, retrying in %.2fs (attempt %d/%d)",
                    method,
                    url,
                    status,
                    delay,
                    attempt,
                    max_attempts,
                )
                if delay and attempt < max_attempts:
                    self._wait(delay, cancel_event, deadline)
                continue

            return content, status

        LOGGER.error(
            "%s %s gave up after %d attempts (last status %d)",
            method,
            url,
            max_attempts,
            status,
        )
        raise RetryExhausted(
            f"Simplenote request failed after {max_attempts} "
            f"attempts. Last status was: {status}",
            status_code=status,
            attempts=max_attempts,
        )

    def _remaining(
        self, deadline: Optional[float], method: str, url: str
    ) -> Optional[float]:
        """Socket timeout for the next attempt; ``None`` keeps the default."""
        if deadline is None:
            return None
        left = deadline - time.monotonic()
        if left <= 0:
            LOGGER.debug("%s %s deadline passed before sending", method, url)
            raise NotesTimeoutError(f"{method} {url} ran past its deadline")
        return min(self._transport.timeout, left)

    @staticmethod
    def _wait(
        delay: float,
        cancel_event: Optional[threading.Event],
        deadline: Optional[float],
    ) -> None:
        if deadline is not None:
            delay = max(0.0, min(delay, deadline - time.monotonic()))
        if cancel_event is not None:
            # Returns early once the batch is cancelled.
            cancel_event.wait(delay)
        else:
            time.sleep(delay)

    def _build_params(
        self, token: str, extra: Optional[Dict[str, str]]
    ) -> Dict[str, str]:
        # Auth params go last so a caller can never override them.
        merged: Dict[str, str] = {}
        if extra:
            merged.update({k: str(v) for k, v in extra.items()})
        merged["auth"] = token
        merged["email"] = self._session.email
        return merged
