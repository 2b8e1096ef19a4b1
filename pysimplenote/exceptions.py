"""Library exceptions."""

from typing import Optional


class NotesError(Exception):
    """Base Simplenote error."""


class NotesAuthError(NotesError):
    """Credential exchange rejected (bad email or password)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class NotesRequestError(NotesError):
    """Request answered with a status the client does not handle."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RetryExhausted(NotesRequestError):
    """Transient failures or re-authorizations used up every attempt."""

    def __init__(self, message: str, status_code: Optional[int], attempts: int):
        super().__init__(message, status_code=status_code)
        self.attempts = attempts


class NotesTimeoutError(NotesError, TimeoutError):
    """Batch fetch deadline elapsed before every note arrived."""


class RequestValidationError(NotesError):
    """Malformed request, raised before anything goes over the wire."""


class NotesConnectionError(NotesError):
    """Network level failure (DNS, refused connection, read timeout)."""


class NotesApiError(NotesError):
    """Catch-all API error."""

    def __init__(self, message: str, payload: Optional[object] = None):
        super().__init__(message)
        self.payload = payload


class NotesDecodeError(NotesApiError):
    """Response body could not be decoded into the expected model."""


class PaginationError(NotesApiError):
    """The index returned a continuation mark it had already handed out."""


class FetchCancelled(NotesError):
    """Request abandoned because its batch was cancelled."""
