"""
Client error taxonomy.

Network-boundary failures are raised as ApiError subclasses and are expected
to be caught at the call site and turned into a user-visible message. Draft
storage failures never leave the draft cache.
"""
from typing import Any, Optional


class FormClientError(Exception):
    """Base class for form client errors."""


class ApiError(FormClientError):
    """The backend answered with an error, or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload


class ConflictError(ApiError):
    """A unique value already exists on the backend (HTTP 409)."""


class NotFoundError(ApiError):
    """The requested record does not exist (HTTP 404)."""


class TransportError(ApiError):
    """Network failure or an unreadable response body."""


class StorageAccessError(FormClientError):
    """Reading or writing local draft storage failed."""
