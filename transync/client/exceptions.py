"""
Translation Client Exceptions

This module contains exception classes for the translation client.
Separated to avoid circular imports between the client and the engine.

Every TranslationError is recoverable at the item level: callers count the
item as skipped (bulk run) or show a transient error indicator (manual toggle).
Cancellation is not a TranslationError.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    CONTENT_NOT_FOUND = "content_not_found"
    TIMEOUT = "timeout"
    NETWORK_ERROR = "network_error"
    HTTP_ERROR = "http_error"
    MALFORMED_RESPONSE = "malformed_response"


class TranslationError(Exception):
    """Translation service error with optional code and details."""

    kind: ErrorKind = ErrorKind.NETWORK_ERROR

    def __init__(self, message: str, code: str = None, details: dict = None):
        super().__init__(message)
        self.code = code
        self.details = details or {}


class ContentNotFound(TranslationError):
    """Original content is unavailable for an item at call time."""
    kind = ErrorKind.CONTENT_NOT_FOUND


class RequestTimeout(TranslationError):
    kind = ErrorKind.TIMEOUT


class NetworkError(TranslationError):
    kind = ErrorKind.NETWORK_ERROR


class HTTPError(TranslationError):
    """Non-success response status from the translation service."""
    kind = ErrorKind.HTTP_ERROR

    def __init__(self, status_code: int, message: str, code: str = None, details: Optional[dict] = None):
        super().__init__(message, code=code, details=details)
        self.status_code = status_code


class MalformedResponse(TranslationError):
    """Success status, but the payload carries no usable translation."""
    kind = ErrorKind.MALFORMED_RESPONSE


class TranslationCancelled(Exception):
    """The shared cancellation token fired while a request was in flight."""
