"""
Error taxonomy for genai_protocol.

Components:
    - UsageError and subclasses: the caller misused the API. Raised
      immediately, never retried.
    - APIError / ClientError / ServerError: the backend answered with a
      non-success status, either as the HTTP status or as an ``error`` object
      embedded in a streamed chunk.
    - StreamParseError, UploadError: transport protocol failures.
"""

from __future__ import annotations

from typing import Any


class GenAIError(Exception):
    """Base class for every error raised by this package."""


class UsageError(GenAIError, ValueError):
    """The caller passed something this package cannot accept."""


class UnsupportedFieldError(UsageError):
    """A field was set that the target dialect has no place for."""

    def __init__(self, field: str, dialect: str):
        self.field = field
        self.dialect = dialect
        super().__init__(f"{field} parameter is not supported in the {dialect} dialect.")


class PathError(UsageError):
    """A path write collided with an existing value it cannot merge with."""


class PagerExhaustedError(UsageError, IndexError):
    """next_page() was called on a pager without a continuation token."""

    def __init__(self, message: str = "No more pages to fetch."):
        super().__init__(message)


class HistoryError(UsageError):
    """Chat history violates the user/model alternation contract."""


class LiveProtocolError(UsageError):
    """A Live message could not be built or the server broke the handshake."""


class StreamParseError(GenAIError):
    """A Server-Sent-Event frame carried a payload that is not JSON."""


class UploadError(GenAIError):
    """The resumable upload protocol ended in an unexpected state."""


class APIError(GenAIError):
    """The backend returned an error.

    Attributes:
        code: HTTP status code (or the ``code`` of an embedded error object)
        status: Canonical status string such as ``INVALID_ARGUMENT``
        message: Human readable message from the backend
        details: Structured error details, if any
        response_json: The decoded error body
    """

    def __init__(self, code: int, response_json: Any):
        self.response_json = response_json
        error = response_json.get("error", response_json) if isinstance(response_json, dict) else {}
        if not isinstance(error, dict):
            error = {"message": str(error)}
        self.code = code
        self.status: str | None = error.get("status")
        self.message: str | None = error.get("message")
        self.details: Any = error.get("details")
        super().__init__(f"{self.code} {self.status}. {self.message or response_json}")

    @classmethod
    def raise_for_status(cls, code: int, response_json: Any) -> None:
        """Raise the error kind matching ``code``; return for 2xx."""
        if 200 <= code < 300:
            return
        if 400 <= code < 500:
            raise ClientError(code, response_json)
        if 500 <= code < 600:
            raise ServerError(code, response_json)
        raise cls(code, response_json)

    @classmethod
    def raise_for_embedded_error(cls, chunk: dict[str, Any]) -> None:
        """Raise if a streamed chunk carries an ``error`` object instead of data."""
        error = chunk.get("error")
        if not error:
            return
        code = error.get("code") if isinstance(error, dict) else None
        code = int(code) if code is not None else 500
        if 400 <= code < 600:
            cls.raise_for_status(code, chunk)
        raise cls(code, chunk)


class ClientError(APIError):
    """4xx response."""


class ServerError(APIError):
    """5xx response."""
