"""Typed error taxonomy shared by the client, the dispatcher and the transports.

Every failure a tool invocation can produce falls into exactly one
:class:`ErrorKind`. Known failures are raised as :class:`Trading212Error`
subclasses; anything else is classified as ``ErrorKind.unknown`` by
:func:`serialize_error`.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping

import pydantic


class ErrorKind(str, Enum):
    """Closed set of error kinds."""

    authentication = "authentication"
    rate_limit = "rate_limit"
    validation = "validation"
    api = "api"
    unknown = "unknown"


class Trading212Error(Exception):
    """Base exception for all classified errors.

    Attributes:
        message: Human-readable description.
        code: Machine-readable error code.
        status_code: HTTP status associated with the failure, if any.
    """

    kind: ErrorKind = ErrorKind.unknown
    default_code = "UNKNOWN_ERROR"

    def __init__(self, message: str, code: str | None = None, status_code: int | None = None):
        self.message = message
        self.code = code or self.default_code
        self.status_code = status_code
        super().__init__(self.message)

    @property
    def details(self) -> dict[str, Any] | None:
        """Structured payload specific to the error kind."""
        return None


class AuthError(Trading212Error):
    """Raised when the API key is missing or rejected by Trading 212."""

    kind = ErrorKind.authentication
    default_code = "AUTH_ERROR"

    def __init__(self, message: str):
        super().__init__(message, status_code=401)

    @classmethod
    def missing_api_key(cls) -> "AuthError":
        return cls("TRADING212_API_KEY environment variable is required")


class RateLimitError(Trading212Error):
    """Raised when Trading 212 throttles a request.

    Attributes:
        reset_at: Unix timestamp (seconds) when the limit window resets.
        limit: Requests allowed per window.
        remaining: Requests left in the window.
    """

    kind = ErrorKind.rate_limit
    default_code = "RATE_LIMIT_ERROR"

    def __init__(self, message: str, reset_at: int, limit: int, remaining: int = 0):
        super().__init__(message, status_code=429)
        self.reset_at = reset_at
        self.limit = limit
        self.remaining = remaining

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> "RateLimitError":
        """Build the error from ``x-ratelimit-*`` response headers.

        Missing or malformed values count as ``0``.
        """
        reset_at = _header_int(headers, "x-ratelimit-reset")
        limit = _header_int(headers, "x-ratelimit-limit")
        remaining = _header_int(headers, "x-ratelimit-remaining")
        reset_iso = datetime.fromtimestamp(reset_at, tz=timezone.utc).isoformat()
        return cls(
            message=(
                f"Rate limit exceeded. Limit: {limit}, Remaining: {remaining}, "
                f"Resets at: {reset_iso}"
            ),
            reset_at=reset_at,
            limit=limit,
            remaining=remaining,
        )

    @property
    def details(self) -> dict[str, Any]:
        return {"reset_at": self.reset_at, "limit": self.limit, "remaining": self.remaining}


class ValidationError(Trading212Error):
    """Raised when tool arguments do not match the tool's input schema.

    Attributes:
        issues: Every offending field, as ``{"path", "message", "type"}`` dicts.
    """

    kind = ErrorKind.validation
    default_code = "VALIDATION_ERROR"

    def __init__(self, message: str, issues: list[dict[str, Any]] | None = None):
        super().__init__(message, status_code=400)
        self.issues = issues or []

    @classmethod
    def from_pydantic(cls, exc: pydantic.ValidationError) -> "ValidationError":
        return cls("Invalid request parameters", issues=issues_from_pydantic(exc))

    @property
    def details(self) -> dict[str, Any]:
        return {"issues": self.issues}


class ApiError(Trading212Error):
    """Raised for any other failed call to Trading 212.

    Covers non-success statuses, unreachable endpoints, and 2xx bodies that no
    longer match the expected response shape.

    Attributes:
        response: Raw response body, when there was one.
        issues: Response-shape issues, when the body failed validation.
    """

    kind = ErrorKind.api
    default_code = "API_ERROR"

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response: str | None = None,
        issues: list[dict[str, Any]] | None = None,
    ):
        super().__init__(message, status_code=status_code)
        self.response = response
        self.issues = issues

    @classmethod
    def response_mismatch(cls, endpoint: str, exc: pydantic.ValidationError) -> "ApiError":
        return cls(
            f"Trading 212 API returned an unexpected response for {endpoint}",
            issues=issues_from_pydantic(exc),
        )

    @property
    def details(self) -> dict[str, Any] | None:
        if self.issues is not None:
            return {"issues": self.issues}
        if self.response:
            return {"response": self.response}
        return None


def issues_from_pydantic(exc: pydantic.ValidationError) -> list[dict[str, Any]]:
    """Flatten a pydantic error into JSON-safe issue dicts."""
    return [
        {"path": list(error["loc"]), "message": error["msg"], "type": error["type"]}
        for error in exc.errors(include_url=False, include_input=False)
    ]


def serialize_error(error: BaseException) -> dict[str, Any]:
    """Serialize any exception into a structured, JSON-safe payload.

    Args:
        error: The exception to serialize.

    Returns:
        Dict with ``kind``, ``name``, ``message`` and, for classified errors,
        ``code``, ``status_code`` and ``details``.
    """
    if isinstance(error, Trading212Error):
        payload: dict[str, Any] = {
            "kind": error.kind.value,
            "name": type(error).__name__,
            "message": error.message,
            "code": error.code,
            "status_code": error.status_code,
        }
        if error.details is not None:
            payload["details"] = error.details
        return payload

    return {
        "kind": ErrorKind.unknown.value,
        "name": type(error).__name__,
        "message": str(error) or type(error).__name__,
        "code": Trading212Error.default_code,
    }


def _header_int(headers: Mapping[str, str], name: str) -> int:
    try:
        return int(headers.get(name) or 0)
    except ValueError:
        return 0
