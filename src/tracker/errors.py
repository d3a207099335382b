"""Error types for the issue tracker adapter."""

import json
from enum import Enum
from typing import Any


class TrackerErrorClass(str, Enum):
    """Classification of tracker errors.

    - CONFIGURATION: The client cannot be built (e.g. no credential)
    - FETCH: The remote answered with a non-success status
    - MALFORMED_RESPONSE: The remote body does not match the expected schema
    """

    CONFIGURATION = "CONFIGURATION"
    FETCH = "FETCH"
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"


class TrackerError(Exception):
    """Base exception for tracker errors.

    Provides structured error information for logging and reporting.
    """

    error_class: TrackerErrorClass = TrackerErrorClass.CONFIGURATION

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error_class": self.error_class.value,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(TrackerError):
    """The tracker is misconfigured or rejected the request.

    Raised at construction when no credential is available.
    """


class FetchFailedError(ConfigurationError):
    """The remote answered with a non-success status.

    Attributes:
        url: Requested URL.
        status_code: HTTP status code.
        status_text: HTTP reason phrase.
        body: Parsed response body.
    """

    error_class = TrackerErrorClass.FETCH

    def __init__(
        self,
        url: str,
        status_code: int,
        status_text: str,
        body: Any,
    ) -> None:
        super().__init__(
            f"Fetch error: {status_text}.\n{json.dumps(body)}",
            details={"url": url, "status_code": status_code},
        )
        self.url = url
        self.status_code = status_code
        self.status_text = status_text
        self.body = body


class MalformedResponseError(TrackerError):
    """The remote body is missing expected fields or has the wrong shape.

    Attributes:
        url: Requested URL.
        field: Dotted path of the offending field, if known.
    """

    error_class = TrackerErrorClass.MALFORMED_RESPONSE

    def __init__(
        self,
        message: str,
        url: str,
        field: str | None = None,
    ) -> None:
        details: dict[str, Any] = {"url": url}
        if field is not None:
            details["field"] = field
        super().__init__(message, details=details)
        self.url = url
        self.field = field
