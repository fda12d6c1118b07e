"""Call calendar error types."""

from __future__ import annotations

from enum import Enum


class CallCalendarErrorCode(Enum):
    """Error classification codes."""

    CONFIG_MISSING = "config_missing"
    HTTP_STATUS = "http_status"
    NETWORK = "network"
    TOO_MANY_REDIRECTS = "too_many_redirects"


class CallCalendarError(Exception):
    """Call calendar exception with error code and retryable flag.

    Attributes:
        message: Human-readable error description.
        code: Structured error code for programmatic handling.
        retryable: Whether running the same step again may succeed.
    """

    def __init__(
        self,
        message: str,
        code: CallCalendarErrorCode,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.retryable = retryable
