"""
Shared error handling for the PathWise Access Layer.
"""

from enum import Enum
from typing import Dict, Any, Optional
from pydantic import BaseModel, Field

from shared.logging import request_id_var


class ErrorResponse(BaseModel):
    """Standard error response format."""

    request_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class AccessLayerException(Exception):
    """Base exception for Access Layer services."""

    status_code = 400

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            request_id=request_id_var.get(),
            code=self.code,
            message=self.message,
            details=self.details
        )


class ErrorKind(str, Enum):
    """Provider failure categories, identical across providers."""

    KEY_MISSING = "key_missing"
    KEY_INVALID = "key_invalid"
    RATE_LIMITED = "rate_limited"
    BAD_PARAMETERS = "bad_parameters"
    SERVICE_UNAVAILABLE = "service_unavailable"
    NETWORK_ERROR = "network_error"
    UNKNOWN = "unknown"


CONFIGURATION_MESSAGE = "Service configuration issue. Please contact support."
BUSY_MESSAGE = "Service is temporarily busy. Please try again later."
UNAVAILABLE_MESSAGE = "Service is temporarily unavailable. Please try again later."
GENERIC_MESSAGE = "Something went wrong while fetching data. Please try again."

USER_MESSAGES: Dict[ErrorKind, str] = {
    ErrorKind.KEY_MISSING: CONFIGURATION_MESSAGE,
    ErrorKind.KEY_INVALID: CONFIGURATION_MESSAGE,
    ErrorKind.RATE_LIMITED: BUSY_MESSAGE,
    ErrorKind.SERVICE_UNAVAILABLE: UNAVAILABLE_MESSAGE,
    ErrorKind.NETWORK_ERROR: UNAVAILABLE_MESSAGE,
    ErrorKind.BAD_PARAMETERS: GENERIC_MESSAGE,
    ErrorKind.UNKNOWN: GENERIC_MESSAGE,
}

# HTTP status returned to our own clients for each kind
RESPONSE_STATUS: Dict[ErrorKind, int] = {
    ErrorKind.KEY_MISSING: 503,
    ErrorKind.KEY_INVALID: 503,
    ErrorKind.RATE_LIMITED: 429,
    ErrorKind.SERVICE_UNAVAILABLE: 503,
    ErrorKind.NETWORK_ERROR: 503,
    ErrorKind.BAD_PARAMETERS: 502,
    ErrorKind.UNKNOWN: 502,
}


def user_message(kind: ErrorKind) -> str:
    """Short, non-technical message for an error kind."""
    return USER_MESSAGES.get(kind, GENERIC_MESSAGE)


class ClassifiedError(AccessLayerException):
    """A provider failure reduced to a fixed kind.

    Raised by the gateway right next to the failing call. Code above the
    gateway matches on ``kind`` only; ``message`` is for logs.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        provider: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        self.kind = kind
        self.provider = provider
        self.upstream_status = status_code
        details: Dict[str, Any] = {"kind": kind.value}
        if provider:
            details["provider"] = provider
        super().__init__(f"EXTERNAL_{kind.name}", message, details)

    @property
    def status_code(self) -> int:  # type: ignore[override]
        return RESPONSE_STATUS.get(self.kind, 502)

    @property
    def user_message(self) -> str:
        return user_message(self.kind)

    def to_response(self) -> ErrorResponse:
        """Client-facing response; never carries the provider's own text."""
        return ErrorResponse(
            request_id=request_id_var.get(),
            code=self.code,
            message=self.user_message,
            details=self.details
        )

    def __repr__(self) -> str:
        return f"ClassifiedError(kind={self.kind.value!r}, provider={self.provider!r}, message={self.message!r})"
