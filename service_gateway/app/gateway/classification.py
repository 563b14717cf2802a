"""
HTTP status to error kind mapping.
"""

from typing import Dict, Mapping, Optional

from shared.errors import ErrorKind


STATUS_KINDS: Dict[int, ErrorKind] = {
    400: ErrorKind.BAD_PARAMETERS,
    401: ErrorKind.KEY_INVALID,
    403: ErrorKind.KEY_INVALID,
    429: ErrorKind.RATE_LIMITED,
}

KIND_MESSAGES: Dict[ErrorKind, str] = {
    ErrorKind.KEY_INVALID: "Invalid or unauthorized API key",
    ErrorKind.RATE_LIMITED: "API rate limit exceeded. Please try again later",
    ErrorKind.BAD_PARAMETERS: "Invalid parameters in the request",
    ErrorKind.SERVICE_UNAVAILABLE: "Service is currently unavailable",
}


def classify_status(
    status_code: int,
    overrides: Optional[Mapping[int, ErrorKind]] = None,
) -> Optional[ErrorKind]:
    """Return the error kind for an HTTP status, or None for 2xx."""
    if 200 <= status_code < 300:
        return None
    if overrides and status_code in overrides:
        return overrides[status_code]
    if status_code in STATUS_KINDS:
        return STATUS_KINDS[status_code]
    if status_code >= 500:
        return ErrorKind.SERVICE_UNAVAILABLE
    return ErrorKind.UNKNOWN


def describe_status(kind: ErrorKind, status_code: int, endpoint_label: str) -> str:
    """Log-oriented description of a status failure."""
    message = KIND_MESSAGES.get(kind)
    if message is None:
        return f"HTTP error {status_code} when fetching {endpoint_label}"
    return f"{message} (HTTP {status_code} from {endpoint_label})"
