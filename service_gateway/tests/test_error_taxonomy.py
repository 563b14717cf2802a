"""
Tests for the provider error taxonomy and log redaction helpers.
"""

import pytest

from shared.errors import (
    BUSY_MESSAGE,
    CONFIGURATION_MESSAGE,
    GENERIC_MESSAGE,
    UNAVAILABLE_MESSAGE,
    ClassifiedError,
    ErrorKind,
    user_message,
)
from shared.logging import clear_context, redact_url, set_request_id


@pytest.mark.parametrize(
    "kind,message,status_code",
    [
        (ErrorKind.KEY_MISSING, CONFIGURATION_MESSAGE, 503),
        (ErrorKind.KEY_INVALID, CONFIGURATION_MESSAGE, 503),
        (ErrorKind.RATE_LIMITED, BUSY_MESSAGE, 429),
        (ErrorKind.SERVICE_UNAVAILABLE, UNAVAILABLE_MESSAGE, 503),
        (ErrorKind.NETWORK_ERROR, UNAVAILABLE_MESSAGE, 503),
        (ErrorKind.BAD_PARAMETERS, GENERIC_MESSAGE, 502),
        (ErrorKind.UNKNOWN, GENERIC_MESSAGE, 502),
    ],
)
def test_every_kind_has_message_and_status(kind, message, status_code):
    error = ClassifiedError(kind, "provider detail")

    assert user_message(kind) == message
    assert error.user_message == message
    assert error.status_code == status_code
    assert error.code == f"EXTERNAL_{kind.name}"


def test_response_hides_provider_text():
    set_request_id("req-42")
    try:
        error = ClassifiedError(
            ErrorKind.UNKNOWN,
            "upstream said: internal trace at line 12",
            provider="polygon",
            status_code=418,
        )

        response = error.to_response()
    finally:
        clear_context()

    assert response.request_id == "req-42"
    assert response.message == GENERIC_MESSAGE
    assert response.details == {"kind": "unknown", "provider": "polygon"}
    assert error.message == "upstream said: internal trace at line 12"
    assert error.upstream_status == 418


def test_redact_url_masks_credentials():
    url = "https://api.polygon.io/v2/aggs/ticker/AAPL/prev?adjusted=true&apiKey=secret"

    redacted = redact_url(url)

    assert "secret" not in redacted
    assert "apiKey=***" in redacted
    assert "adjusted=true" in redacted


def test_redact_url_without_query():
    assert redact_url("https://newsapi.org/v2/everything") == "https://newsapi.org/v2/everything"
