import logging

import pytest

from mama_brain.errors import (
    LOGIN_REQUIRED_MESSAGE,
    NETWORK_ERROR_MESSAGE,
    SEND_FAILED_MESSAGE,
    UNKNOWN_ERROR_MESSAGE,
    extract_error_info,
    log_sanitized_error,
    sanitize_metadata,
)


@pytest.mark.parametrize(
    ("error", "message", "is_auth"),
    [
        (RuntimeError("Unauthorized: only authenticated users"), LOGIN_REQUIRED_MESSAGE, True),
        (ConnectionError("reset"), NETWORK_ERROR_MESSAGE, False),
        (RuntimeError("Failed to fetch"), NETWORK_ERROR_MESSAGE, False),
        (ValueError("boom"), SEND_FAILED_MESSAGE, False),
        ("unauthorized", LOGIN_REQUIRED_MESSAGE, True),
        ("something odd", UNKNOWN_ERROR_MESSAGE, False),
        (None, UNKNOWN_ERROR_MESSAGE, False),
    ],
)
def test_extract_error_info(error, message: str, is_auth: bool) -> None:
    info = extract_error_info(error)
    assert info.user_message == message
    assert info.is_auth_error is is_auth


def test_non_exception_values_are_serialised() -> None:
    info = extract_error_info({"code": 7})
    assert info.debug_info == '{"code": 7}'


def test_sanitize_metadata_hides_content() -> None:
    sanitized = sanitize_metadata({"content": "سلام", "query": "abc", "user_message": "x", "step": 3})
    assert sanitized == {"content": "[4 chars]", "query": "[3 chars]", "step": 3}
    assert sanitize_metadata(None) == {}


def test_logged_errors_do_not_leak_content(caplog: pytest.LogCaptureFixture) -> None:
    secret = "پیام خصوصی من"
    with caplog.at_level(logging.ERROR):
        info = log_sanitized_error("send", RuntimeError("network down"), {"content": secret})
    assert info.user_message == NETWORK_ERROR_MESSAGE
    assert "network down" in caplog.text
    assert secret not in caplog.text


def test_backend_specific_errors_fall_back_to_send_failure() -> None:
    info = extract_error_info(RuntimeError("Actor not available"))
    assert info.user_message == SEND_FAILED_MESSAGE
    assert not info.is_auth_error
