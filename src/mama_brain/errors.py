"""Exceptions and error reporting helpers.

User-facing messages are Persian; debug details go to the log with any
message content reduced to its length.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .logging import get_logger

LOGGER = get_logger(__name__)

UNKNOWN_ERROR_MESSAGE = "خطای ناشناخته رخ داد"
LOGIN_REQUIRED_MESSAGE = "لطفاً ابتدا وارد شوید"
NETWORK_ERROR_MESSAGE = "خطای شبکه. لطفاً اتصال اینترنت خود را بررسی کنید"
SEND_FAILED_MESSAGE = "ارسال پیام ناموفق بود"

_AUTH_MARKERS = ("unauthorized", "only authenticated users", "only users can", "permission")
_NETWORK_MARKERS = ("network", "fetch", "connection")
_SENSITIVE_KEYS = ("content", "query")


class MamaBrainError(Exception):
    """Base class for errors raised by the Mama Brain core."""


class InvalidTransitionError(MamaBrainError):
    """Raised when a pipeline step is moved to a status it cannot reach."""


class FaqImportError(MamaBrainError):
    """Raised when an FAQ record cannot be parsed."""


@dataclass(frozen=True)
class ErrorInfo:
    user_message: str
    is_auth_error: bool
    debug_info: str


def extract_error_info(error: object) -> ErrorInfo:
    """Map any raised value to a user-readable Persian message."""
    if isinstance(error, BaseException):
        debug_info = str(error) or type(error).__name__
        lowered = debug_info.lower()
        if any(marker in lowered for marker in _AUTH_MARKERS):
            return ErrorInfo(LOGIN_REQUIRED_MESSAGE, True, debug_info)
        if isinstance(error, (ConnectionError, TimeoutError)) or any(m in lowered for m in _NETWORK_MARKERS):
            return ErrorInfo(NETWORK_ERROR_MESSAGE, False, debug_info)
        return ErrorInfo(SEND_FAILED_MESSAGE, False, debug_info)
    if isinstance(error, str):
        if "unauthorized" in error.lower():
            return ErrorInfo(LOGIN_REQUIRED_MESSAGE, True, error)
        return ErrorInfo(UNKNOWN_ERROR_MESSAGE, False, error)
    if error is not None:
        return ErrorInfo(UNKNOWN_ERROR_MESSAGE, False, json.dumps(error, default=repr, ensure_ascii=False))
    return ErrorInfo(UNKNOWN_ERROR_MESSAGE, False, "Unknown error")


def sanitize_metadata(metadata: Optional[Mapping[str, Any]]) -> dict[str, Any]:
    """Replace message-bearing fields with their lengths."""
    if not metadata:
        return {}
    sanitized = {key: value for key, value in metadata.items() if key != "user_message"}
    for key in _SENSITIVE_KEYS:
        value = sanitized.get(key)
        if value is not None:
            sanitized[key] = f"[{len(str(value))} chars]"
    return sanitized


def log_sanitized_error(operation: str, error: object, metadata: Optional[Mapping[str, Any]] = None) -> ErrorInfo:
    info = extract_error_info(error)
    LOGGER.error(
        "[%s] %s (auth=%s) %s",
        operation,
        info.debug_info,
        info.is_auth_error,
        sanitize_metadata(metadata),
    )
    return info
