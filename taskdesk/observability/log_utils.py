"""
Structured logging helpers.

Builds log `extra` payloads that are safe to emit: credentials are masked,
long user text (questions, answers, cell values) is cut to a preview, and
collections are summarized by size instead of dumped.

Dependencies: logging (stdlib), taskdesk.observability.correlation
System role: Log context sanitizing for middleware and services
"""

import logging
from typing import Any

from taskdesk.observability.correlation import get_correlation_id

REDACTED = "***"
SENSITIVE_KEYS = ("api_key", "apikey", "authorization", "password", "secret", "token")
DEFAULT_PREVIEW_CHARS = 200


def is_sensitive(key: str) -> bool:
    """Whether a context key names a credential."""
    lowered = key.lower().replace("-", "_")
    return any(marker in lowered for marker in SENSITIVE_KEYS)


def preview(value: Any, max_length: int = DEFAULT_PREVIEW_CHARS) -> str:
    """
    Render a value for a log line.

    Sequences and mappings are reported by size; strings longer than
    max_length are cut and suffixed with their full length.
    """
    if value is None:
        return "None"
    if isinstance(value, (list, tuple, set)):
        return f"{type(value).__name__}({len(value)} items)"
    if isinstance(value, dict):
        return f"dict({len(value)} keys)"
    text = value if isinstance(value, str) else repr(value)
    if len(text) > max_length:
        return f"{text[:max_length]}... ({len(text)} chars)"
    return text


def build_context(**context: Any) -> dict[str, str]:
    """Sanitized `extra` mapping, tagged with the current correlation id."""
    safe = {
        key: REDACTED if is_sensitive(key) else preview(value)
        for key, value in context.items()
    }
    safe.setdefault("request_id", get_correlation_id() or "-")
    return safe


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **context: Any,
) -> None:
    """
    Log a message with sanitized structured context.

    Args:
        logger: Logger instance
        level: Log level (logging.INFO, etc.)
        message: Log message
        **context: Arbitrary key-value pairs (credentials are masked)
    """
    logger.log(level, message, extra=build_context(**context))


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: BaseException,
    **context: Any,
) -> None:
    """
    Log an exception with its type and a preview of its message.

    Args:
        logger: Logger instance
        message: Log message
        exc: Exception instance
        **context: Additional key-value pairs
    """
    extra = build_context(**context)
    extra["error_type"] = type(exc).__name__
    extra["error_msg"] = preview(str(exc))
    logger.exception(message, extra=extra)
