"""Structured logging and correlation helpers for the storefront service.

Every log line is a JSON object carrying the request correlation id. Fields
passed through :func:`log_event` are scrubbed so that quote contact details,
credentials and chat transcripts never reach the log sink.
"""

from __future__ import annotations

import contextlib
import contextvars
import json
import logging
import os
import re
import uuid
from typing import Any, Dict, Iterator

CORRELATION_ID: contextvars.ContextVar[str | None] = contextvars.ContextVar("correlation_id", default=None)

# Attributes every LogRecord carries; anything else on a record came from ``extra``.
_RECORD_ATTRIBUTES = frozenset(vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))) | {
    "message",
    "asctime",
}
_SENSITIVE_KEYS = frozenset(
    {
        "email",
        "phone",
        "company",
        "contact",
        "password",
        "token",
        "authorization",
        "private_key",
        "api_key",
        "history",
    }
)
_EMAIL_PATTERN = re.compile(r"[\w.\-+]+@[\w.\-]+")
_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


class JsonFormatter(logging.Formatter):
    """Render records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        message = super().format(record)
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record, datefmt=_TIMESTAMP_FORMAT),
            "level": record.levelname,
            "logger": record.name,
            "message": message,
            "event": getattr(record, "event", message),
            "correlation_id": getattr(record, "correlation_id", None) or CORRELATION_ID.get(),
        }
        extras = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRIBUTES and key not in payload
        }
        payload.update(redact_for_log(extras))
        return json.dumps(payload, default=str)


def configure_logging(level: int | str | None = None) -> None:
    """Install a single JSON stream handler on the root logger.

    The level defaults to ``LOG_LEVEL`` from the environment, then ``INFO``.
    """

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    logging.root.handlers.clear()
    logging.basicConfig(level=level or os.getenv("LOG_LEVEL", "INFO"), handlers=[handler])


def _redact_string(value: str) -> str:
    if value.lower().startswith("http"):
        return "[redacted-url]"
    return _EMAIL_PATTERN.sub("[redacted-email]", value)


def redact_for_log(payload: Any) -> Any:
    """Recursively mask contact details, secrets, URLs and email addresses."""

    if payload is None or isinstance(payload, (bool, int, float)):
        return payload
    if isinstance(payload, str):
        return _redact_string(payload)
    if isinstance(payload, dict):
        return {
            key: "[redacted]" if str(key).lower() in _SENSITIVE_KEYS else redact_for_log(value)
            for key, value in payload.items()
        }
    if isinstance(payload, (list, tuple, set, frozenset)):
        return [redact_for_log(item) for item in payload]
    return str(payload)


def get_logger(name: str) -> logging.Logger:
    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name)


def ensure_correlation_id(correlation_id: str | None = None) -> str:
    """Return the active correlation id, setting ``correlation_id`` or a fresh one if given/missing."""

    if correlation_id:
        CORRELATION_ID.set(correlation_id)
        return correlation_id
    active = CORRELATION_ID.get()
    if not active:
        active = uuid.uuid4().hex
        CORRELATION_ID.set(active)
    return active


@contextlib.contextmanager
def correlation_context(correlation_id: str | None = None) -> Iterator[str]:
    """Scope a correlation id (a new one unless given) to the ``with`` block."""

    token = CORRELATION_ID.set(correlation_id or uuid.uuid4().hex)
    try:
        yield CORRELATION_ID.get()
    finally:
        CORRELATION_ID.reset(token)


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    """Log ``event`` with redacted ``fields`` attached as structured extras.

    ``correlation_id`` and ``exc_info`` are taken out of ``fields`` and handled
    by the logging machinery instead of being emitted as plain fields.
    """

    correlation_id = ensure_correlation_id(fields.pop("correlation_id", None))
    exc_info = fields.pop("exc_info", None)
    extra = {"event": event, "correlation_id": correlation_id}
    extra.update(redact_for_log(fields))
    logger.log(level, event, exc_info=exc_info, extra=extra)


@contextlib.contextmanager
def operation_context(name: str, **attributes: Any) -> Iterator[str]:
    """Run a named operation under its own correlation id."""

    with correlation_context(attributes.pop("correlation_id", None)) as scoped_id:
        log_event(get_logger("site_app.operations"), logging.DEBUG, "operation_entered", operation=name, **attributes)
        yield scoped_id


__all__ = [
    "JsonFormatter",
    "configure_logging",
    "correlation_context",
    "ensure_correlation_id",
    "get_logger",
    "log_event",
    "redact_for_log",
    "operation_context",
]
