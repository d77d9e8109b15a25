"""Logging setup and structured event helpers."""

from __future__ import annotations

import contextlib
import contextvars
import logging
import os
import uuid
from typing import Any, Iterator

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
CORRELATION_ID = contextvars.ContextVar("correlation_id", default=None)


def configure_logging(level: int | str | None = None, filename: str | None = None) -> None:
    """Configure root logging with the service's plain-text format.

    Writes to ``filename`` (or ``LOG_FILE``) when given, otherwise to stderr.
    """

    desired_level = level or os.getenv("LOG_LEVEL", "INFO")
    target = filename or os.getenv("LOG_FILE")
    logging.root.handlers.clear()
    handler: logging.Handler = logging.FileHandler(target) if target else logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.basicConfig(level=desired_level, handlers=[handler])


def ensure_correlation_id(correlation_id: str | None = None) -> str:
    """Return the active correlation id, assigning a new one when absent."""

    if correlation_id:
        CORRELATION_ID.set(correlation_id)
        return correlation_id
    current = CORRELATION_ID.get()
    if current:
        return current
    new_id = uuid.uuid4().hex
    CORRELATION_ID.set(new_id)
    return new_id


@contextlib.contextmanager
def operation_context(name: str, correlation_id: str | None = None) -> Iterator[str]:
    """Scope a correlation id to one analysis operation."""

    token = CORRELATION_ID.set(correlation_id or uuid.uuid4().hex)
    try:
        logger.debug("%s started correlation_id=%s", name, CORRELATION_ID.get())
        yield CORRELATION_ID.get()
    finally:
        CORRELATION_ID.reset(token)


def _format_fields(fields: dict) -> str:
    parts = []
    for key, value in fields.items():
        if isinstance(value, float):
            value = f"{value:.3f}"
        parts.append(f"{key}={value}")
    return " ".join(parts)


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    """Emit ``event`` with ``key=value`` fields, also attached to the record."""

    correlation_id = ensure_correlation_id(fields.pop("correlation_id", None))
    exc_info = fields.pop("exc_info", None)
    message = f"{event} {_format_fields(fields)}".rstrip()
    logger.log(
        level,
        message,
        exc_info=exc_info,
        extra={"event": event, "correlation_id": correlation_id, "fields": fields},
    )


__all__ = [
    "configure_logging",
    "ensure_correlation_id",
    "log_event",
    "operation_context",
]
