"""Correlation-aware structured logging helpers.

structlog itself is configured in ``config.settings``.  This module gives
services a single sink with the shape ``log(level, correlation_id,
message, context, **fields)`` and helpers to bind a correlation id into
structlog's contextvars for the duration of a unit of work.
"""

from __future__ import annotations

import uuid
from contextvars import ContextVar
from typing import Any, Optional

import structlog

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

_LEVELS = {
    "DEBUG": "debug",
    "INFO": "info",
    "WARN": "warning",
    "WARNING": "warning",
    "ERROR": "error",
}


def bind_correlation_id(correlation_id: Optional[str] = None) -> str:
    """Bind *correlation_id* (or a fresh UUID4) to every following log line."""
    cid = correlation_id or str(uuid.uuid4())
    correlation_id_var.set(cid)
    structlog.contextvars.bind_contextvars(correlation_id=cid)
    return cid


def clear_correlation_id() -> None:
    correlation_id_var.set("")
    structlog.contextvars.unbind_contextvars("correlation_id")


def log_with_correlation(
    level: str,
    correlation_id: Optional[str],
    message: str,
    context: str,
    **fields: Any,
) -> None:
    """Emit one structured log line.

    ``context`` is the emitting component (used as logger name) and
    ``fields`` are rendered as top-level keys.  An empty
    ``correlation_id`` falls back to the one bound in the current context.
    """
    method = _LEVELS.get(level.upper())
    if method is None:
        raise ValueError(f"Unknown log level: {level!r}")

    cid = correlation_id or correlation_id_var.get() or None
    logger = structlog.get_logger(context)
    getattr(logger, method)(message, correlation_id=cid, context=context, **fields)
