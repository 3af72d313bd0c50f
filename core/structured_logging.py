"""Structured logging helpers with run correlation context.

Log records carry ``run_id`` and ``phase`` fields. Output goes to stderr so
that stdout stays free for the rendered document.
"""

from __future__ import annotations

import contextvars
import logging
import sys
import uuid
from contextlib import contextmanager
from typing import Iterator, TextIO

_RUN_ID_VAR: contextvars.ContextVar[str] = contextvars.ContextVar(
    "run_id", default="-"
)
_PHASE_VAR: contextvars.ContextVar[str] = contextvars.ContextVar(
    "phase", default="-"
)

LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | run_id=%(run_id)s | phase=%(phase)s | "
    "%(name)s | %(message)s"
)


class _RunContextFilter(logging.Filter):
    """Inject run correlation fields into all log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = _RUN_ID_VAR.get("-")
        record.phase = _PHASE_VAR.get("-")
        return True


def resolve_log_level(level: int | str | None, default: int = logging.WARNING) -> int:
    """Turn a level name (``"debug"``) or number into a logging level."""
    if level is None or level == "":
        return default
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level}")
    return value


def configure_structured_logging(
    level: int | str | None = logging.WARNING,
    stream: TextIO | None = None,
) -> None:
    """Configure root logging format with run/phase context on stderr."""
    root_logger = logging.getLogger()
    root_logger.setLevel(resolve_log_level(level))
    formatter = logging.Formatter(LOG_FORMAT)

    if not root_logger.handlers:
        root_logger.addHandler(logging.StreamHandler(stream or sys.stderr))

    for handler in root_logger.handlers:
        handler.setFormatter(formatter)
        if not any(isinstance(f, _RunContextFilter) for f in handler.filters):
            handler.addFilter(_RunContextFilter())


def set_run_id(run_id: str | None = None) -> str:
    """Set or generate run correlation ID."""
    value = run_id or str(uuid.uuid4())
    _RUN_ID_VAR.set(value)
    return value


def get_run_id() -> str:
    """Get current run correlation ID."""
    return _RUN_ID_VAR.get("-")


@contextmanager
def phase_scope(phase: str) -> Iterator[None]:
    """Temporarily set phase context for emitted logs."""
    token = _PHASE_VAR.set(phase)
    try:
        yield
    finally:
        _PHASE_VAR.reset(token)
