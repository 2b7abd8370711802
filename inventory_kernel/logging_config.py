"""
Structured JSON logging for inventory valuation.

Responsibility:
    One JSON object per log line, carrying the record's ``extra`` fields and
    the request-scoped fields bound in ``LogContext`` (supplier, request,
    correlation ids).  Every module logs through ``get_logger`` so all
    records land under the ``inventory_kernel`` logger hierarchy.

Architecture position:
    Kernel -- no dependencies on any other inventory package.

Failure modes:
    - Values the JSON encoder does not know are rendered with ``str()``;
      formatting never raises.
"""

__all__ = [
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

import json
import logging
import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, date, datetime
from typing import Any

ROOT_LOGGER_NAME = "inventory_kernel"

_CONTEXT_FIELDS = (
    "correlation_id",
    "request_id",
    "actor_id",
    "supplier_id",
    "trace_id",
)

_context_vars: dict[str, ContextVar[str | None]] = {
    name: ContextVar(f"inventory_log_{name}", default=None) for name in _CONTEXT_FIELDS
}


class LogContext:
    """
    Request-scoped log fields held in context variables.

    Each thread and each asyncio task sees its own values.  Unknown field
    names are rejected with ``KeyError``.
    """

    fields = _CONTEXT_FIELDS

    @staticmethod
    def _var(name: str) -> ContextVar[str | None]:
        try:
            return _context_vars[name]
        except KeyError:
            raise KeyError(f"Unknown log context field: {name}") from None

    @classmethod
    def set(cls, **fields: str | None) -> None:
        """Set the given fields; ``None`` leaves a field unchanged."""
        for name, value in fields.items():
            var = cls._var(name)
            if value is not None:
                var.set(value)

    @classmethod
    def get_all(cls) -> dict[str, str]:
        """Currently bound fields, omitting unset ones."""
        return {
            name: value
            for name, var in _context_vars.items()
            if (value := var.get()) is not None
        }

    @classmethod
    def clear(cls) -> None:
        for var in _context_vars.values():
            var.set(None)

    @classmethod
    @contextmanager
    def bind(cls, **fields: str | None) -> Iterator[type["LogContext"]]:
        """Bind fields for the duration of a ``with`` block, then restore."""
        tokens = [
            (cls._var(name), cls._var(name).set(value))
            for name, value in fields.items()
            if value is not None
        ]
        try:
            yield cls
        finally:
            for var, token in reversed(tokens):
                var.reset(token)


# Attributes every LogRecord has; anything else came from ``extra``
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}


def _json_default(value: Any) -> str:
    # Decimal and UUID keep their exact text form
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def _exception_fields(exc: BaseException) -> dict[str, Any]:
    """Type, message, kernel error code and structured attributes."""
    out: dict[str, Any] = {
        "exc_type": type(exc).__name__,
        "exc_message": str(exc),
    }
    code = getattr(exc, "code", None)
    if code is not None:
        out["exc_code"] = code
    for key, value in vars(exc).items():
        if not key.startswith("_"):
            out[f"exc_{key}"] = value
    return out


class StructuredFormatter(logging.Formatter):
    """Render a LogRecord as a single line of JSON."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **LogContext.get_all(),
        }
        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS:
                payload.setdefault(key, value)

        if record.exc_info and record.exc_info[1] is not None:
            payload.update(_exception_fields(record.exc_info[1]))
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=_json_default)


def get_logger(name: str) -> logging.Logger:
    """Logger ``inventory_kernel.<name>``."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


_state_lock = threading.Lock()
_configured = False


def configure_logging(
    *,
    level: int = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """
    Attach one JSON handler to the ``inventory_kernel`` logger.

    Only the first call has an effect until ``reset_logging()``.  Records
    do not propagate to the root logger.
    """
    global _configured
    with _state_lock:
        if _configured:
            return
        _configured = True

    if handler is None:
        handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(StructuredFormatter())

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)
    root.propagate = False
    root.addHandler(handler)


def reset_logging() -> None:
    """Undo ``configure_logging``.  For tests."""
    global _configured
    with _state_lock:
        _configured = False
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.handlers.clear()
    root.setLevel(logging.WARNING)
    root.propagate = True
