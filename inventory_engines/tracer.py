"""
inventory_engines.tracer -- INVENTORY_ENGINE_TRACE records for engine calls.

Responsibility:
    ``@traced_engine`` logs one record per call of a pure engine function:
    which engine and version ran, a short hash of the inputs that decide
    its result, and how long it took.  Two records with the same engine,
    version and fingerprint describe the same computation.

Architecture position:
    Engines -- support code for the calculation layer.  Logging is the
    only side effect.

Invariants enforced:
    - Fingerprints depend only on the values of the named parameters,
      never on whether they were passed positionally or by keyword.
    - Mapping fingerprints ignore key order.

Failure modes:
    - A named parameter the call leaves unbound hashes as "null".
    - Iterators hash as their type name so the engine still sees every
      element.
"""

from __future__ import annotations

import functools
import hashlib
import inspect
import logging
import time
from collections.abc import Callable, Iterator, Mapping
from datetime import date, datetime
from decimal import Decimal
from typing import Any

TRACE_TYPE = "INVENTORY_ENGINE_TRACE"
FINGERPRINT_LENGTH = 16

_logger = logging.getLogger("inventory_kernel.engines.tracer")


def _stable_text(value: Any) -> str:
    """Text form of ``value`` that is identical across runs and processes."""
    match value:
        case None:
            return "null"
        case datetime() | date():
            return value.isoformat()
        case Mapping():
            pairs = sorted((str(k), _stable_text(v)) for k, v in value.items())
            return "{" + ",".join(f"{k}:{v}" for k, v in pairs) + "}"
        case list() | tuple():
            return "[" + ",".join(map(_stable_text, value)) + "]"
        case Iterator():
            return f"<{type(value).__name__}>"
        case str() | int() | Decimal():
            return str(value)
    return str(value)


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    arguments: Mapping[str, Any],
) -> str:
    """First 16 hex digits of the SHA-256 of ``name=value`` pairs, in field order."""
    digest = hashlib.sha256()
    for position, name in enumerate(fingerprint_fields):
        if position:
            digest.update(b"|")
        digest.update(f"{name}={_stable_text(arguments.get(name))}".encode())
    return digest.hexdigest()[:FINGERPRINT_LENGTH]


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable[[Callable], Callable]:
    """
    Wrap an engine function so each call logs an INVENTORY_ENGINE_TRACE record.

    ``fingerprint_fields`` names the parameters hashed into
    ``input_fingerprint``; with none the fingerprint is empty.
    """

    def wrap(func: Callable) -> Callable:
        binder = inspect.signature(func).bind_partial

        def fingerprint(args: tuple, kwargs: dict) -> str:
            if not fingerprint_fields:
                return ""
            return compute_input_fingerprint(
                fingerprint_fields, binder(*args, **kwargs).arguments
            )

        @functools.wraps(func)
        def traced(*args: Any, **kwargs: Any) -> Any:
            input_fingerprint = fingerprint(args, kwargs)
            started = time.monotonic()
            result = func(*args, **kwargs)
            elapsed_ms = (time.monotonic() - started) * 1000

            _logger.info(
                TRACE_TYPE,
                extra={
                    "trace_type": TRACE_TYPE,
                    "engine_name": engine_name,
                    "engine_version": engine_version,
                    "input_fingerprint": input_fingerprint,
                    "duration_ms": round(elapsed_ms, 2),
                    "function": func.__qualname__,
                },
            )
            return result

        return traced

    return wrap
