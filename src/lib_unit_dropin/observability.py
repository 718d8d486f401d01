"""Structured logging helpers for drop-in discovery and writing.

Purpose
    Keep every diagnostic emitted by the library predictable and contextual
    without forcing applications to adopt a specific logging backend.

Contents
    - ``TRACE_ID``: context variable storing the active trace identifier.
    - ``get_logger``: returns the shared package logger (quiet by default).
    - ``bind_trace_id``: binds or clears the active trace identifier.
    - ``log_debug`` / ``log_warning`` / ``log_error``: emit
      structured entries via a single private emitter.
    - ``make_event``: convenience builder for structured event payloads.
    - ``LoggingDiagnosticSink``: adapts the helpers above to the
      :class:`~lib_unit_dropin.application.ports.DiagnosticSink` port.

System Integration
    The application layer never logs directly; it reports to an injected
    diagnostic sink. The composition root wires :class:`LoggingDiagnosticSink`
    so host daemons see the same events through standard :mod:`logging`.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any, Final, Mapping

TRACE_ID: ContextVar[str | None] = ContextVar("lib_unit_dropin_trace_id", default=None)
"""Current trace identifier propagated through logging helpers."""

_LOGGER: Final[logging.Logger] = logging.getLogger("lib_unit_dropin")
_LOGGER.addHandler(logging.NullHandler())


def get_logger() -> logging.Logger:
    """Expose the package logger so applications may attach handlers.

    Why
        Leaves the library silent by default while giving host applications full
        control over handler and formatter configuration.
    """

    return _LOGGER


def bind_trace_id(trace_id: str | None) -> None:
    """Bind or clear the active trace identifier.

    Examples
    --------
    >>> bind_trace_id('scan-1')
    >>> TRACE_ID.get()
    'scan-1'
    >>> bind_trace_id(None)
    >>> TRACE_ID.get() is None
    True
    """

    TRACE_ID.set(trace_id)


def log_debug(message: str, **fields: Any) -> None:
    """Emit a structured debug log entry that includes the trace context."""

    _emit(logging.DEBUG, message, fields)


def log_warning(message: str, **fields: Any) -> None:
    """Emit a structured warning log entry that includes the trace context."""

    _emit(logging.WARNING, message, fields)


def log_error(message: str, **fields: Any) -> None:
    """Emit a structured error log entry that includes the trace context."""

    _emit(logging.ERROR, message, fields)


def make_event(
    unit: str | None,
    path: str | None,
    payload: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Build a structured logging payload for drop-in lifecycle events.

    Inputs
        unit: Unit name the event concerns, if any.
        path: Filesystem path associated with the event, if available.
        payload: Optional mapping with extra diagnostic detail.

    Examples
    --------
    >>> make_event('foo.service', None, {'dirs': 2})
    {'unit': 'foo.service', 'path': None, 'dirs': 2}
    """

    event: dict[str, Any] = {"unit": unit, "path": path}
    if payload:
        event |= dict(payload)
    return event


class LoggingDiagnosticSink:
    """Forward diagnostic-sink calls to the package logger.

    Every record carries ``unit`` and ``path`` keys so handlers can index
    them without checking for presence.
    """

    def debug(self, message: str, **fields: Any) -> None:
        log_debug(message, **_event(fields))

    def warning(self, message: str, **fields: Any) -> None:
        log_warning(message, **_event(fields))

    def error(self, message: str, **fields: Any) -> None:
        log_error(message, **_event(fields))


def _event(fields: dict[str, Any]) -> dict[str, Any]:
    unit = fields.pop("unit", None)
    path = fields.pop("path", None)
    return make_event(unit, path, fields)


def _emit(level: int, message: str, fields: Mapping[str, Any]) -> None:
    """Send a log entry through the shared logger with contextual metadata."""

    _LOGGER.log(level, message, extra={"context": _with_trace(fields)})


def _with_trace(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Attach the current trace identifier to the provided structured fields."""

    context = {"trace_id": TRACE_ID.get()}
    context.update(fields)
    return context
