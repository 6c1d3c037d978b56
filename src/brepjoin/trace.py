"""Structured trace events emitted by the joining and orientation code.

The algorithms never print.  Callers that want to follow a join pass a
``tracer`` callable, ``tracer(event, **fields)``; ``logging_tracer``
adapts that hook to the standard :mod:`logging` machinery.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Sequence

Tracer = Callable[..., None]


def null_tracer(event: str, **fields: Any) -> None:
    """Discard all events."""


def ensure_tracer(tracer: Optional[Tracer]) -> Tracer:
    return tracer if tracer is not None else null_tracer


def logging_tracer(logger: Optional[logging.Logger] = None,
                   level: int = logging.DEBUG) -> Tracer:
    """Return a tracer that writes each event as one log record."""

    if logger is None:
        logger = logging.getLogger("brepjoin.trace")

    def _trace(event: str, **fields: Any) -> None:
        if not logger.isEnabledFor(level):
            return
        payload = " ".join(f"{key}={_format_field(value)}" for key, value in fields.items())
        logger.log(level, "%s %s", event, payload)

    return _trace


class RecordingTracer:
    """Collect events in memory as ``(event, fields)`` pairs."""

    def __init__(self):
        self.events = []

    def __call__(self, event: str, **fields: Any) -> None:
        self.events.append((event, fields))

    def names(self):
        return [event for event, _ in self.events]

    def of(self, name: str):
        return [fields for event, fields in self.events if event == name]


def describe_point(p: Sequence[float]) -> str:
    """Fixed-precision rendering of a point, 12 decimals per coordinate."""

    return f"X:{p[0]:.12f}, Y:{p[1]:.12f}, Z:{p[2]:.12f}"


def describe_segment(seg) -> str:
    return f"{type(seg).__name__} Start: {describe_point(seg.start)} End: {describe_point(seg.end)}"


def _format_field(value: Any) -> str:
    if hasattr(value, "start") and hasattr(value, "end") and hasattr(value, "reversed"):
        return f"[{describe_segment(value)}]"
    return repr(value)


__all__ = [
    "Tracer",
    "null_tracer",
    "ensure_tracer",
    "logging_tracer",
    "RecordingTracer",
    "describe_point",
    "describe_segment",
]
