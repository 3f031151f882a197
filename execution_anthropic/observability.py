"""Minimal tracing primitives for provider calls.

Events are printed as one JSON object per line. Callers must never pass
message content or credentials as event fields.
"""

from __future__ import annotations

import dataclasses
import json
import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterator


@dataclass
class Span:
    name: str
    trace_id: str
    span_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    start_ns: int = field(default_factory=time.time_ns)
    end_ns: int | None = None
    attributes: dict[str, Any] = field(default_factory=dict)

    def end(self) -> None:
        if self.end_ns is None:
            self.end_ns = time.time_ns()

    @property
    def duration_ms(self) -> float | None:
        if self.end_ns is None:
            return None
        return (self.end_ns - self.start_ns) / 1_000_000.0


def new_trace_id() -> str:
    return uuid.uuid4().hex


def normalize_usage(obj: Any) -> dict[str, Any] | None:
    """Turn usage metadata (dict, dataclass, pydantic model) into a plain dict."""
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    if hasattr(obj, 'model_dump'):
        return obj.model_dump()
    return {'value': str(obj)}


def log_event(event: str, *, trace_id: str, span: Span | None = None, **fields: Any) -> None:
    payload: dict[str, Any] = {'event': event, 'trace_id': trace_id, **fields}
    if span is not None:
        payload['span'] = {
            'name': span.name,
            'span_id': span.span_id,
            'duration_ms': span.duration_ms,
            'attributes': span.attributes,
        }
    print(json.dumps(payload, ensure_ascii=False, default=str))


@contextmanager
def traced(name: str, *, trace_id: str, **attributes: Any) -> Iterator[Span]:
    """Time a block and emit `span.end` when it exits, even on failure.

    Attributes set on the yielded span inside the block are included in the event.
    """
    span = Span(name=name, trace_id=trace_id, attributes=dict(attributes))
    try:
        yield span
    finally:
        span.end()
        log_event('span.end', trace_id=trace_id, span=span)
