"""Domain-specific types for trace documents and related artifacts."""

from typing import Any

type JsonValue = None | bool | int | float | str | list[JsonValue] | dict[str, JsonValue]
"""Any value representable in JSON. Tuples are accepted wherever lists are."""

type TraceEvent = dict[str, Any]
"""One trace event. Opaque to the writer; the marker injector reads only name, ts, pid, tid."""

type TraceDocument = dict[str, Any]
"""Ordered top-level trace object. Always has ``traceEvents``, usually ``metadata``, possibly anything else."""

type DevtoolsLog = list[dict[str, Any]]
"""Ordered protocol messages recorded during one gathering pass."""

type Filmstrip = list[dict[str, Any]]
"""Ordered screenshot frames, each with a float ``timestamp`` and an image payload."""

TRACE_EVENTS_KEY = "traceEvents"

__all__ = ["TRACE_EVENTS_KEY", "DevtoolsLog", "Filmstrip", "JsonValue", "TraceDocument", "TraceEvent"]
