"""Trace document serialization and marker injection.

@public
"""

from ._types import TRACE_EVENTS_KEY, DevtoolsLog, Filmstrip, JsonValue, TraceDocument, TraceEvent
from .markers import METRIC_DEFINITIONS, MarkerDefinition, MarkerInjector, inject_markers
from .writer import StreamingTraceWriter, iter_trace_json, write_trace

__all__ = [
    "METRIC_DEFINITIONS",
    "TRACE_EVENTS_KEY",
    "DevtoolsLog",
    "Filmstrip",
    "JsonValue",
    "MarkerDefinition",
    "MarkerInjector",
    "StreamingTraceWriter",
    "TraceDocument",
    "TraceEvent",
    "inject_markers",
    "iter_trace_json",
    "write_trace",
]
