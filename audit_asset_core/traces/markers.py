"""Synthetic metric marker events for trace documents.

Each computed metric (first contentful paint, speed index, ...) becomes two
``blink.user_timing`` events appended to the trace so that trace viewers show
where the metric landed:

- a mark (``ph: "R"``) at the metric timestamp
- a complete measure (``ph: "X"``) spanning from the trace start to the metric

Metric values are milliseconds relative to the trace start; trace timestamps
are microseconds. Events are appended after the existing ones and are not
re-sorted.
"""

import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from audit_asset_core.logging import get_pipeline_logger

from ._types import TRACE_EVENTS_KEY, TraceDocument, TraceEvent

logger = get_pipeline_logger(__name__)

__all__ = [
    "METRIC_DEFINITIONS",
    "USER_TIMING_CATEGORY",
    "MarkerDefinition",
    "MarkerInjector",
    "find_reference_event",
    "inject_markers",
    "metric_value",
]

USER_TIMING_CATEGORY = "blink.user_timing"
NAVIGATION_START_EVENT = "navigationStart"
_MS_TO_US = 1000


@dataclass(frozen=True, slots=True)
class MarkerDefinition:
    """One metric that may be marked in a trace.

    ``audit`` is the key looked up in the audit results; it falls back to
    ``name``. Excluded definitions never produce markers.
    """

    id: str
    name: str
    audit: str = ""
    excluded: bool = False

    @property
    def audit_key(self) -> str:
        return self.audit or self.name


METRIC_DEFINITIONS: tuple[MarkerDefinition, ...] = (
    MarkerDefinition("navstart", "Navigation Start", excluded=True),
    MarkerDefinition("ttfcp", "First Contentful Paint", "first-contentful-paint"),
    MarkerDefinition("ttfmp", "First Meaningful Paint", "first-meaningful-paint"),
    MarkerDefinition("psi", "Perceptual Speed Index", "speed-index-metric"),
    MarkerDefinition("fv", "First Visual Change", "first-visual-change"),
    MarkerDefinition("vc85", "Visually Complete 85%", "visually-complete-85"),
    MarkerDefinition("vc100", "Visually Complete 100%", "visually-complete-100"),
    MarkerDefinition("ttfi", "First Interactive (vBeta)", "first-interactive"),
    MarkerDefinition("ttci", "Time to Consistently Interactive (vBeta)", "consistently-interactive"),
    MarkerDefinition("eot", "End of Trace", "end-of-trace"),
    MarkerDefinition("onload", "On Load", "on-load"),
    MarkerDefinition("dcl", "DOM Content Loaded", "dom-content-loaded"),
)
"""Default ordered marker definitions. "Navigation Start" is the excluded reference entry."""


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def metric_value(result: Any) -> float | None:
    """Extract a millisecond metric value from one audit result.

    Accepts a bare number, or a mapping whose first numeric field among
    ``numericValue`` and ``rawValue`` is used. Returns None for anything
    else, including booleans and NaN/Infinity. Negative values are kept.
    """
    if isinstance(result, Mapping):
        candidates = [result.get("numericValue"), result.get("rawValue")]
    else:
        candidates = [result]
    for candidate in candidates:
        if _is_number(candidate):
            return float(candidate)
    return None


def find_reference_event(events: Iterable[Any]) -> Mapping[str, Any] | None:
    """Return the event that defines the trace start.

    The first ``navigationStart`` event wins; otherwise the event with the
    smallest numeric ``ts``. Returns None when no event has a usable ``ts``.
    """
    earliest: Mapping[str, Any] | None = None
    for event in events:
        if not isinstance(event, Mapping) or not _is_number(event.get("ts")):
            continue
        if event.get("name") == NAVIGATION_START_EVENT:
            return event
        if earliest is None or event["ts"] < earliest["ts"]:
            earliest = event
    return earliest


class MarkerInjector:
    """Appends metric marker events to trace documents.

    The definitions are fixed per instance so injection is deterministic and
    independent of any global state.

    Example:
        >>> injector = MarkerInjector(METRIC_DEFINITIONS)
        >>> augmented = injector.inject(trace, {"first-contentful-paint": 812.4})
    """

    def __init__(self, definitions: Sequence[MarkerDefinition] = METRIC_DEFINITIONS) -> None:
        self.definitions = tuple(definitions)

    def generate(self, events: Sequence[Any], audit_results: Mapping[str, Any]) -> list[TraceEvent]:
        """Build the marker events for ``events`` without modifying them."""
        reference = find_reference_event(events)
        if reference is None:
            logger.warning("No reference timestamp found in trace, not synthesizing marker events")
            return []

        start_ts = reference["ts"]
        pid = reference.get("pid")
        tid = reference.get("tid")
        markers: list[TraceEvent] = []
        for definition in self.definitions:
            if definition.excluded:
                continue
            value = metric_value(audit_results.get(definition.audit_key))
            if value is None:
                logger.debug(f"({definition.name}) missing metric value, skipping marker")
                continue
            offset = value * _MS_TO_US
            markers.append({
                "name": definition.name,
                "cat": USER_TIMING_CATEGORY,
                "ph": "R",
                "ts": start_ts + offset,
                "pid": pid,
                "tid": tid,
                "args": {},
            })
            markers.append({
                "name": definition.name,
                "cat": USER_TIMING_CATEGORY,
                "ph": "X",
                "ts": start_ts,
                "dur": offset,
                "pid": pid,
                "tid": tid,
                "id": definition.id,
                "args": {},
            })
        return markers

    def inject(self, trace: Mapping[str, Any], audit_results: Mapping[str, Any]) -> TraceDocument:
        """Return a copy of ``trace`` with marker events appended to ``traceEvents``.

        The input document and its event list are left untouched.
        """
        events = trace.get(TRACE_EVENTS_KEY) or []
        markers = self.generate(events, audit_results)
        augmented = dict(trace)
        augmented[TRACE_EVENTS_KEY] = [*events, *markers]
        if markers:
            logger.debug(f"Synthesized {len(markers)} marker events")
        return augmented


def inject_markers(
    trace: Mapping[str, Any],
    definitions: Sequence[MarkerDefinition],
    audit_results: Mapping[str, Any],
) -> TraceDocument:
    """Append two marker events per non-excluded definition with a usable audit result."""
    return MarkerInjector(definitions).inject(trace, audit_results)
