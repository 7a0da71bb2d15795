"""Streaming JSON writer for trace documents.

A trace can serialize to more than 2**28 bytes, so the full JSON text is
never built in memory. Top-level keys are written in their original order;
the ``traceEvents`` array is written one event at a time, so memory grows
with the largest single event plus the sink buffer, not with the trace.

Output layout::

    {
    "traceEvents": [
      {...},
      {...}
    ],
    "metadata": {...}
    }

Floats use Python's shortest round-trip repr, so ``674089419.919`` is
written (and parses back) as ``674089419.919``.
"""

import asyncio
import json
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any, BinaryIO

from audit_asset_core.exceptions import AssetWriteError, TraceSerializationError
from audit_asset_core.logging import get_pipeline_logger
from audit_asset_core.settings import settings

from ._types import TRACE_EVENTS_KEY

logger = get_pipeline_logger(__name__)

__all__ = ["StreamingTraceWriter", "iter_trace_json", "write_trace"]


def _dumps(value: Any, where: str) -> str:
    """Serialize one bounded value, mapping json failures to TraceSerializationError."""
    try:
        return json.dumps(value, ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError, RecursionError) as e:
        raise TraceSerializationError(f"Cannot serialize {where}: {e}") from e


def _encode(chunk: str) -> bytes:
    try:
        return chunk.encode("utf-8")
    except UnicodeEncodeError as e:
        raise TraceSerializationError(f"Trace contains a string that is not valid UTF-8: {e}") from e


def _iter_events(events: list[Any] | tuple[Any, ...]) -> Iterator[str]:
    if not events:
        yield "[]"
        return
    yield "["
    for index, event in enumerate(events):
        separator = "\n  " if index == 0 else ",\n  "
        yield separator + _dumps(event, f"{TRACE_EVENTS_KEY}[{index}]")
    yield "\n]"


def iter_trace_json(document: Mapping[str, Any]) -> Iterator[str]:
    """Yield the JSON text of a trace document in bounded chunks.

    Every top-level key is emitted in insertion order. A list or tuple under
    ``traceEvents`` is streamed element by element; every other value is
    serialized in one piece.

    Raises:
        TraceSerializationError: A value is not representable in JSON
            (NaN/Infinity, cyclic reference, unsupported type, non-string key).
    """
    if not isinstance(document, Mapping):
        raise TraceSerializationError(f"Trace document must be a mapping, got {type(document).__name__}")

    yield "{"
    for position, (key, value) in enumerate(document.items()):
        if not isinstance(key, str):
            raise TraceSerializationError(f"Trace document keys must be strings, got {key!r}")
        prefix = ("\n" if position == 0 else ",\n") + _dumps(key, "key") + ": "
        if key == TRACE_EVENTS_KEY and isinstance(value, (list, tuple)):
            yield prefix
            yield from _iter_events(value)
        else:
            yield prefix + _dumps(value, f"top-level key {key!r}")
    yield "\n}\n"


class StreamingTraceWriter:
    """Writes trace documents to binary sinks without materializing the whole JSON text.

    Example:
        >>> writer = StreamingTraceWriter()
        >>> writer.save({"traceEvents": [], "metadata": {}}, Path("run-0.trace.json"))
    """

    def __init__(self, buffer_size: int | None = None, keep_partial: bool | None = None) -> None:
        self.buffer_size = buffer_size or settings.write_buffer_size
        self.keep_partial = settings.keep_partial_traces if keep_partial is None else keep_partial

    def write(self, document: Mapping[str, Any], sink: BinaryIO, *, close_sink: bool = True) -> int:
        """Stream ``document`` into ``sink`` and return the number of bytes written.

        The sink is flushed, and closed when ``close_sink`` is true, on every exit
        path. A sink closed by someone else is reported as AssetWriteError on the
        next write.

        Raises:
            TraceSerializationError: A value in the document is not representable.
            AssetWriteError: The sink rejected a write, flush or close.
        """
        sink_name = getattr(sink, "name", None)
        written = 0
        try:
            for chunk in iter_trace_json(document):
                data = _encode(chunk)
                try:
                    sink.write(data)
                except (OSError, ValueError) as e:
                    raise AssetWriteError(f"Failed to write trace data: {e}", sink_name) from e
                written += len(data)
            try:
                sink.flush()
            except (OSError, ValueError) as e:
                raise AssetWriteError(f"Failed to flush trace data: {e}", sink_name) from e
        except BaseException:
            if close_sink:
                try:
                    sink.close()
                except (OSError, ValueError) as close_error:
                    # The original failure is the one reported
                    logger.debug(f"Closing trace sink after failure also failed: {close_error}")
            raise

        if close_sink:
            try:
                sink.close()
            except (OSError, ValueError) as e:
                raise AssetWriteError(f"Failed to close trace sink: {e}", sink_name) from e
        return written

    def save(self, document: Mapping[str, Any], path: Path | str) -> int:
        """Write ``document`` to ``path`` and return the number of bytes written.

        After a serialization failure the partial file is deleted unless
        ``keep_partial`` is set; either way it must not be trusted.
        """
        path = Path(path)
        try:
            sink = open(path, "wb", buffering=self.buffer_size)
        except OSError as e:
            raise AssetWriteError(f"Cannot open trace file {path}: {e}", path) from e

        try:
            return self.write(document, sink)
        except TraceSerializationError:
            if not self.keep_partial:
                path.unlink(missing_ok=True)
                logger.warning(f"Removed partial trace file {path} after serialization failure")
            raise


async def write_trace(document: Mapping[str, Any], path: Path | str, *, writer: StreamingTraceWriter | None = None) -> int:
    """Stream a trace document to ``path`` off the event loop. Returns bytes written."""
    writer = writer or StreamingTraceWriter()
    return await asyncio.to_thread(writer.save, document, path)
