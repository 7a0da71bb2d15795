"""Writes per-pass audit assets to disk.

Naming scheme, one set per pass at zero-based index ``i``::

    {base}-{i}.trace.json          streamed trace document
    {base}-{i}.devtoolslog.json    pretty-printed devtools messages
    {base}-{i}.screenshots.html    filmstrip viewer
    {base}-{i}.screenshots.json    pretty-printed filmstrip frames

Every file write settles independently. A failed file never rolls back the
others; all failures are reported together once every write has finished.
A filmstrip that cannot be serialized fails only that pass's two screenshot
files.
Two concurrent calls must not target the same base path.
"""

import asyncio
import json
from collections.abc import Coroutine, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from audit_asset_core.exceptions import AssetSaveError, AssetWriteError, FileWriteFailure, TraceSerializationError
from audit_asset_core.logging import get_pipeline_logger
from audit_asset_core.settings import settings
from audit_asset_core.traces import METRIC_DEFINITIONS, MarkerDefinition, StreamingTraceWriter, write_trace

from ._models import RawArtifacts
from .filmstrip import render_screenshots_html
from .preparer import collect_passes

logger = get_pipeline_logger(__name__)

__all__ = ["AssetPaths", "asset_paths", "save_assets", "save_trace"]


@dataclass(frozen=True, slots=True)
class AssetPaths:
    """Destination files for one pass."""

    trace: Path
    devtools_log: Path
    screenshots_html: Path
    screenshots_json: Path


def asset_paths(base_path: Path | str, index: int) -> AssetPaths:
    """Build the four file paths for the pass at ``index``."""
    base = f"{base_path}-{index}"
    return AssetPaths(
        trace=Path(f"{base}.trace.json"),
        devtools_log=Path(f"{base}.devtoolslog.json"),
        screenshots_html=Path(f"{base}.screenshots.html"),
        screenshots_json=Path(f"{base}.screenshots.json"),
    )


def _write_text_sync(path: Path, text: str) -> None:
    try:
        data = text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise TraceSerializationError(f"Cannot encode {path} as UTF-8: {e}") from e
    try:
        path.write_bytes(data)
    except OSError as e:
        raise AssetWriteError(f"Failed to write {path}: {e}", path) from e


def _write_screenshots_html_sync(path: Path, filmstrip: list[dict[str, Any]]) -> None:
    _write_text_sync(path, render_screenshots_html(filmstrip))


def _write_json_sync(path: Path, value: Any) -> None:
    try:
        text = json.dumps(value, indent=settings.json_indent, ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise TraceSerializationError(f"Cannot serialize {path}: {e}") from e
    _write_text_sync(path, text)


async def save_trace(document: Mapping[str, Any], path: Path | str) -> int:
    """Stream a single trace document to ``path``. Returns bytes written.

    @public

    Raises:
        TraceSerializationError: The document holds a non-representable value.
            The partial file is removed unless ``keep_partial_traces`` is set.
        AssetWriteError: The file could not be opened or written.
    """
    written = await write_trace(document, path)
    logger.info(f"Trace file saved to disk: {path}")
    return written


async def save_assets(
    artifacts: RawArtifacts,
    audit_results: Mapping[str, Any] | None,
    base_path: Path | str,
    *,
    definitions: Sequence[MarkerDefinition] = METRIC_DEFINITIONS,
) -> list[AssetPaths]:
    """Prepare and save the trace, devtools log and screenshots of every pass.

    @public

    Returns:
        The AssetPaths of every pass, in pass order.

    Raises:
        ScreenshotFetchError: Screenshot retrieval failed; nothing was written.
        AssetSaveError: One or more files failed after all writes settled.
            ``failures`` names each file, its pass index and the cause.
    """
    passes = await collect_passes(artifacts, audit_results, definitions=definitions)
    writer = StreamingTraceWriter()

    jobs: list[tuple[int, Path, Coroutine[Any, Any, Any]]] = []
    saved: list[AssetPaths] = []
    for index, pass_artifacts in enumerate(passes):
        paths = asset_paths(base_path, index)
        saved.append(paths)
        jobs.extend([
            (index, paths.trace, write_trace(pass_artifacts.trace_data, paths.trace, writer=writer)),
            (index, paths.devtools_log, asyncio.to_thread(_write_json_sync, paths.devtools_log, pass_artifacts.devtools_log)),
            (index, paths.screenshots_html, asyncio.to_thread(_write_screenshots_html_sync, paths.screenshots_html, pass_artifacts.filmstrip)),
            (index, paths.screenshots_json, asyncio.to_thread(_write_json_sync, paths.screenshots_json, pass_artifacts.filmstrip)),
        ])

    results = await asyncio.gather(*(job for _, _, job in jobs), return_exceptions=True)

    failures: list[FileWriteFailure] = []
    for (index, path, _), result in zip(jobs, results, strict=True):
        if isinstance(result, Exception):
            logger.error(f"Failed to save {path}: {result}")
            failures.append(FileWriteFailure(pass_index=index, path=path, error=result))
        elif isinstance(result, BaseException):
            raise result
        else:
            logger.info(f"Saved {path}")

    if failures:
        raise AssetSaveError(failures)
    return saved
