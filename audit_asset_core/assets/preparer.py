"""Assembles per-pass asset bundles from raw gathering artifacts."""

import asyncio
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from audit_asset_core.exceptions import AssetPreparationError, ScreenshotFetchError, TraceSerializationError
from audit_asset_core.logging import get_pipeline_logger
from audit_asset_core.settings import settings
from audit_asset_core.traces import (
    METRIC_DEFINITIONS,
    TRACE_EVENTS_KEY,
    DevtoolsLog,
    Filmstrip,
    MarkerDefinition,
    MarkerInjector,
    TraceDocument,
)

from ._models import AssetBundle, RawArtifacts
from .filmstrip import render_screenshots_html

logger = get_pipeline_logger(__name__)

__all__ = ["PassArtifacts", "build_bundle", "collect_passes", "log_assets", "prepare_assets"]


@dataclass(frozen=True, slots=True)
class PassArtifacts:
    """Raw material of one pass: augmented trace, devtools log and fetched filmstrip."""

    pass_name: str
    trace_data: TraceDocument
    devtools_log: DevtoolsLog
    filmstrip: Filmstrip


async def _fetch_screenshots(artifacts: RawArtifacts, pass_name: str, trace: TraceDocument) -> Filmstrip:
    try:
        frames = await artifacts.request_screenshots(trace)
    except Exception as e:
        raise ScreenshotFetchError(f"Screenshot retrieval failed for pass '{pass_name}': {e}", pass_name) from e
    return list(frames or [])


async def collect_passes(
    artifacts: RawArtifacts,
    audit_results: Mapping[str, Any] | None = None,
    *,
    definitions: Sequence[MarkerDefinition] = METRIC_DEFINITIONS,
    default_pass_name: str | None = None,
) -> list[PassArtifacts]:
    """Fetch every pass's filmstrip concurrently and inject markers into the default pass.

    Raises:
        ScreenshotFetchError: Screenshot retrieval failed for a pass.
    """
    default_pass = default_pass_name or settings.default_pass_name
    pass_names = list(artifacts.traces)
    devtools_logs = artifacts.devtools_logs or {}
    filmstrips = await asyncio.gather(
        *(_fetch_screenshots(artifacts, name, artifacts.traces[name]) for name in pass_names)
    )

    injector = MarkerInjector(definitions)
    passes: list[PassArtifacts] = []
    for name, filmstrip in zip(pass_names, filmstrips, strict=True):
        trace = artifacts.traces[name]
        if name == default_pass and audit_results is not None:
            trace_data = injector.inject(trace, audit_results)
        else:
            trace_data = dict(trace)
        passes.append(PassArtifacts(name, trace_data, list(devtools_logs.get(name) or []), filmstrip))
    return passes


def build_bundle(artifacts: PassArtifacts) -> AssetBundle:
    """Render the filmstrip viewer and freeze one pass into an AssetBundle.

    Raises:
        AssetPreparationError: The filmstrip is not serializable, or a frame or
            devtools message is not a JSON object.
    """
    name = artifacts.pass_name
    try:
        return AssetBundle(
            pass_name=name,
            trace_data=artifacts.trace_data,
            devtools_log=artifacts.devtools_log,
            screenshots_html=render_screenshots_html(artifacts.filmstrip),
            screenshots_json=artifacts.filmstrip,
        )
    except (TraceSerializationError, ValidationError) as e:
        raise AssetPreparationError(f"Cannot prepare assets for pass '{name}': {e}", name) from e


async def prepare_assets(
    artifacts: RawArtifacts,
    audit_results: Mapping[str, Any] | None = None,
    *,
    definitions: Sequence[MarkerDefinition] = METRIC_DEFINITIONS,
    default_pass_name: str | None = None,
) -> list[AssetBundle]:
    """Build one AssetBundle per pass in ``artifacts.traces``, in pass order.

    Screenshot retrieval for all passes runs concurrently; each pass's bundle
    is built only after its own filmstrip arrived. Only the default pass gets
    marker events, and only when ``audit_results`` is given. A pass without a
    devtools log gets an empty one.

    Raises:
        ScreenshotFetchError: Screenshot retrieval failed for a pass.
        AssetPreparationError: A pass's filmstrip or devtools log could not be bundled.
    """
    passes = await collect_passes(artifacts, audit_results, definitions=definitions, default_pass_name=default_pass_name)
    return [build_bundle(p) for p in passes]


async def log_assets(artifacts: RawArtifacts, audit_results: Mapping[str, Any] | None = None) -> list[AssetBundle]:
    """Prepare assets and log a short summary of each pass at debug level."""
    bundles = await prepare_assets(artifacts, audit_results)
    for index, bundle in enumerate(bundles):
        events = bundle.trace_data.get(TRACE_EVENTS_KEY) or []
        logger.debug(
            f"Pass {index} ({bundle.pass_name}): {len(events)} trace events, "
            f"{len(bundle.devtools_log)} devtools messages, {len(bundle.screenshots_json)} screenshots"
        )
    return bundles
