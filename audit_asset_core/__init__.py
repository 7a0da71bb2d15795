"""Audit Asset Core - durable, exactly reproducible performance-audit artifacts.

@public

Turns in-memory audit artifacts (execution traces, devtools protocol logs and
screenshot filmstrips) into files on disk. Traces are streamed event by event,
so documents larger than any practical in-memory string can be saved, with key
order and float precision preserved.

Core Capabilities:
    - **Streaming trace writer**: bounded-memory JSON for arbitrarily large traces
    - **Metric markers**: synthetic user-timing events for computed metrics
    - **Asset bundles**: per-pass trace, devtools log and filmstrip viewer
    - **Asset saving**: deterministic per-pass file names, aggregated failures

Quick Start:
    >>> from audit_asset_core import GatheredArtifacts, save_assets
    >>>
    >>> artifacts = GatheredArtifacts(
    ...     traces={"defaultPass": trace},
    ...     devtools_logs={"defaultPass": messages},
    ...     screenshots=fetch_filmstrip,
    ... )
    >>> await save_assets(artifacts, audit_results, "/tmp/run")

Optional Environment Variables:
    - AUDIT_ASSETS_DEFAULT_PASS_NAME: Pass that receives marker events
    - AUDIT_ASSETS_LOG_LEVEL: Log level for the package loggers
"""

from .assets import (
    AssetBundle,
    AssetPaths,
    GatheredArtifacts,
    RawArtifacts,
    asset_paths,
    log_assets,
    prepare_assets,
    render_screenshots_html,
    save_assets,
    save_trace,
)
from .exceptions import (
    AssetCoreError,
    AssetPreparationError,
    AssetSaveError,
    AssetWriteError,
    FileWriteFailure,
    ScreenshotFetchError,
    TraceSerializationError,
)
from .logging import LoggingConfig, get_pipeline_logger, setup_logging
from .settings import Settings, settings
from .traces import (
    METRIC_DEFINITIONS,
    MarkerDefinition,
    MarkerInjector,
    StreamingTraceWriter,
    inject_markers,
    iter_trace_json,
    write_trace,
)

__version__ = "0.3.0"

__all__ = [
    # Assets
    "AssetBundle",
    "AssetPaths",
    "GatheredArtifacts",
    "RawArtifacts",
    "asset_paths",
    "log_assets",
    "prepare_assets",
    "render_screenshots_html",
    "save_assets",
    "save_trace",
    # Traces
    "METRIC_DEFINITIONS",
    "MarkerDefinition",
    "MarkerInjector",
    "StreamingTraceWriter",
    "inject_markers",
    "iter_trace_json",
    "write_trace",
    # Exceptions
    "AssetCoreError",
    "AssetPreparationError",
    "AssetSaveError",
    "AssetWriteError",
    "FileWriteFailure",
    "ScreenshotFetchError",
    "TraceSerializationError",
    # Config & logging
    "LoggingConfig",
    "Settings",
    "get_pipeline_logger",
    "settings",
    "setup_logging",
]
