"""Per-pass asset preparation and persistence.

@public
"""

from ._models import AssetBundle, GatheredArtifacts, RawArtifacts, ScreenshotRequest
from .filmstrip import render_screenshots_html
from .persister import AssetPaths, asset_paths, save_assets, save_trace
from .preparer import PassArtifacts, build_bundle, collect_passes, log_assets, prepare_assets

__all__ = [
    "AssetBundle",
    "AssetPaths",
    "GatheredArtifacts",
    "PassArtifacts",
    "RawArtifacts",
    "ScreenshotRequest",
    "asset_paths",
    "build_bundle",
    "collect_passes",
    "log_assets",
    "prepare_assets",
    "render_screenshots_html",
    "save_assets",
    "save_trace",
]
