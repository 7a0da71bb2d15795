#!/usr/bin/env python3
"""Asset saver showcase — runs standalone without a browser.

Demonstrates:
  - GatheredArtifacts wrapping a trace, a devtools log and a screenshot source
  - prepare_assets with metric marker injection on the default pass
  - save_assets writing the four per-pass files
  - save_trace streaming a large trace in bounded memory

Usage:
  python examples/showcase_asset_saver.py
"""

import asyncio
from pathlib import Path
from tempfile import TemporaryDirectory
from typing import Any

from audit_asset_core import GatheredArtifacts, prepare_assets, save_assets, save_trace, setup_logging

# ---------------------------------------------------------------------------
# Fake gathering output
# ---------------------------------------------------------------------------

NAV_START = 674089223468

TRACE: dict[str, Any] = {
    "traceEvents": [
        {"pid": 1, "tid": 7, "ts": NAV_START, "ph": "R", "cat": "blink.user_timing", "name": "navigationStart", "args": {}},
        {"pid": 1, "tid": 7, "ts": NAV_START + 87263, "ph": "R", "cat": "loading", "name": "firstContentfulPaint", "args": {}},
        {"pid": 1, "tid": 7, "ts": NAV_START + 177843, "ph": "R", "cat": "blink.user_timing", "name": "loadEventEnd", "args": {}},
    ],
    "metadata": {"clock-domain": "LINUX_CLOCK_MONOTONIC", "cpu-family": 6},
}

AUDITS: dict[str, Any] = {
    "first-contentful-paint": {"numericValue": 87.263},
    "on-load": 177.843,
    "speed-index-metric": {"rawValue": "n/a"},
}


async def fetch_filmstrip(trace: dict[str, Any]) -> list[dict[str, Any]]:
    await asyncio.sleep(0)
    return [{"timestamp": 674089419.919, "datauri": "data:image/jpg;base64,/9j/4AAQSkZJRg=="}]


async def main() -> None:
    setup_logging(level="INFO")
    artifacts = GatheredArtifacts(
        traces={"defaultPass": TRACE},
        devtools_logs={"defaultPass": [{"method": "Page.frameNavigated", "params": {"frame": {"id": "1"}}}]},
        screenshots=fetch_filmstrip,
    )

    bundles = await prepare_assets(artifacts, AUDITS)
    added = len(bundles[0].trace_data["traceEvents"]) - len(TRACE["traceEvents"])
    print(f"Marker events added to default pass: {added}")

    with TemporaryDirectory() as tmp:
        saved = await save_assets(artifacts, AUDITS, Path(tmp) / "run")
        for paths in saved:
            print(f"Saved {paths.trace.name}, {paths.devtools_log.name}, {paths.screenshots_html.name}, {paths.screenshots_json.name}")

        big = {"traceEvents": TRACE["traceEvents"] * 200_000, "metadata": TRACE["metadata"]}
        written = await save_trace(big, Path(tmp) / "big.trace.json")
        print(f"Streamed {written / 2**20:.1f} MiB trace")


if __name__ == "__main__":
    asyncio.run(main())
