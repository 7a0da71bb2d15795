"""Tests for per-pass asset preparation."""

import asyncio
import math
import re
from typing import Any

import pytest
from pydantic import ValidationError

from audit_asset_core.assets import (
    AssetBundle,
    GatheredArtifacts,
    PassArtifacts,
    RawArtifacts,
    build_bundle,
    collect_passes,
    log_assets,
    prepare_assets,
)
from audit_asset_core.exceptions import AssetPreparationError, ScreenshotFetchError, TraceSerializationError
from audit_asset_core.traces import METRIC_DEFINITIONS


def _screenshots(frames: list[dict[str, Any]]):
    async def request(trace: dict[str, Any]) -> list[dict[str, Any]]:
        return frames

    return request


class TestGatheredArtifacts:
    def test_satisfies_raw_artifacts_protocol(self):
        assert isinstance(GatheredArtifacts(traces={}), RawArtifacts)

    @pytest.mark.asyncio
    async def test_no_screenshot_source_gives_empty_filmstrip(self):
        artifacts = GatheredArtifacts(traces={"defaultPass": {"traceEvents": []}})
        assert await artifacts.request_screenshots({"traceEvents": []}) == []


class TestPrepareAssets:
    @pytest.mark.asyncio
    async def test_generates_html(self):
        artifacts = GatheredArtifacts(
            traces={"defaultPass": {"traceEvents": []}},
            devtools_logs={},
            screenshots=_screenshots([]),
        )
        assets = await prepare_assets(artifacts)
        assert len(assets) == 1
        assert re.match(r"<!doctype html", assets[0].screenshots_html, re.IGNORECASE)
        assert assets[0].trace_data["traceEvents"] == []
        assert assets[0].devtools_log == []
        assert assets[0].screenshots_json == []

    @pytest.mark.asyncio
    async def test_adds_fake_events_to_trace(self, trace: dict[str, Any], audit_results: dict[str, Any]):
        before = len(trace["traceEvents"])
        artifacts = GatheredArtifacts(traces={"defaultPass": trace}, screenshots=_screenshots([]))

        prepared = await prepare_assets(artifacts, audit_results)

        metrics_sans_nav_start = len(METRIC_DEFINITIONS) - 1
        assert len(prepared[0].trace_data["traceEvents"]) == before + 2 * metrics_sans_nav_start
        assert len(trace["traceEvents"]) == before

    @pytest.mark.asyncio
    async def test_no_audit_results_means_no_injection(self, trace: dict[str, Any]):
        artifacts = GatheredArtifacts(traces={"defaultPass": trace})
        prepared = await prepare_assets(artifacts)
        assert prepared[0].trace_data == trace

    @pytest.mark.asyncio
    async def test_only_default_pass_injected(self, trace: dict[str, Any], audit_results: dict[str, Any]):
        artifacts = GatheredArtifacts(traces={"defaultPass": trace, "redirectPass": trace})
        prepared = await prepare_assets(artifacts, audit_results)

        assert [b.pass_name for b in prepared] == ["defaultPass", "redirectPass"]
        assert len(prepared[0].trace_data["traceEvents"]) > len(trace["traceEvents"])
        assert prepared[1].trace_data == trace

    @pytest.mark.asyncio
    async def test_custom_default_pass_name(self, trace: dict[str, Any], audit_results: dict[str, Any]):
        artifacts = GatheredArtifacts(traces={"defaultPass": trace, "warmPass": trace})
        prepared = await prepare_assets(artifacts, audit_results, default_pass_name="warmPass")
        assert prepared[0].trace_data == trace
        assert len(prepared[1].trace_data["traceEvents"]) > len(trace["traceEvents"])

    @pytest.mark.asyncio
    async def test_devtools_logs_matched_by_pass(self):
        artifacts = GatheredArtifacts(
            traces={"defaultPass": {"traceEvents": []}, "secondPass": {"traceEvents": []}},
            devtools_logs={"secondPass": [{"method": "Network.requestWillBeSent"}]},
        )
        prepared = await prepare_assets(artifacts)
        assert prepared[0].devtools_log == []
        assert prepared[1].devtools_log == [{"method": "Network.requestWillBeSent"}]

    @pytest.mark.asyncio
    async def test_filmstrip_embedded(self, filmstrip: list[dict[str, Any]]):
        artifacts = GatheredArtifacts(traces={"defaultPass": {"traceEvents": []}}, screenshots=_screenshots(filmstrip))
        prepared = await prepare_assets(artifacts)
        assert prepared[0].screenshots_json == filmstrip
        assert '{"timestamp":674089419.919' in prepared[0].screenshots_html

    @pytest.mark.asyncio
    async def test_screenshots_requested_concurrently(self):
        started: list[str] = []
        both_started = asyncio.Event()

        async def request(trace: dict[str, Any]) -> list[dict[str, Any]]:
            started.append(trace["label"])
            if len(started) == 2:
                both_started.set()
            await asyncio.wait_for(both_started.wait(), timeout=5)
            return [{"timestamp": 1.5, "datauri": trace["label"]}]

        artifacts = GatheredArtifacts(
            traces={"defaultPass": {"traceEvents": [], "label": "a"}, "other": {"traceEvents": [], "label": "b"}},
            screenshots=request,
        )
        prepared = await prepare_assets(artifacts)

        assert sorted(started) == ["a", "b"]
        assert [b.screenshots_json[0]["datauri"] for b in prepared] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_screenshot_failure_names_pass(self):
        async def request(trace: dict[str, Any]) -> list[dict[str, Any]]:
            raise ConnectionError("target closed")

        artifacts = GatheredArtifacts(traces={"defaultPass": {"traceEvents": []}}, screenshots=request)
        with pytest.raises(ScreenshotFetchError, match="target closed") as exc_info:
            await prepare_assets(artifacts)
        assert exc_info.value.pass_name == "defaultPass"
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    @pytest.mark.asyncio
    async def test_bundle_is_immutable(self):
        prepared = await prepare_assets(GatheredArtifacts(traces={"defaultPass": {"traceEvents": []}}))
        with pytest.raises(ValidationError):
            prepared[0].screenshots_html = "<p>changed</p>"  # type: ignore[misc]

    @pytest.mark.asyncio
    async def test_bundle_dumps_with_camel_case_aliases(self):
        prepared = await prepare_assets(GatheredArtifacts(traces={"defaultPass": {"traceEvents": []}}))
        dumped = prepared[0].model_dump(by_alias=True)
        assert set(dumped) == {"passName", "traceData", "devtoolsLog", "screenshotsHTML", "screenshotsJSON"}

    @pytest.mark.asyncio
    async def test_log_assets_returns_bundles(self, trace: dict[str, Any]):
        bundles = await log_assets(GatheredArtifacts(traces={"defaultPass": trace}))
        assert len(bundles) == 1
        assert isinstance(bundles[0], AssetBundle)

    @pytest.mark.asyncio
    async def test_unserializable_filmstrip_names_pass(self):
        frames = {"defaultPass": [{"timestamp": 1.0}], "secondPass": [{"timestamp": math.nan}]}

        async def request(trace: dict[str, Any]) -> list[dict[str, Any]]:
            return frames[trace["pass"]]

        artifacts = GatheredArtifacts(
            traces={"defaultPass": {"pass": "defaultPass"}, "secondPass": {"pass": "secondPass"}},
            screenshots=request,
        )
        with pytest.raises(AssetPreparationError, match="secondPass") as exc_info:
            await prepare_assets(artifacts)
        assert exc_info.value.pass_name == "secondPass"
        assert isinstance(exc_info.value.__cause__, TraceSerializationError)

    @pytest.mark.asyncio
    async def test_non_object_frame_names_pass(self):
        artifacts = GatheredArtifacts(traces={"defaultPass": {"traceEvents": []}}, screenshots=_screenshots([["timestamp", 1.0]]))  # type: ignore[list-item]
        with pytest.raises(AssetPreparationError, match="defaultPass") as exc_info:
            await prepare_assets(artifacts)
        assert exc_info.value.pass_name == "defaultPass"
        assert isinstance(exc_info.value.__cause__, ValidationError)

    @pytest.mark.asyncio
    async def test_non_object_devtools_message_names_pass(self):
        artifacts = GatheredArtifacts(traces={"defaultPass": {"traceEvents": []}}, devtools_logs={"defaultPass": ["Page.loadEventFired"]})  # type: ignore[list-item]
        with pytest.raises(AssetPreparationError) as exc_info:
            await prepare_assets(artifacts)
        assert exc_info.value.pass_name == "defaultPass"
        assert isinstance(exc_info.value.__cause__, ValidationError)


class TestCollectPasses:
    @pytest.mark.asyncio
    async def test_collects_raw_material_without_rendering(self, trace: dict[str, Any], audit_results: dict[str, Any]):
        bad_frames = [{"timestamp": math.inf}]
        artifacts = GatheredArtifacts(
            traces={"defaultPass": trace, "secondPass": {"traceEvents": []}},
            devtools_logs={"secondPass": [{"method": "Page.loadEventFired"}]},
            screenshots=_screenshots(bad_frames),
        )
        passes = await collect_passes(artifacts, audit_results)

        assert [p.pass_name for p in passes] == ["defaultPass", "secondPass"]
        assert len(passes[0].trace_data["traceEvents"]) > len(trace["traceEvents"])
        assert passes[1].trace_data == {"traceEvents": []}
        assert passes[0].devtools_log == []
        assert passes[1].devtools_log == [{"method": "Page.loadEventFired"}]
        assert passes[0].filmstrip == bad_frames

    def test_build_bundle(self, filmstrip: list[dict[str, Any]]):
        bundle = build_bundle(PassArtifacts("secondPass", {"traceEvents": []}, [], filmstrip))
        assert bundle.pass_name == "secondPass"
        assert bundle.screenshots_json == filmstrip
        assert '"timestamp":674089419.919' in bundle.screenshots_html
