"""Per-pass asset bundle and the raw-artifacts collaborator interface."""

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from audit_asset_core.traces import DevtoolsLog, Filmstrip, TraceDocument

__all__ = ["AssetBundle", "GatheredArtifacts", "RawArtifacts", "ScreenshotRequest"]

type ScreenshotRequest = Callable[[TraceDocument], Awaitable[Filmstrip]]


@runtime_checkable
class RawArtifacts(Protocol):
    """Artifacts produced by one gathering run, keyed by pass name."""

    @property
    def traces(self) -> Mapping[str, TraceDocument]: ...

    @property
    def devtools_logs(self) -> Mapping[str, DevtoolsLog]: ...

    async def request_screenshots(self, trace: TraceDocument) -> Filmstrip: ...


@dataclass(frozen=True, slots=True)
class GatheredArtifacts:
    """Plain-data RawArtifacts with an optional async screenshot source.

    Without a screenshot source every pass gets an empty filmstrip.
    """

    traces: Mapping[str, TraceDocument]
    devtools_logs: Mapping[str, DevtoolsLog] = field(default_factory=dict)
    screenshots: ScreenshotRequest | None = None

    async def request_screenshots(self, trace: TraceDocument) -> Filmstrip:
        if self.screenshots is None:
            return []
        return list(await self.screenshots(trace))


class AssetBundle(BaseModel):
    """Everything persisted for one gathering pass.

    Immutable once prepared. Field aliases match the camelCase names used by
    downstream report tooling (``traceData``, ``devtoolsLog``, ...).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    pass_name: str = Field(alias="passName")
    trace_data: dict[str, Any] = Field(alias="traceData")
    devtools_log: list[dict[str, Any]] = Field(default_factory=list, alias="devtoolsLog")
    screenshots_html: str = Field(alias="screenshotsHTML")
    screenshots_json: list[dict[str, Any]] = Field(default_factory=list, alias="screenshotsJSON")
