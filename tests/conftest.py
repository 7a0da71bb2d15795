"""Common test fixtures for asset saving tests."""

import json
from pathlib import Path
from typing import Any

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def load_fixture(relative_path: str) -> Any:
    """Load a JSON fixture as a fresh object each call."""
    return json.loads((FIXTURES_DIR / relative_path).read_text(encoding="utf-8"))


@pytest.fixture
def trace() -> dict[str, Any]:
    """Chrome trace with a navigationStart event and metadata."""
    return load_fixture("traces/progressive-app.json")


@pytest.fixture
def trace_events(trace: dict[str, Any]) -> list[dict[str, Any]]:
    return trace["traceEvents"]


@pytest.fixture
def filmstrip() -> list[dict[str, Any]]:
    return load_fixture("traces/screenshots.json")


@pytest.fixture
def audit_results() -> dict[str, Any]:
    """Metric results keyed by audit id; every default marker has a usable value."""
    return load_fixture("perf-results.json")["audits"]
