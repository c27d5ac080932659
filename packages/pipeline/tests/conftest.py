"""
tests/conftest.py — Shared pytest fixtures for the pipeline test suite.

Provides:
  dataset()             — a fresh default Dataset
  worldbank_payloads()  — indicator code → World Bank JSON payload
  market_payload()      — chart JSON payload for ^AXJO
  mock_http()           — configured respx router for faking HTTP responses
  world_bank()          — installs a World Bank route with per-indicator overrides
  listener()            — a fresh RecordingListener
  RecordingListener     — collects controller notifications in order
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

import httpx
import pytest
import respx

from ausbiz_shared.dataset import Dataset

FIXTURES_DIR = Path(__file__).parent / "fixtures"

WB_URL = re.compile(r".*/country/AUS/indicator/(?P<code>[A-Z0-9.]+).*")


# ---------------------------------------------------------------------------
# Payloads
# ---------------------------------------------------------------------------

@pytest.fixture
def dataset() -> Dataset:
    return Dataset.with_defaults()


@pytest.fixture
def worldbank_payloads() -> dict[str, Any]:
    return json.loads((FIXTURES_DIR / "worldbank_indicators.json").read_text())


@pytest.fixture
def market_payload() -> dict[str, Any]:
    return json.loads((FIXTURES_DIR / "market_chart_axjo.json").read_text())


# ---------------------------------------------------------------------------
# respx HTTP mock router
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_http():
    """
    Activate the respx mock router for all httpx requests.

    Usage in tests:
        def test_something(mock_http):
            mock_http.get("https://...").mock(return_value=httpx.Response(200, json={...}))
    """
    with respx.mock(assert_all_called=False) as router:
        yield router


@pytest.fixture
def world_bank(mock_http: respx.MockRouter, worldbank_payloads: dict[str, Any]):
    """
    Install a route serving every World Bank indicator from the fixture.

    Call the fixture with overrides mapping an indicator code to a response
    (or exception) that replaces the fixture for that code only:

        route = world_bank({"SP.POP.TOTL": httpx.Response(500)})
    """

    def install(
        overrides: dict[str, httpx.Response | Exception] | None = None,
    ) -> respx.Route:
        overrides = overrides or {}

        def _respond(request: httpx.Request) -> httpx.Response:
            code = WB_URL.match(str(request.url)).group("code")
            override = overrides.get(code)
            if isinstance(override, Exception):
                raise override
            if override is not None:
                return override
            return httpx.Response(200, json=worldbank_payloads[code])

        return mock_http.get(url__regex=WB_URL.pattern).mock(side_effect=_respond)

    return install


# ---------------------------------------------------------------------------
# Notification recorder
# ---------------------------------------------------------------------------

class RecordingListener:
    """Keeps every controller notification as a tuple, in arrival order."""

    def __init__(self) -> None:
        self.events: list[tuple[str, ...]] = []

    def on_dataset_replaced(self, series_name: str) -> None:
        self.events.append(("replaced", series_name))

    def on_state_changed(self, state: str, source_label: str) -> None:
        self.events.append(("state", state, source_label))

    @property
    def transitions(self) -> list[tuple[str, ...]]:
        return [e for e in self.events if e[0] == "state"]


@pytest.fixture
def listener() -> RecordingListener:
    return RecordingListener()
