"""Shared test fixtures for the ausbiz API."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest
from fastapi.testclient import TestClient

from ausbiz_shared import constants as c
from ausbiz_shared.dataset import Dataset
from ausbiz_shared.errors import TransportError
from ausbiz_pipeline.pipelines.reconcile import ReconciliationController
from ausbiz_pipeline.sources.base import BaseSource, PartialUpdate


class StaticSource(BaseSource):
    """Source that returns a fixed update, or fails, without touching the network."""

    name = "Static"

    def __init__(
        self,
        label: str,
        values: list[int] | None = None,
        *,
        gate: asyncio.Event | None = None,
    ) -> None:
        self.label = label
        super().__init__()
        self.values = values
        self.gate = gate
        self.calls = 0

    async def extract(self, dataset: Dataset) -> list[int]:
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.values is None:
            raise TransportError("HTTP 503", source=self.label, status_code=503)
        return self.values

    def transform(self, raw: list[int], dataset: Dataset) -> PartialUpdate:
        revenue = dataset.get(c.QUARTERLY_REVENUE)
        return {c.QUARTERLY_REVENUE: revenue.with_values(raw)}

    async def get_metadata(self) -> dict[str, Any]:
        return {"source_name": self.name, "source_label": self.label, "description": "static"}


@pytest.fixture()
def static_source():
    """The StaticSource class, for tests that build their own chain."""
    return StaticSource


@pytest.fixture()
def controller():
    """Primary down, secondary serving fixed quarterly revenue."""
    return ReconciliationController(
        Dataset.with_defaults(),
        [
            StaticSource("PrimaryAPI"),
            StaticSource("SecondaryAPI", [1500, 1550, 1600, 1650, 1800]),
        ],
    )


@pytest.fixture()
def app(controller):
    """Test FastAPI app with no startup refresh."""
    from ausbiz_api.app import create_app
    return create_app(controller, refresh_on_startup=False)


@pytest.fixture()
def client(app):
    """HTTP test client."""
    return TestClient(app)


@pytest.fixture()
def offline_client():
    """Client whose source chain always fails."""
    from ausbiz_api.app import create_app
    controller = ReconciliationController(
        Dataset.with_defaults(), [StaticSource("PrimaryAPI")], use_fallback=True
    )
    return TestClient(create_app(controller, refresh_on_startup=False))
