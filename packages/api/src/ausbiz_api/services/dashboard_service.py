"""Dashboard read service: dataset views, stats, and status for the routes."""

from __future__ import annotations

import io
from typing import Any

import polars as pl

from ausbiz_shared import constants as c
from ausbiz_shared.dataset import AnySeries
from ausbiz_shared.stats import derived_stats
from ausbiz_pipeline.pipelines.reconcile import badge_for

from ausbiz_api.state import DashboardState


def get_series(dashboard: DashboardState, name: str) -> dict[str, Any] | None:
    """One series as a dict, or None if the name is unknown."""
    if name not in dashboard.dataset:
        return None
    return dashboard.dataset.get(name).to_dict()


def series_csv(series: AnySeries) -> bytes:
    """label,value[,color] rows; absent values are written as empty cells."""
    columns: dict[str, list[Any]] = {
        "label": list(series.labels),
        "value": [None if v is None else float(v) for v in series.values],
    }
    colors = getattr(series, "colors", None)
    if colors is not None:
        columns["color"] = list(colors)

    df = pl.DataFrame(columns, schema_overrides={"value": pl.Float64})
    buf = io.BytesIO()
    df.write_csv(buf)
    return buf.getvalue()


def get_stats(dashboard: DashboardState) -> dict[str, Any]:
    return derived_stats(dashboard.dataset)


def get_state_registry() -> list[dict[str, str]]:
    """State codes, names and map colors for the map renderer."""
    return [
        {"code": code, "name": name, "color": c.STATE_MAP_COLORS[code]}
        for code, name in c.STATES.items()
    ]


async def get_status(dashboard: DashboardState) -> dict[str, Any]:
    controller = dashboard.controller
    outcome = controller.last_outcome
    return {
        "state": controller.state,
        "source_label": controller.source_label,
        "badge": badge_for(controller.source_label),
        "loading": controller.is_loading,
        "notice": outcome.notice if outcome else None,
        "last_refresh": outcome.to_dict() if outcome else None,
        "sources": [await s.get_metadata() for s in controller.sources],
    }
