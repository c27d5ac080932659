"""Dataset endpoints: snapshots of the series the charts draw."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response

from ausbiz_api.dependencies import DashboardState, get_dashboard
from ausbiz_api.responses import error_response, wrap_response
from ausbiz_api.services import dashboard_service

router = APIRouter(prefix="/dataset", tags=["dataset"])


@router.get("")
async def get_dataset(dashboard: DashboardState = Depends(get_dashboard)):
    """Every series in the dataset."""
    snapshot = dashboard.dataset.snapshot()
    return wrap_response(
        snapshot,
        total_count=len(snapshot),
        source=dashboard.controller.source_label,
        last_updated=dashboard.last_updated,
    )


@router.get("/states")
async def get_states():
    """State registry for the map: code, name, color."""
    data = dashboard_service.get_state_registry()
    return wrap_response(data, total_count=len(data))


@router.get("/{series_name}")
async def get_series(
    series_name: str,
    dashboard: DashboardState = Depends(get_dashboard),
    format: str = Query("json", pattern="^(json|csv)$", description="json or csv"),
):
    """One series by name."""
    data = dashboard_service.get_series(dashboard, series_name)
    if data is None:
        raise HTTPException(
            status_code=404,
            detail=error_response(
                "UNKNOWN_SERIES",
                f"Series '{series_name}' not found",
                details={"available": dashboard.dataset.names()},
            ),
        )

    if format == "csv":
        content = dashboard_service.series_csv(dashboard.dataset.get(series_name))
        return Response(
            content=content,
            media_type="text/csv",
            headers={"Content-Disposition": f"attachment; filename={series_name}.csv"},
        )

    return wrap_response(
        data,
        source=dashboard.controller.source_label,
        last_updated=dashboard.series_updated_at.get(series_name),
    )
