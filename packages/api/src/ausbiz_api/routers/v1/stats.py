"""Headline statistics for the stat cards."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ausbiz_api.dependencies import DashboardState, get_dashboard
from ausbiz_api.responses import wrap_response
from ausbiz_api.services import dashboard_service

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("")
async def get_stats(dashboard: DashboardState = Depends(get_dashboard)):
    return wrap_response(
        dashboard_service.get_stats(dashboard),
        source=dashboard.controller.source_label,
        last_updated=dashboard.last_updated,
    )
