"""Health check endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ausbiz_api.dependencies import DashboardState, get_dashboard

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict:
    return {"status": "ok", "version": "0.1.0"}


@router.get("/ready")
async def ready(dashboard: DashboardState = Depends(get_dashboard)) -> dict:
    # The dataset always holds at least the demo values, so the API is
    # ready before the first refresh has finished.
    return {"status": "ready", "reconciliation": dashboard.controller.state}
