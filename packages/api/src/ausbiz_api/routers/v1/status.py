"""Reconciliation status and the refresh trigger."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ausbiz_pipeline.pipelines.reconcile import badge_for

from ausbiz_api.dependencies import DashboardState, get_dashboard
from ausbiz_api.responses import wrap_response
from ausbiz_api.services import dashboard_service

router = APIRouter(tags=["status"])


@router.get("/status")
async def get_status(dashboard: DashboardState = Depends(get_dashboard)):
    """Current state, source badge, notice, and the configured source chain."""
    data = await dashboard_service.get_status(dashboard)
    return wrap_response(data, source=data["source_label"])


@router.post("/refresh")
async def refresh(dashboard: DashboardState = Depends(get_dashboard)):
    """
    Run one reconciliation now.

    If one is already running this request is ignored (202); it is not
    queued.
    """
    outcome = await dashboard.controller.refresh()
    if outcome is None:
        return JSONResponse(
            status_code=202,
            content=wrap_response({"ignored": True, "state": dashboard.controller.state}),
        )

    data = outcome.to_dict()
    data["badge"] = badge_for(outcome.source_label)
    data["ignored"] = False
    return wrap_response(data, source=outcome.source_label)
