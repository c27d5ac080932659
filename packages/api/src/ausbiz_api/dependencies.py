"""Shared FastAPI dependencies."""

from __future__ import annotations

from fastapi import Request

from ausbiz_api.state import DashboardState


def get_dashboard(request: Request) -> DashboardState:
    return request.app.state.dashboard


__all__ = ["DashboardState", "get_dashboard"]
