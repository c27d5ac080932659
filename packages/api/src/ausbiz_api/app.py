"""FastAPI application factory."""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import AsyncIterator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ausbiz_shared.config import settings
from ausbiz_shared.dataset import Dataset
from ausbiz_pipeline.pipelines.reconcile import ReconciliationController
from ausbiz_pipeline.utils.logging import configure_logging

from ausbiz_api.middleware.logging import LoggingMiddleware
from ausbiz_api.routers.health import router as health_router
from ausbiz_api.routers.v1 import v1_router
from ausbiz_api.state import DashboardState

logger = structlog.get_logger()


async def _delayed_refresh(dashboard: DashboardState, delay_s: float) -> None:
    await asyncio.sleep(delay_s)
    await dashboard.controller.refresh()


def create_app(
    controller: ReconciliationController | None = None,
    *,
    refresh_on_startup: bool | None = None,
    refresh_delay_s: float | None = None,
) -> FastAPI:
    """
    Build the API around one dashboard.

    Args:
        controller:         Reconciliation controller to serve; defaults to
                            one built from settings over the demo dataset.
        refresh_on_startup: Run a first refresh shortly after startup
                            (default: settings.refresh_on_startup).
        refresh_delay_s:    Seconds to wait before that refresh
                            (default: settings.initial_refresh_delay_s).
    """
    configure_logging()

    if controller is None:
        controller = ReconciliationController.from_settings(Dataset.with_defaults())
    dashboard = DashboardState(controller)
    startup_refresh = (
        settings.refresh_on_startup if refresh_on_startup is None else refresh_on_startup
    )
    startup_delay_s = (
        settings.initial_refresh_delay_s if refresh_delay_s is None else refresh_delay_s
    )

    @contextlib.asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        task: asyncio.Task | None = None
        if startup_refresh:
            task = asyncio.create_task(
                _delayed_refresh(dashboard, startup_delay_s)
            )
        try:
            yield
        finally:
            if task is not None and not task.done():
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task

    app = FastAPI(
        title="ausbiz API",
        description="Australian business statistics for the dashboard",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.dashboard = dashboard

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)

    # Routers
    app.include_router(health_router)
    app.include_router(v1_router)

    logger.info(
        "app_created",
        cors_origins=settings.cors_origins_list,
        sources=[s.label for s in controller.sources],
        refresh_on_startup=startup_refresh,
    )
    return app


app = create_app()
