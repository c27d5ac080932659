"""Per-app dashboard state: the dataset owner plus what it has announced."""

from __future__ import annotations

from datetime import datetime, timezone

import structlog

from ausbiz_shared.constants import ReconciliationState, SourceLabel
from ausbiz_shared.dataset import Dataset
from ausbiz_pipeline.pipelines.reconcile import ReconciliationController

logger = structlog.get_logger(__name__)


class DashboardState:
    """
    Holds the controller for one app and listens to it.

    Routes read the dataset through here; only the controller writes it.
    """

    def __init__(self, controller: ReconciliationController) -> None:
        self.controller = controller
        self.series_updated_at: dict[str, datetime] = {}
        self.state_changed_at: datetime | None = None
        controller.add_listener(self)

    @property
    def dataset(self) -> Dataset:
        return self.controller.dataset

    @property
    def last_updated(self) -> datetime | None:
        return max(self.series_updated_at.values(), default=None)

    def on_dataset_replaced(self, series_name: str) -> None:
        self.series_updated_at[series_name] = datetime.now(timezone.utc)

    def on_state_changed(self, state: ReconciliationState, source_label: SourceLabel) -> None:
        self.state_changed_at = datetime.now(timezone.utc)
        logger.info("dashboard_state_changed", state=state, source_label=source_label)
