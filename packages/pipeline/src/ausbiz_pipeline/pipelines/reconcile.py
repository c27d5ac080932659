"""
pipelines/reconcile.py — the reconciliation controller.

Runs the source chain in priority order on each refresh and applies the
first successful update to the dataset:

  idle → loading → succeeded(PrimaryAPI | SecondaryAPI | Simulated)
                 → exhausted (label Demo; dataset left at last-known-good)

  1. Enter loading; a refresh requested while loading is ignored
  2. Ask each source for an update in turn; failures are logged and skipped
  3. Apply the first success series by series; a series that breaks a
     dataset invariant is rejected on its own, the rest still apply
  4. Enter succeeded, or exhausted when no source delivered

Listeners are told synchronously about every committed series and every
state transition.

Usage:
    from ausbiz_pipeline.pipelines.reconcile import ReconciliationController

    controller = ReconciliationController.from_settings(Dataset.with_defaults())
    outcome = await controller.refresh()
    print(outcome.state, outcome.source_label, outcome.notice)
"""

from __future__ import annotations

import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Protocol

from ausbiz_shared.config import Settings, settings
from ausbiz_shared.constants import (
    BADGES,
    DEMO_NOTICE,
    UNAVAILABLE_NOTICE,
    ReconciliationState,
    SourceLabel,
)
from ausbiz_shared.dataset import Dataset
from ausbiz_shared.errors import ExhaustedError, ValidationError
from ausbiz_pipeline.sources.base import (
    BaseSource,
    FetchFailure,
    FetchResult,
    FetchSuccess,
)
from ausbiz_pipeline.sources.market import MarketIndexSource
from ausbiz_pipeline.sources.simulated import SimulatedSource
from ausbiz_pipeline.sources.worldbank import WorldBankSource
from ausbiz_pipeline.utils.logging import get_logger

log = get_logger(__name__, pipeline="reconcile")


class DatasetListener(Protocol):
    """What a renderer implements to follow the dataset."""

    def on_dataset_replaced(self, series_name: str) -> None: ...

    def on_state_changed(self, state: ReconciliationState, source_label: SourceLabel) -> None: ...


@dataclass(frozen=True)
class AttemptRecord:
    source_label: SourceLabel
    ok: bool
    reason: str | None = None
    duration_ms: int = 0


@dataclass
class ReconciliationOutcome:
    """Summary of one refresh."""

    state: ReconciliationState
    source_label: SourceLabel
    notice: str | None = None
    replaced: list[str] = field(default_factory=list)
    rejected: dict[str, str] = field(default_factory=dict)
    attempts: list[AttemptRecord] = field(default_factory=list)
    error: ExhaustedError | None = None
    started_at: datetime | None = None
    finished_at: datetime | None = None

    @property
    def succeeded(self) -> bool:
        return self.state == "succeeded"

    def to_dict(self) -> dict[str, Any]:
        return {
            "state": self.state,
            "source_label": self.source_label,
            "notice": self.notice,
            "replaced": self.replaced,
            "rejected": self.rejected,
            "attempts": [
                {
                    "source_label": a.source_label,
                    "ok": a.ok,
                    "reason": a.reason,
                    "duration_ms": a.duration_ms,
                }
                for a in self.attempts
            ],
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
        }


def badge_for(source_label: SourceLabel) -> dict[str, str]:
    """Badge text and color for a source label."""
    text, color = BADGES[source_label]
    return {"label": source_label, "text": f"Source API: {text}", "color": color}


def build_default_chain(cfg: Settings = settings) -> list[BaseSource]:
    """Sources in priority order, filtered by the config toggles."""
    chain: list[BaseSource] = []
    if cfg.use_real_api:
        chain.append(WorldBankSource())
    if cfg.use_market_api:
        chain.append(MarketIndexSource())
    if cfg.simulate_api:
        chain.append(SimulatedSource(variation=cfg.simulation_variation, seed=cfg.simulation_seed))
    return chain


class ReconciliationController:
    """Sole writer of the dataset; runs at most one refresh at a time."""

    def __init__(
        self,
        dataset: Dataset,
        sources: Sequence[BaseSource],
        *,
        listeners: Iterable[DatasetListener] = (),
        use_fallback: bool = True,
    ) -> None:
        self._dataset = dataset
        self._sources = list(sources)
        self._listeners: list[DatasetListener] = list(listeners)
        self._use_fallback = use_fallback

        self._state: ReconciliationState = "idle"
        self._source_label: SourceLabel = "Demo"
        self._in_flight = False
        self.last_outcome: ReconciliationOutcome | None = None

    @classmethod
    def from_settings(
        cls,
        dataset: Dataset,
        *,
        listeners: Iterable[DatasetListener] = (),
        cfg: Settings = settings,
    ) -> "ReconciliationController":
        return cls(
            dataset,
            build_default_chain(cfg),
            listeners=listeners,
            use_fallback=cfg.use_fallback,
        )

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def dataset(self) -> Dataset:
        return self._dataset

    @property
    def sources(self) -> list[BaseSource]:
        return list(self._sources)

    @property
    def state(self) -> ReconciliationState:
        return self._state

    @property
    def source_label(self) -> SourceLabel:
        return self._source_label

    @property
    def is_loading(self) -> bool:
        return self._in_flight

    def add_listener(self, listener: DatasetListener) -> None:
        self._listeners.append(listener)

    # ------------------------------------------------------------------
    # Refresh
    # ------------------------------------------------------------------

    async def refresh(self) -> ReconciliationOutcome | None:
        """
        Run one reconciliation cycle.

        Returns:
            The outcome, or None when a refresh was already in flight and
            this request was ignored. Never raises for upstream failures.
        """
        if self._in_flight:
            log.info("refresh_ignored_in_flight", state=self._state)
            return None

        self._in_flight = True
        try:
            outcome = await self._reconcile()
        finally:
            self._in_flight = False
        self.last_outcome = outcome
        return outcome

    async def _reconcile(self) -> ReconciliationOutcome:
        outcome = ReconciliationOutcome(
            state="loading",
            source_label="Loading",
            started_at=datetime.now(timezone.utc),
        )
        self._transition("loading", "Loading")
        log.info("reconciliation_start", sources=[s.label for s in self._sources])

        for source in self._sources:
            t0 = time.monotonic()
            result = await self._attempt(source)
            duration_ms = int((time.monotonic() - t0) * 1000)

            if isinstance(result, FetchSuccess):
                outcome.attempts.append(AttemptRecord(result.source_label, True, None, duration_ms))
                self._apply(result, outcome)
                outcome.state = "succeeded"
                outcome.source_label = result.source_label
                outcome.finished_at = datetime.now(timezone.utc)
                log.info(
                    "reconciliation_succeeded",
                    source_label=result.source_label,
                    replaced=outcome.replaced,
                    rejected=list(outcome.rejected),
                )
                self._transition("succeeded", result.source_label)
                return outcome

            outcome.attempts.append(
                AttemptRecord(result.source_label, False, result.reason, duration_ms)
            )

        outcome.error = ExhaustedError([a.source_label for a in outcome.attempts])
        outcome.state = "exhausted"
        outcome.source_label = "Demo"
        outcome.notice = DEMO_NOTICE if self._use_fallback else UNAVAILABLE_NOTICE
        outcome.finished_at = datetime.now(timezone.utc)
        log.warning(
            "reconciliation_exhausted",
            attempted=outcome.error.attempted,
            notice=outcome.notice,
        )
        self._transition("exhausted", "Demo")
        return outcome

    async def _attempt(self, source: BaseSource) -> FetchResult:
        try:
            result = await source.fetch(self._dataset)
        except Exception as exc:
            # fetch() converts upstream errors; anything reaching here is an adapter bug
            log.error(
                "adapter_crashed",
                source_label=source.label,
                error=str(exc),
                exc_info=True,
            )
            return FetchFailure(source.label, reason=f"{type(exc).__name__}: {exc}", error=exc)

        if isinstance(result, FetchFailure):
            log.warning("adapter_failed", source_label=result.source_label, reason=result.reason)
        return result

    def _apply(self, result: FetchSuccess, outcome: ReconciliationOutcome) -> None:
        for name, series in result.update.items():
            try:
                self._dataset.replace(name, series)
            except ValidationError as exc:
                outcome.rejected[name] = exc.detail
                log.warning(
                    "series_rejected",
                    series=name,
                    source_label=result.source_label,
                    detail=exc.detail,
                )
                continue
            outcome.replaced.append(name)
            self._emit("on_dataset_replaced", name)

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def _transition(self, state: ReconciliationState, source_label: SourceLabel) -> None:
        self._state = state
        self._source_label = source_label
        self._emit("on_state_changed", state, source_label)

    def _emit(self, method: str, *args: Any) -> None:
        for listener in self._listeners:
            try:
                getattr(listener, method)(*args)
            except Exception as exc:
                log.error("listener_failed", callback=method, error=str(exc), exc_info=True)
