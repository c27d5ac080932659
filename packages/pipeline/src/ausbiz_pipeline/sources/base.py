"""
sources/base.py — Abstract base class for all data source adapters.

Each concrete source must implement:
  extract()      — fetch the raw upstream payload
  transform()    — map the raw payload onto Canonical Dataset series
  get_metadata() — return dict with source info for the status endpoint

run() sequences extract → transform with timing and structured logging
and lets errors propagate. fetch() is what the reconciliation controller
calls: it wraps run() and turns TransportError / SchemaError into a
FetchFailure, so an upstream outage is a value, never an exception.

Adapters only read the dataset. The update they produce is handed back to
the controller, which is the only writer.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

import httpx
import structlog

from ausbiz_shared.config import settings
from ausbiz_shared.constants import SourceLabel
from ausbiz_shared.dataset import AnySeries, Dataset
from ausbiz_shared.errors import AdapterError, SchemaError, TransportError
from ausbiz_pipeline.utils.retry import with_retry

log = structlog.get_logger(__name__)

# series name -> full replacement series, in the order they should be applied
PartialUpdate = Mapping[str, AnySeries]


@dataclass(frozen=True)
class FetchSuccess:
    source_label: SourceLabel
    update: PartialUpdate = field(default_factory=dict)
    ok: Literal[True] = True


@dataclass(frozen=True)
class FetchFailure:
    source_label: SourceLabel
    reason: str
    error: Exception | None = None
    ok: Literal[False] = False


FetchResult = FetchSuccess | FetchFailure


class BaseSource(ABC):
    """Abstract base for all ausbiz source adapters."""

    # Override in subclass: used for logging and metadata
    name: str = "unknown"
    # Override in subclass: reported as the dataset's source label on success
    label: SourceLabel = "Demo"

    def __init__(self, timeout: float | None = None) -> None:
        self._timeout = timeout if timeout is not None else settings.request_timeout_s
        self._log = log.bind(source_name=self.name, source_label=self.label)

    # ------------------------------------------------------------------
    # Abstract interface: subclasses must implement all three
    # ------------------------------------------------------------------

    @abstractmethod
    async def extract(self, dataset: Dataset) -> Any:
        """
        Fetch the raw upstream payload.

        Implementations should raise TransportError for network/HTTP
        failures and SchemaError for payloads of the wrong shape.
        """
        ...

    @abstractmethod
    def transform(self, raw: Any, dataset: Dataset) -> PartialUpdate:
        """
        Map a raw payload to full-cardinality replacement series.

        Series the payload cannot support are left out of the update
        rather than partially filled.
        """
        ...

    @abstractmethod
    async def get_metadata(self) -> dict[str, Any]:
        """
        Return source-level metadata for observability.

        Should include at minimum: source_name, source_label, description.
        """
        ...

    # ------------------------------------------------------------------
    # Orchestration: the controller calls fetch()
    # ------------------------------------------------------------------

    async def run(self, dataset: Dataset) -> PartialUpdate:
        """
        Extract + transform in sequence with timing and structured logging.

        Raises:
            Any exception from extract() or transform() after logging it.
        """
        self._log.info("source_run_start")

        t0 = time.monotonic()
        try:
            raw = await self.extract(dataset)
            self._log.info(
                "extract_complete",
                duration_ms=int((time.monotonic() - t0) * 1000),
            )

            t1 = time.monotonic()
            update = self.transform(raw, dataset)
            self._log.info(
                "transform_complete",
                series=list(update),
                duration_ms=int((time.monotonic() - t1) * 1000),
            )

            self._log.info(
                "source_run_complete",
                total_duration_ms=int((time.monotonic() - t0) * 1000),
                series_count=len(update),
            )
            return update

        except Exception as exc:
            self._log.warning(
                "source_run_failed",
                error=str(exc),
                error_type=type(exc).__name__,
                duration_ms=int((time.monotonic() - t0) * 1000),
            )
            raise

    async def fetch(self, dataset: Dataset) -> FetchResult:
        """Run the adapter and report the outcome as a value."""
        try:
            update = await self.run(dataset)
        except AdapterError as exc:
            return FetchFailure(self.label, reason=str(exc), error=exc)
        return FetchSuccess(self.label, update=update)

    # ------------------------------------------------------------------
    # Shared helpers available to all subclasses
    # ------------------------------------------------------------------

    @with_retry(
        max_attempts=settings.retry_max_attempts,
        base_delay=settings.retry_base_delay_s,
    )
    async def _request_json(self, url: str, params: dict[str, str] | None) -> Any:
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await client.get(url, params=params)
            response.raise_for_status()
            return response.json()

    async def _get_json(self, url: str, params: dict[str, str] | None = None) -> Any:
        """
        GET a JSON document.

        Raises:
            TransportError: connection failure, timeout, or non-2xx status.
            SchemaError:    the body is not valid JSON.
        """
        try:
            return await self._request_json(url, params)
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise TransportError(
                f"HTTP {status} from {exc.request.url}",
                source=self.label,
                status_code=status,
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(
                f"{type(exc).__name__} requesting {url}: {exc}",
                source=self.label,
            ) from exc
        except ValueError as exc:
            raise SchemaError(f"response from {url} is not JSON", source=self.label) from exc
