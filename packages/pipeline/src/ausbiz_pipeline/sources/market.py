"""
sources/market.py — Market index chart source adapter.

The secondary source. Uses the ASX 200 monthly closes as a proxy for
business activity and remaps quarterly revenue from the trailing closes.
Every other series is left alone.

Endpoint:
  GET /v8/finance/chart/{symbol}?interval=1mo&range=1y

Response shape:
  {
    "chart": {
      "result": [
        {
          "meta": {...},
          "timestamp": [1704067200, ...],
          "indicators": {"quote": [{"close": [7680.7, null, ...], ...}]}
        }
      ],
      "error": null
    }
  }

Usage:
    source = MarketIndexSource()
    result = await source.fetch(dataset)
"""

from __future__ import annotations

from typing import Any

from ausbiz_shared import constants as c
from ausbiz_shared.config import settings
from ausbiz_shared.dataset import Dataset
from ausbiz_shared.errors import SchemaError
from ausbiz_pipeline.sources.base import BaseSource, PartialUpdate
from ausbiz_pipeline.transforms.observations import clean_market_closes, trailing_values
from ausbiz_pipeline.transforms.rescale import scale_round

MIN_CLOSES = 5
# Index points → $M revenue
CLOSE_SCALE = 0.02


def parse_chart_payload(payload: Any) -> tuple[list[Any], list[Any]]:
    """
    Return (timestamps, closes) from a chart response.

    Raises:
        SchemaError: the chart result is missing or malformed.
    """
    try:
        chart = payload["chart"]
        if chart.get("error"):
            error = chart["error"]
            detail = error.get("description") if isinstance(error, dict) else str(error)
            raise SchemaError(f"chart error: {detail}", source="SecondaryAPI")
        result = chart["result"][0]
        timestamps = result["timestamp"]
        closes = result["indicators"]["quote"][0]["close"]
    except (KeyError, IndexError, TypeError, AttributeError) as exc:
        raise SchemaError(f"malformed chart payload: {exc!r}", source="SecondaryAPI") from exc

    if not isinstance(timestamps, list) or not isinstance(closes, list):
        raise SchemaError("timestamp/close are not arrays", source="SecondaryAPI")
    return timestamps, closes


class MarketIndexSource(BaseSource):
    """Pulls monthly index closes from the chart API."""

    name = "MarketIndex"
    label = "SecondaryAPI"

    def __init__(self, symbol: str | None = None, *, timeout: float | None = None) -> None:
        super().__init__(timeout)
        self._base_url = settings.market_chart_url
        self._symbol = symbol or settings.market_symbol
        self._interval = settings.market_interval
        self._range = settings.market_range

    @property
    def chart_url(self) -> str:
        return f"{self._base_url}/{self._symbol}"

    # ------------------------------------------------------------------
    # BaseSource interface
    # ------------------------------------------------------------------

    async def extract(self, dataset: Dataset) -> tuple[list[Any], list[Any]]:
        self._log.info("market_fetch", symbol=self._symbol, interval=self._interval)
        payload = await self._get_json(
            self.chart_url,
            params={"interval": self._interval, "range": self._range},
        )
        return parse_chart_payload(payload)

    def transform(self, raw: tuple[list[Any], list[Any]], dataset: Dataset) -> PartialUpdate:
        """
        Remap quarterly_revenue from the trailing closes, keeping its labels.

        Raises:
            SchemaError: fewer valid closes than the series needs (minimum 5).
        """
        timestamps, closes = raw
        df = clean_market_closes(timestamps, closes)

        revenue = dataset.get(c.QUARTERLY_REVENUE)
        need = max(MIN_CLOSES, len(revenue))
        if df.height < need:
            raise SchemaError(
                f"{df.height} valid closes, need at least {need}", source=self.label
            )

        values = scale_round(trailing_values(df, len(revenue), "close"), CLOSE_SCALE)
        return {c.QUARTERLY_REVENUE: revenue.with_values(values)}

    async def get_metadata(self) -> dict[str, Any]:
        return {
            "source_name": self.name,
            "source_label": self.label,
            "base_url": self._base_url,
            "symbol": self._symbol,
            "interval": self._interval,
            "range": self._range,
            "description": "ASX 200 monthly closes as a business activity proxy",
        }
