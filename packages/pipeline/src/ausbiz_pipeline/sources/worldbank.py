"""
sources/worldbank.py — World Bank Indicators API source adapter.

The primary source. One request per indicator, all issued concurrently;
any failed request fails the whole adapter.

Endpoint:
  GET /country/{country}/indicator/{code}?format=json&per_page=N&date=2015:2024

Response shape (two-element array; observations may be null):
  [
    {"page": 1, "pages": 1, "per_page": 10, "total": 10, ...},
    [
      {"indicator": {...}, "country": {...}, "date": "2023", "value": 1.72e12, ...},
      {"date": "2022", "value": null, ...},
      ...
    ]
  ]

An error answer is a one-element array: [{"message": [{"id": "120", ...}]}].

Series derived (each only when its indicator has enough observations):
  gdp (≥5)            → quarterly_revenue, quarterly_profit (last 5 years)
  gdp (≥1)            → state_revenue
  gdp_growth (≥1)     → monthly_revenue_2024, monthly_revenue_2025
  exports/manufacturing (≥1) → industries
  unemployment (≥1)   → employment
  population (≥1)     → city_businesses

Usage:
    source = WorldBankSource()
    result = await source.fetch(dataset)
"""

from __future__ import annotations

import asyncio
from typing import Any

import polars as pl

from ausbiz_shared import constants as c
from ausbiz_shared.config import settings
from ausbiz_shared.dataset import AnySeries, Dataset, default_series
from ausbiz_shared.errors import SchemaError
from ausbiz_pipeline.sources.base import BaseSource, PartialUpdate
from ausbiz_pipeline.transforms.observations import (
    clean_indicator_observations,
    latest_value,
    trailing_values,
)
from ausbiz_pipeline.transforms.rescale import (
    BILLION,
    distribute,
    scale_round,
    to_display_units,
)

MIN_TIME_SERIES_OBS = 5
MIN_SNAPSHOT_OBS = 1

PROFIT_MARGIN = 0.15
# State revenue is shown at a third of the GDP share
STATE_REVENUE_DIVISOR = BILLION * 3
MONTHLY_BASE_REVENUE = 125
MONTHLY_STEP = 0.02
MONTHLY_2025_OFFSET = 1.25
# Employment baseline is calibrated to 95% of the labour force in work
EMPLOYMENT_NORM = 95.0

# Industry share template; exports drive Mining & Resources, manufacturing
# its own slot. The rest are fixed shares.
INDUSTRY_TEMPLATE = [22, 18, 15, 12, 11, 9, 8, 5]
EXPORTS_SLOT = 0
MANUFACTURING_SLOT = 4


def _baseline(name: str) -> AnySeries:
    return next(s for s in default_series() if s.name == name)


def parse_indicator_payload(payload: Any, code: str) -> list[dict[str, Any]]:
    """
    Pull the observation rows out of a World Bank response.

    Raises:
        SchemaError: anything other than [metadata, observations | null].
    """
    if not isinstance(payload, list) or len(payload) < 2:
        detail = "unexpected payload"
        if isinstance(payload, list) and payload and isinstance(payload[0], dict):
            messages = payload[0].get("message") or []
            if messages and isinstance(messages[0], dict):
                detail = messages[0].get("value") or messages[0].get("key") or detail
        raise SchemaError(f"{code}: {detail}", source="PrimaryAPI")

    observations = payload[1]
    if observations is None:
        return []
    if not isinstance(observations, list) or not all(
        isinstance(row, dict) for row in observations
    ):
        raise SchemaError(f"{code}: observations are not a list of objects", source="PrimaryAPI")
    return observations


class WorldBankSource(BaseSource):
    """Pulls national economic indicators for Australia from the World Bank."""

    name = "WorldBank"
    label = "PrimaryAPI"

    def __init__(
        self,
        indicators: dict[str, str] | None = None,
        *,
        timeout: float | None = None,
    ) -> None:
        super().__init__(timeout)
        self._base_url = settings.world_bank_base_url
        self._country = settings.world_bank_country
        self._date_range = settings.world_bank_date_range
        self._per_page = settings.world_bank_per_page
        self._indicators = dict(indicators or c.WORLD_BANK_INDICATORS)

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    def indicator_url(self, code: str) -> str:
        return f"{self._base_url}/country/{self._country}/indicator/{code}"

    async def _fetch_indicator(self, key: str, code: str) -> tuple[str, list[dict[str, Any]]]:
        params = {
            "format": "json",
            "per_page": str(self._per_page),
            "date": self._date_range,
        }
        self._log.debug("wb_fetch", indicator=key, code=code)
        payload = await self._get_json(self.indicator_url(code), params=params)
        return key, parse_indicator_payload(payload, code)

    # ------------------------------------------------------------------
    # BaseSource interface
    # ------------------------------------------------------------------

    async def extract(self, dataset: Dataset) -> dict[str, list[dict[str, Any]]]:
        """
        Fetch every indicator concurrently.

        The first failed request fails the whole extract; requests already in
        flight run to completion but their results are discarded.

        Returns:
            indicator key → raw observation rows
        """
        results = await asyncio.gather(
            *(self._fetch_indicator(key, code) for key, code in self._indicators.items())
        )
        return dict(results)

    def transform(self, raw: dict[str, list[dict[str, Any]]], dataset: Dataset) -> PartialUpdate:
        frames = {key: clean_indicator_observations(rows) for key, rows in raw.items()}
        self._log.info(
            "wb_observations",
            counts={key: df.height for key, df in frames.items()},
        )

        update: dict[str, AnySeries] = {}
        empty = pl.DataFrame()

        gdp = frames.get("gdp", empty)
        update.update(self._quarterly_from_gdp(gdp, dataset))
        update.update(self._states_from_gdp(gdp, dataset))
        update.update(self._monthly_from_growth(frames.get("gdp_growth", empty), dataset))
        update.update(
            self._industries_from_trade(
                frames.get("exports", empty),
                frames.get("manufacturing", empty),
                dataset,
            )
        )
        update.update(self._employment_from_unemployment(frames.get("unemployment", empty), dataset))
        update.update(self._cities_from_population(frames.get("population", empty), dataset))
        return update

    async def get_metadata(self) -> dict[str, Any]:
        return {
            "source_name": self.name,
            "source_label": self.label,
            "base_url": self._base_url,
            "country": self._country,
            "date_range": self._date_range,
            "description": "World Bank Indicators API — national GDP, labour, trade and population",
            "indicators": self._indicators,
        }

    # ------------------------------------------------------------------
    # Mappings
    # ------------------------------------------------------------------

    def _skip(self, series: str, indicator: str, have: int, need: int) -> dict[str, AnySeries]:
        self._log.info("wb_series_skipped", series=series, indicator=indicator, have=have, need=need)
        return {}

    def _quarterly_from_gdp(self, gdp: pl.DataFrame, dataset: Dataset) -> dict[str, AnySeries]:
        revenue = dataset.get(c.QUARTERLY_REVENUE)
        profit = dataset.get(c.QUARTERLY_PROFIT)
        need = max(MIN_TIME_SERIES_OBS, len(revenue))
        if gdp.height < need:
            return self._skip(c.QUARTERLY_REVENUE, "gdp", gdp.height, need)

        recent = gdp.tail(len(revenue))
        labels = [f"Year {period}" for period in recent["period"].to_list()]
        revenue_values = [to_display_units(v) for v in trailing_values(recent, len(revenue))]
        return {
            c.QUARTERLY_REVENUE: revenue.with_values(revenue_values, labels=labels),
            c.QUARTERLY_PROFIT: profit.with_values(
                scale_round(revenue_values, PROFIT_MARGIN), labels=labels
            ),
        }

    def _states_from_gdp(self, gdp: pl.DataFrame, dataset: Dataset) -> dict[str, AnySeries]:
        total = latest_value(gdp)
        if total is None:
            return self._skip(c.STATE_REVENUE, "gdp", 0, MIN_SNAPSHOT_OBS)
        values = distribute(total, c.STATE_GDP_SHARES, divisor=STATE_REVENUE_DIVISOR)
        return {c.STATE_REVENUE: dataset.get(c.STATE_REVENUE).with_values(values)}

    def _monthly_from_growth(self, growth: pl.DataFrame, dataset: Dataset) -> dict[str, AnySeries]:
        rate = latest_value(growth)
        if rate is None:
            return self._skip(c.MONTHLY_REVENUE_2024, "gdp_growth", 0, MIN_SNAPSHOT_OBS)

        base = MONTHLY_BASE_REVENUE * (1 + rate / 100)
        current_2024 = dataset.get(c.MONTHLY_REVENUE_2024)
        current_2025 = dataset.get(c.MONTHLY_REVENUE_2025)
        values_2024 = [
            round(base * (1 + i * MONTHLY_STEP)) for i in range(len(current_2024))
        ]
        # only months already observed get a value; the rest stay absent
        values_2025 = [
            None if v is None else round(base * (MONTHLY_2025_OFFSET + i * MONTHLY_STEP))
            for i, v in enumerate(current_2025.values)
        ]
        return {
            c.MONTHLY_REVENUE_2024: current_2024.with_values(values_2024),
            c.MONTHLY_REVENUE_2025: current_2025.with_values(values_2025),
        }

    def _industries_from_trade(
        self,
        exports: pl.DataFrame,
        manufacturing: pl.DataFrame,
        dataset: Dataset,
    ) -> dict[str, AnySeries]:
        exports_pct = latest_value(exports)
        manufacturing_pct = latest_value(manufacturing)
        if exports_pct is None and manufacturing_pct is None:
            return self._skip(c.INDUSTRIES, "exports|manufacturing", 0, MIN_SNAPSHOT_OBS)

        values = list(INDUSTRY_TEMPLATE)
        if exports_pct is not None:
            values[EXPORTS_SLOT] = round(exports_pct)
        if manufacturing_pct is not None:
            values[MANUFACTURING_SLOT] = round(manufacturing_pct)
        return {c.INDUSTRIES: dataset.get(c.INDUSTRIES).with_values(values)}

    def _employment_from_unemployment(
        self, unemployment: pl.DataFrame, dataset: Dataset
    ) -> dict[str, AnySeries]:
        rate = latest_value(unemployment)
        if rate is None:
            return self._skip(c.EMPLOYMENT, "unemployment", 0, MIN_SNAPSHOT_OBS)

        # Scale the built-in headcounts, not the current ones, so repeated
        # refreshes do not compound.
        factor = (100 - rate) / EMPLOYMENT_NORM
        values = scale_round(_baseline(c.EMPLOYMENT).values, factor)
        return {c.EMPLOYMENT: dataset.get(c.EMPLOYMENT).with_values(values)}

    def _cities_from_population(
        self, population: pl.DataFrame, dataset: Dataset
    ) -> dict[str, AnySeries]:
        total = latest_value(population)
        if total is None:
            return self._skip(c.CITY_BUSINESSES, "population", 0, MIN_SNAPSHOT_OBS)
        values = distribute(
            total,
            c.CITY_POPULATION_SHARES,
            factor=c.BUSINESSES_PER_CAPITA,
            divisor=1000,
        )
        return {c.CITY_BUSINESSES: dataset.get(c.CITY_BUSINESSES).with_values(values)}
