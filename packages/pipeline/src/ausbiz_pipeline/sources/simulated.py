"""
sources/simulated.py — Simulated variation source adapter.

Never fails. Its "upstream" is the dataset itself: it reads the current
values of five series and returns them with an independent, bounded,
multiplicative jitter on every entry, rounded to whole numbers. Absence
markers stay absent.

The random source is a seedable random.Random, so tests (and demos) can
reproduce a run exactly.

Usage:
    source = SimulatedSource(seed=42)
    result = await source.fetch(dataset)
"""

from __future__ import annotations

import math
import random
from collections.abc import Iterable
from typing import Any

from ausbiz_shared import constants as c
from ausbiz_shared.config import settings
from ausbiz_shared.dataset import AnySeries, Dataset
from ausbiz_pipeline.sources.base import BaseSource, PartialUpdate

TARGET_SERIES: list[str] = [
    c.STATE_REVENUE,
    c.EMPLOYMENT,
    c.QUARTERLY_REVENUE,
    c.QUARTERLY_PROFIT,
    c.CITY_BUSINESSES,
]


class SimulatedSource(BaseSource):
    """Applies a uniform ±variation jitter to the current dataset."""

    name = "Simulation"
    label = "Simulated"

    def __init__(
        self,
        *,
        variation: float | None = None,
        seed: int | None = None,
        rng: random.Random | None = None,
    ) -> None:
        super().__init__()
        self.variation = settings.simulation_variation if variation is None else variation
        if not 0 <= self.variation < 1:
            raise ValueError(f"variation must be in [0, 1), got {self.variation}")
        self._seed = seed
        self._rng = rng or random.Random(seed)

    def reseed(self, seed: int | None) -> None:
        self._seed = seed
        self._rng.seed(seed)

    def perturb(self, values: Iterable[int | float | None]) -> list[int | None]:
        """
        Multiply each defined value by its own Uniform(1 - v, 1 + v) draw.

        The rounded result is clamped to the whole numbers inside
        [value * (1 - v), value * (1 + v)], so rounding never widens the band.
        """
        low, high = 1 - self.variation, 1 + self.variation
        return [None if v is None else self._jitter(v, low, high) for v in values]

    def _jitter(self, value: int | float, low: float, high: float) -> int:
        result = round(value * self._rng.uniform(low, high))
        lo, hi = math.ceil(value * low), math.floor(value * high)
        if lo > hi:
            # no whole number inside the band
            return result
        return min(max(result, lo), hi)

    # ------------------------------------------------------------------
    # BaseSource interface
    # ------------------------------------------------------------------

    async def extract(self, dataset: Dataset) -> dict[str, AnySeries]:
        return {name: dataset.get(name) for name in TARGET_SERIES if name in dataset}

    def transform(self, raw: dict[str, AnySeries], dataset: Dataset) -> PartialUpdate:
        return {name: series.with_values(self.perturb(series.values)) for name, series in raw.items()}

    async def get_metadata(self) -> dict[str, Any]:
        return {
            "source_name": self.name,
            "source_label": self.label,
            "description": "Bounded random variation of the current dataset",
            "variation": self.variation,
            "seed": self._seed,
            "series": TARGET_SERIES,
        }
