"""
dataset.py — the Canonical Dataset: every chartable series, by name.

The dataset is created with built-in demo values and is never empty. It is
mutated one series at a time through replace(), which checks the new series
against the invariants of the one it replaces and leaves prior data untouched
on rejection. Aggregates skip absence markers rather than reading them as 0.

Usage:
    from ausbiz_shared.dataset import Dataset

    dataset = Dataset.with_defaults()
    dataset.aggregate("quarterly_revenue", "growth_rate")   # 34.538...
    dataset.aggregate("monthly_revenue_2025", "sum")        # 435
"""

from __future__ import annotations

import math
from typing import Any

from ausbiz_shared import constants as c
from ausbiz_shared.constants import AggregateOp
from ausbiz_shared.errors import ValidationError
from ausbiz_shared.models.series import CategoricalSeries, TimeSeries

AnySeries = CategoricalSeries | TimeSeries

MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
QUARTERS = ["Q1 2024", "Q2 2024", "Q3 2024", "Q4 2024", "Q1 2025"]


def default_series() -> list[AnySeries]:
    """The demo dataset shown until (and unless) a source succeeds."""
    state_labels = tuple(c.STATES.values())
    return [
        CategoricalSeries(
            name=c.STATE_REVENUE,
            labels=state_labels,
            values=(485, 392, 287, 218, 125, 47, 89, 32),
        ),
        CategoricalSeries(
            name=c.STATE_BUSINESSES,
            labels=state_labels,
            values=(1850, 1520, 1180, 890, 520, 195, 380, 145),
        ),
        CategoricalSeries(
            name=c.INDUSTRIES,
            labels=(
                "Mining & Resources",
                "Finance & Insurance",
                "Healthcare",
                "Retail Trade",
                "Manufacturing",
                "Construction",
                "Education",
                "Tourism & Hospitality",
            ),
            values=(22, 18, 15, 12, 11, 9, 8, 5),
            colors=(
                "#f59e0b", "#2563eb", "#10b981", "#8b5cf6",
                "#ef4444", "#06b6d4", "#ec4899", "#14b8a6",
            ),
        ),
        TimeSeries(
            name=c.QUARTERLY_REVENUE,
            labels=tuple(QUARTERS),
            values=(1245, 1358, 1425, 1532, 1675),
        ),
        TimeSeries(
            name=c.QUARTERLY_PROFIT,
            labels=tuple(QUARTERS),
            values=(186, 203, 214, 230, 251),
        ),
        CategoricalSeries(
            name=c.EMPLOYMENT,
            labels=(
                "Professional Services",
                "Retail & Hospitality",
                "Healthcare & Social",
                "Manufacturing",
                "Construction",
                "Other",
            ),
            values=(285000, 312000, 268000, 195000, 178000, 145000),
            colors=("#3b82f6", "#10b981", "#f59e0b", "#8b5cf6", "#ef4444", "#64748b"),
        ),
        TimeSeries(
            name=c.MONTHLY_REVENUE_2024,
            labels=tuple(MONTHS),
            values=(125, 118, 142, 138, 156, 148, 162, 159, 174, 168, 185, 178),
        ),
        TimeSeries(
            name=c.MONTHLY_REVENUE_2025,
            labels=tuple(MONTHS),
            values=(142, 138, 155) + (None,) * 9,
        ),
        CategoricalSeries(
            name=c.CITY_BUSINESSES,
            labels=tuple(c.CITIES),
            values=(2850, 2420, 1680, 1250, 780, 520, 485, 395, 285, 210),
            colors=(
                "#2563eb", "#10b981", "#f59e0b", "#8b5cf6", "#ef4444",
                "#06b6d4", "#ec4899", "#14b8a6", "#f97316", "#6366f1",
            ),
        ),
    ]


class Dataset:
    """Named series with fixed cardinality, mutated only through replace()."""

    def __init__(self, series: list[AnySeries]) -> None:
        if not series:
            raise ValidationError("a dataset needs at least one series")
        self._series: dict[str, AnySeries] = {}
        for s in series:
            _check_values(s)
            self._series[s.name] = s

    @classmethod
    def with_defaults(cls) -> "Dataset":
        return cls(default_series())

    # ------------------------------------------------------------------
    # Read path
    # ------------------------------------------------------------------

    def names(self) -> list[str]:
        return list(self._series)

    def __contains__(self, name: object) -> bool:
        return name in self._series

    def get(self, name: str) -> AnySeries:
        """Return the named series. Raises KeyError for unknown names."""
        try:
            return self._series[name]
        except KeyError:
            raise KeyError(f"Unknown series '{name}'") from None

    def snapshot(self) -> dict[str, dict[str, Any]]:
        """JSON-ready copy of every series, for renderers and the API."""
        return {name: s.to_dict() for name, s in self._series.items()}

    # ------------------------------------------------------------------
    # Write path
    # ------------------------------------------------------------------

    def replace(self, name: str, new: AnySeries) -> None:
        """
        Swap in a full replacement for one series.

        Raises:
            ValidationError: unknown series, name/kind/cardinality mismatch,
                or a value that is negative, non-finite, or absent where
                absence is not allowed. The stored series is left as it was.
        """
        current = self._series.get(name)
        if current is None:
            raise ValidationError("unknown series", series=name)
        if new.name != name:
            raise ValidationError(f"series is named '{new.name}'", series=name)
        if new.kind != current.kind:
            raise ValidationError(
                f"expected a {current.kind} series, got {new.kind}", series=name
            )
        if len(new) != len(current):
            raise ValidationError(
                f"cardinality {len(new)} does not match {len(current)}", series=name
            )
        _check_values(new)
        self._series[name] = new

    # ------------------------------------------------------------------
    # Aggregates
    # ------------------------------------------------------------------

    def aggregate(self, name: str, op: AggregateOp) -> float | None:
        """
        Aggregate one series over its defined values.

        Returns None when there is nothing to report: an all-absent series,
        a growth rate with fewer than two observations, or a growth rate
        whose first observation is zero.
        """
        series = self.get(name)
        values = series.defined_values()

        if op == "sum":
            return float(sum(values)) if values else None
        if op == "mean":
            return float(sum(values)) / len(values) if values else None
        if op == "growth_rate":
            if series.kind != "time":
                raise ValidationError("growth_rate needs a time series", series=name)
            if len(values) < 2:
                return None
            first, last = values[0], values[-1]
            if first == 0:
                return None
            return (last - first) / first * 100
        raise ValueError(f"Unknown aggregate op '{op}'")


def _check_values(series: AnySeries) -> None:
    for label, value in zip(series.labels, series.values):
        if value is None:
            if series.kind == "categorical":
                raise ValidationError(f"'{label}' has no value", series=series.name)
            continue
        if isinstance(value, bool) or not math.isfinite(value) or value < 0:
            raise ValidationError(
                f"'{label}' has invalid value {value!r}", series=series.name
            )
