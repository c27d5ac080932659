"""
stats.py — headline statistics derived from the Canonical Dataset.

These are the four numbers on the dashboard's stat cards. Each comes back
both raw and formatted; a missing aggregate formats as "N/A".
"""

from __future__ import annotations

from typing import Any

from ausbiz_shared import constants as c
from ausbiz_shared.dataset import Dataset

NOT_AVAILABLE = "N/A"


def _fmt_count(value: float | None) -> str:
    return NOT_AVAILABLE if value is None else f"{round(value):,}"


def derived_stats(dataset: Dataset) -> dict[str, dict[str, Any]]:
    """
    Totals and growth for the stat cards.

    Returns:
        {stat name: {"value": float | None, "display": str}}
    """
    revenue = dataset.aggregate(c.STATE_REVENUE, "sum")
    businesses = dataset.aggregate(c.STATE_BUSINESSES, "sum")
    employees = dataset.aggregate(c.EMPLOYMENT, "sum")
    growth = dataset.aggregate(c.QUARTERLY_REVENUE, "growth_rate")

    return {
        "total_revenue": {
            "value": revenue,
            "display": NOT_AVAILABLE if revenue is None else f"${round(revenue)}M",
        },
        "total_businesses": {"value": businesses, "display": _fmt_count(businesses)},
        "total_employees": {"value": employees, "display": _fmt_count(employees)},
        "growth_rate": {
            "value": None if growth is None else round(growth, 1),
            "display": NOT_AVAILABLE if growth is None else f"{growth:+.1f}%",
        },
    }
