"""
constants.py — shared constants used across the pipeline and API.

State codes, series names, indicator codes, distribution shares, badge
colors, and typed literals are defined here so they stay in sync between
the pipeline and the API.
"""

from __future__ import annotations

from typing import Final, Literal

# ---------------------------------------------------------------------------
# States and territories: code -> (display name, map color)
# ---------------------------------------------------------------------------
STATES: Final[dict[str, str]] = {
    "NSW": "New South Wales",
    "VIC": "Victoria",
    "QLD": "Queensland",
    "WA": "Western Australia",
    "SA": "South Australia",
    "TAS": "Tasmania",
    "ACT": "ACT",
    "NT": "NT",
}

STATE_MAP_COLORS: Final[dict[str, str]] = {
    "NSW": "#3b82f6",
    "VIC": "#10b981",
    "QLD": "#f59e0b",
    "WA": "#8b5cf6",
    "SA": "#ef4444",
    "TAS": "#06b6d4",
    "ACT": "#ec4899",
    "NT": "#14b8a6",
}

# Approximate share of national GDP per state, same order as STATES
STATE_GDP_SHARES: Final[list[float]] = [0.31, 0.25, 0.18, 0.14, 0.08, 0.03, 0.06, 0.02]

CITIES: Final[list[str]] = [
    "Sydney",
    "Melbourne",
    "Brisbane",
    "Perth",
    "Adelaide",
    "Canberra",
    "Gold Coast",
    "Newcastle",
    "Hobart",
    "Darwin",
]

# Share of national population per city, same order as CITIES
CITY_POPULATION_SHARES: Final[list[float]] = [
    0.21, 0.18, 0.12, 0.09, 0.06, 0.04, 0.035, 0.03, 0.02, 0.015,
]
BUSINESSES_PER_CAPITA: Final[float] = 0.08

# ---------------------------------------------------------------------------
# Series names: the Canonical Dataset's keys
# ---------------------------------------------------------------------------
STATE_REVENUE: Final = "state_revenue"
STATE_BUSINESSES: Final = "state_businesses"
INDUSTRIES: Final = "industries"
QUARTERLY_REVENUE: Final = "quarterly_revenue"
QUARTERLY_PROFIT: Final = "quarterly_profit"
EMPLOYMENT: Final = "employment"
MONTHLY_REVENUE_2024: Final = "monthly_revenue_2024"
MONTHLY_REVENUE_2025: Final = "monthly_revenue_2025"
CITY_BUSINESSES: Final = "city_businesses"

SERIES_NAMES: Final[list[str]] = [
    STATE_REVENUE,
    STATE_BUSINESSES,
    INDUSTRIES,
    QUARTERLY_REVENUE,
    QUARTERLY_PROFIT,
    EMPLOYMENT,
    MONTHLY_REVENUE_2024,
    MONTHLY_REVENUE_2025,
    CITY_BUSINESSES,
]

# ---------------------------------------------------------------------------
# World Bank indicator codes: key -> indicator code
# ---------------------------------------------------------------------------
WORLD_BANK_INDICATORS: Final[dict[str, str]] = {
    "gdp": "NY.GDP.MKTP.CD",               # GDP (current US$)
    "gdp_growth": "NY.GDP.MKTP.KD.ZG",     # GDP growth (annual %)
    "unemployment": "SL.UEM.TOTL.ZS",      # Unemployment (% of labour force)
    "population": "SP.POP.TOTL",           # Population, total
    "exports": "NE.EXP.GNFS.ZS",           # Exports of goods and services (% of GDP)
    "imports": "NE.IMP.GNFS.ZS",           # Imports of goods and services (% of GDP)
    "inflation": "FP.CPI.TOTL.ZG",         # Inflation, consumer prices (annual %)
    "manufacturing": "NV.IND.MANF.ZS",     # Manufacturing, value added (% of GDP)
}

# ---------------------------------------------------------------------------
# Reconciliation state machine
# ---------------------------------------------------------------------------
ReconciliationState = Literal["idle", "loading", "succeeded", "exhausted"]
SourceLabel = Literal["PrimaryAPI", "SecondaryAPI", "Simulated", "Demo", "Loading"]
AggregateOp = Literal["sum", "mean", "growth_rate"]

# Badge text and background color per source label
BADGES: Final[dict[str, tuple[str, str]]] = {
    "PrimaryAPI": ("World Bank Data", "#10b981"),
    "SecondaryAPI": ("Market Data", "#3b82f6"),
    "Simulated": ("Simulated Data", "#8b5cf6"),
    "Demo": ("Demo Mode", "#f59e0b"),
    "Loading": ("Loading...", "#6366f1"),
}

DEMO_NOTICE: Final = "Using demo Australian business data."
UNAVAILABLE_NOTICE: Final = "All data sources unavailable."
