"""
ausbiz_pipeline.sources — data source adapters.

Each source wraps one upstream, in reconciliation priority order:
  WorldBankSource   — World Bank Indicators API (label PrimaryAPI)
  MarketIndexSource — market index chart API (label SecondaryAPI)
  SimulatedSource   — bounded random variation of the current data (label Simulated)
"""

from ausbiz_pipeline.sources.base import (
    BaseSource,
    FetchFailure,
    FetchResult,
    FetchSuccess,
    PartialUpdate,
)
from ausbiz_pipeline.sources.market import MarketIndexSource
from ausbiz_pipeline.sources.simulated import SimulatedSource
from ausbiz_pipeline.sources.worldbank import WorldBankSource

__all__ = [
    "BaseSource",
    "FetchFailure",
    "FetchResult",
    "FetchSuccess",
    "PartialUpdate",
    "WorldBankSource",
    "MarketIndexSource",
    "SimulatedSource",
]
