"""
config.py — pydantic-settings Settings class.

All environment variables for the ausbiz dashboard are declared here.
Both the pipeline and API import `settings` from this module.

Usage:
    from ausbiz_shared.config import settings
    print(settings.world_bank_base_url)
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _find_dotenv() -> Path | None:
    """Walk up from CWD to find the nearest .env file."""
    current = Path.cwd()
    for parent in [current, *current.parents]:
        candidate = parent / ".env"
        if candidate.is_file():
            return candidate
    return None


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=_find_dotenv() or ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Primary source: World Bank indicators API
    # -------------------------------------------------------------------------
    world_bank_base_url: str = Field(default="https://api.worldbank.org/v2")
    world_bank_country: str = Field(default="AUS")
    world_bank_date_range: str = Field(default="2015:2024")
    world_bank_per_page: int = Field(default=10, ge=1)

    # -------------------------------------------------------------------------
    # Secondary source: market index chart API
    # -------------------------------------------------------------------------
    market_chart_url: str = Field(
        default="https://query1.finance.yahoo.com/v8/finance/chart"
    )
    market_symbol: str = Field(default="^AXJO")
    market_interval: str = Field(default="1mo")
    market_range: str = Field(default="1y")

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------
    request_timeout_s: float = Field(default=10.0, gt=0)
    retry_max_attempts: int = Field(default=2, ge=1)
    retry_base_delay_s: float = Field(default=0.5, ge=0)

    # -------------------------------------------------------------------------
    # Reconciliation chain
    # -------------------------------------------------------------------------
    use_real_api: bool = Field(default=True)
    use_market_api: bool = Field(default=True)
    simulate_api: bool = Field(default=False)
    use_fallback: bool = Field(default=True)
    simulation_variation: float = Field(default=0.05, ge=0, lt=1)
    simulation_seed: int | None = Field(default=None)
    refresh_on_startup: bool = Field(default=True)
    initial_refresh_delay_s: float = Field(default=2.0, ge=0)

    # -------------------------------------------------------------------------
    # API server
    # -------------------------------------------------------------------------
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000)
    cors_origins: str = Field(default="http://localhost:3000,http://localhost:5173")

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO"
    )
    log_format: Literal["json", "console"] = Field(default="console")

    # -------------------------------------------------------------------------
    # Derived / computed
    # -------------------------------------------------------------------------
    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @field_validator("world_bank_base_url", "market_chart_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/") if isinstance(v, str) else v


# ---------------------------------------------------------------------------
# Module-level singleton: import this everywhere
# ---------------------------------------------------------------------------
settings = Settings()
