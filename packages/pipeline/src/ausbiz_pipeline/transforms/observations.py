"""
transforms/observations.py — Clean raw upstream observations with polars.

Upstream APIs hand back loosely typed rows: World Bank observations carry a
nullable value and a date string, the market chart API carries parallel
timestamp/close arrays with gaps. These helpers turn both into small,
sorted, null-free polars DataFrames before any mapping happens.

Usage:
    from ausbiz_pipeline.transforms.observations import (
        clean_indicator_observations,
        clean_market_closes,
        latest_value,
    )

    df = clean_indicator_observations(payload[1])
    # columns: period (String), year (Int32), value (Float64), oldest first
    latest_value(df)   # most recent value or None
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import polars as pl

INDICATOR_SCHEMA = {"period": pl.String, "year": pl.Int32, "value": pl.Float64}
MARKET_SCHEMA = {"timestamp": pl.Int64, "close": pl.Float64}


def _as_str(v: Any) -> str | None:
    return None if v is None else str(v)


def clean_indicator_observations(
    rows: Sequence[dict[str, Any]],
    *,
    date_key: str = "date",
    value_key: str = "value",
) -> pl.DataFrame:
    """
    Normalize World Bank style {date, value} rows.

    Drops rows whose value is null or non-numeric and rows whose date has no
    leading four-digit year, then sorts oldest first.

    Returns:
        DataFrame with columns period, year, value.
    """
    if not rows:
        return pl.DataFrame(schema=INDICATOR_SCHEMA)

    raw = pl.DataFrame(
        {
            "period": [_as_str(r.get(date_key)) for r in rows],
            "raw_value": [_as_str(r.get(value_key)) for r in rows],
        },
        schema={"period": pl.String, "raw_value": pl.String},
    )

    df = raw.with_columns(
        pl.col("period").str.slice(0, 4).cast(pl.Int32, strict=False).alias("year"),
        pl.col("raw_value").cast(pl.Float64, strict=False).alias("value"),
    )
    df = df.filter(
        pl.col("year").is_not_null()
        & pl.col("value").is_not_null()
        & pl.col("value").is_finite()
    )
    return df.sort(["year", "period"]).select(["period", "year", "value"])


def clean_market_closes(
    timestamps: Sequence[Any],
    closes: Sequence[Any],
) -> pl.DataFrame:
    """
    Pair timestamps with closes, drop gaps, and sort oldest first.

    The two arrays are zipped to the shorter length.

    Returns:
        DataFrame with columns timestamp, close.
    """
    n = min(len(timestamps), len(closes))
    if n == 0:
        return pl.DataFrame(schema=MARKET_SCHEMA)

    raw = pl.DataFrame(
        {
            "raw_ts": [_as_str(t) for t in timestamps[:n]],
            "raw_close": [_as_str(v) for v in closes[:n]],
        },
        schema={"raw_ts": pl.String, "raw_close": pl.String},
    )
    df = raw.select(
        pl.col("raw_ts").cast(pl.Int64, strict=False).alias("timestamp"),
        pl.col("raw_close").cast(pl.Float64, strict=False).alias("close"),
    )
    df = df.filter(
        pl.col("timestamp").is_not_null()
        & pl.col("close").is_not_null()
        & pl.col("close").is_finite()
    )
    return df.sort("timestamp")


def latest_value(df: pl.DataFrame, value_col: str = "value") -> float | None:
    """Most recent value of a cleaned, oldest-first frame, or None if empty."""
    if df.is_empty():
        return None
    return df[value_col][-1]


def trailing_values(df: pl.DataFrame, n: int, value_col: str = "value") -> list[float]:
    """The last n values, oldest first."""
    return df[value_col].tail(n).to_list()
