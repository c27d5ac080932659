"""
models/series.py — Pydantic models for the two series kinds in the dataset.

Both models are frozen and hold tuples, so a series handed to a reader can
never be mutated in place; adapters build replacements with with_values().
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, StrictFloat, StrictInt, model_validator


class CategoricalSeries(BaseModel):
    """Ordered (label, value) pairs with optional display colors."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["categorical"] = "categorical"
    name: str
    labels: tuple[str, ...]
    values: tuple[StrictInt | StrictFloat, ...]
    colors: tuple[str, ...] | None = None

    @model_validator(mode="after")
    def _check_lengths(self) -> "CategoricalSeries":
        if len(self.values) != len(self.labels):
            raise ValueError(
                f"{self.name}: {len(self.values)} values for {len(self.labels)} labels"
            )
        if self.colors is not None and len(self.colors) != len(self.labels):
            raise ValueError(
                f"{self.name}: {len(self.colors)} colors for {len(self.labels)} labels"
            )
        return self

    def __len__(self) -> int:
        return len(self.labels)

    def defined_values(self) -> list[int | float]:
        return list(self.values)

    def with_values(
        self,
        values: Iterable[int | float],
        *,
        labels: Iterable[str] | None = None,
    ) -> "CategoricalSeries":
        """Return a copy carrying new values (and optionally new labels)."""
        return CategoricalSeries(
            name=self.name,
            labels=tuple(labels) if labels is not None else self.labels,
            values=tuple(values),
            colors=self.colors,
        )

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class TimeSeries(BaseModel):
    """
    Ordered (period, value) pairs. None marks a period not yet observed and
    is never the same thing as zero.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["time"] = "time"
    name: str
    labels: tuple[str, ...]
    values: tuple[StrictInt | StrictFloat | None, ...]

    @model_validator(mode="after")
    def _check_lengths(self) -> "TimeSeries":
        if len(self.values) != len(self.labels):
            raise ValueError(
                f"{self.name}: {len(self.values)} values for {len(self.labels)} periods"
            )
        return self

    def __len__(self) -> int:
        return len(self.labels)

    def defined_values(self) -> list[int | float]:
        """Values with absence markers skipped, in period order."""
        return [v for v in self.values if v is not None]

    def with_values(
        self,
        values: Iterable[int | float | None],
        *,
        labels: Iterable[str] | None = None,
    ) -> "TimeSeries":
        return TimeSeries(
            name=self.name,
            labels=tuple(labels) if labels is not None else self.labels,
            values=tuple(values),
        )

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
