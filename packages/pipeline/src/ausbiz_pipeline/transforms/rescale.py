"""
transforms/rescale.py — Unit conversion into display units.

Everything an adapter needs to turn an upstream number into a value that
fits a Canonical Dataset series: base units to display units, a national
total spread over fixed shares and proportional scaling with absences kept.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

BILLION = 1e9


def to_display_units(value: float, divisor: float = BILLION) -> int:
    """E.g. 1.72e12 US$ → 1720 (billions)."""
    return round(value / divisor)


def distribute(
    total: float,
    shares: Sequence[float],
    *,
    divisor: float = 1.0,
    factor: float = 1.0,
) -> list[int]:
    """Split total over shares, scale by factor/divisor, and round each part."""
    return [round(total * share * factor / divisor) for share in shares]


def scale_round(
    values: Iterable[float | None],
    factor: float,
) -> list[int | None]:
    """Multiply every defined value by factor and round; None stays None."""
    return [None if v is None else round(v * factor) for v in values]

