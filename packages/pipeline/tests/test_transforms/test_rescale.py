"""
tests/test_transforms/test_rescale.py — Tests for unit conversion helpers.
"""

from __future__ import annotations

from ausbiz_shared.constants import STATE_GDP_SHARES
from ausbiz_pipeline.transforms.rescale import (
    BILLION,
    distribute,
    scale_round,
    to_display_units,
)


def test_to_display_units_billions():
    assert to_display_units(1.724e12) == 1724


def test_to_display_units_custom_divisor():
    assert to_display_units(26_000_000, divisor=1000) == 26000


def test_distribute_splits_over_shares():
    assert distribute(100, [0.5, 0.3, 0.2]) == [50, 30, 20]


def test_distribute_with_factor_and_divisor():
    assert distribute(1_000_000, [0.5, 0.5], factor=0.08, divisor=1000) == [40, 40]


def test_distribute_state_shares_sum_close_to_total():
    parts = distribute(3 * BILLION * 1000, STATE_GDP_SHARES, divisor=3 * BILLION)
    assert len(parts) == 8
    assert abs(sum(parts) - 1000 * sum(STATE_GDP_SHARES)) <= len(parts)


def test_scale_round_keeps_absences():
    assert scale_round([100, None, 30], 0.5) == [50, None, 15]


def test_scale_round_identity():
    assert scale_round([1, 2, 3], 1) == [1, 2, 3]
