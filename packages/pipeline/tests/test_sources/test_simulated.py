"""
tests/test_sources/test_simulated.py — Unit tests for SimulatedSource.
"""

from __future__ import annotations

import pytest

from ausbiz_shared import constants as c
from ausbiz_shared.dataset import Dataset
from ausbiz_pipeline.sources.base import FetchSuccess
from ausbiz_pipeline.sources.simulated import TARGET_SERIES, SimulatedSource


@pytest.mark.asyncio
async def test_targets_five_series(dataset: Dataset):
    result = await SimulatedSource(seed=1).fetch(dataset)

    assert isinstance(result, FetchSuccess)
    assert result.source_label == "Simulated"
    assert set(result.update) == set(TARGET_SERIES)
    assert c.INDUSTRIES not in result.update


@pytest.mark.asyncio
async def test_same_seed_same_output(dataset: Dataset):
    first = await SimulatedSource(seed=42).fetch(dataset)
    second = await SimulatedSource(seed=42).fetch(dataset)
    assert first.update == second.update


@pytest.mark.asyncio
async def test_reseed_replays(dataset: Dataset):
    source = SimulatedSource(seed=7)
    first = await source.fetch(dataset)
    source.reseed(7)
    second = await source.fetch(dataset)
    assert first.update == second.update


@pytest.mark.asyncio
async def test_values_stay_within_variation(dataset: Dataset):
    source = SimulatedSource(variation=0.05, seed=3)
    result = await source.fetch(dataset)

    for name, series in result.update.items():
        for before, after in zip(dataset.get(name).values, series.values):
            assert before * 0.95 - 0.5 <= after <= before * 1.05 + 0.5
            assert isinstance(after, int)


@pytest.mark.asyncio
@pytest.mark.parametrize("seed", range(0, 600, 3))
async def test_two_refreshes_drift_is_bounded(seed: int):
    dataset = Dataset.with_defaults()
    source = SimulatedSource(variation=0.05, seed=seed)
    baseline = {name: dataset.get(name).values for name in TARGET_SERIES}

    for _ in range(2):
        result = await source.fetch(dataset)
        for name, series in result.update.items():
            dataset.replace(name, series)

    for name in TARGET_SERIES:
        for before, after in zip(baseline[name], dataset.get(name).values):
            assert before * 0.95**2 - 1e-9 <= after <= before * 1.05**2 + 1e-9, (name, before, after)


def test_rounding_never_leaves_the_band():
    source = SimulatedSource(variation=0.05, seed=0)
    for _ in range(500):
        once = source.perturb([32, 11, 17])
        for before, after in zip([32, 11, 17], once):
            assert before * 0.95 <= after <= before * 1.05
        twice = source.perturb(once)
        for before, after in zip([32, 11, 17], twice):
            assert before * 0.95**2 <= after <= before * 1.05**2


def test_value_with_no_whole_number_in_band_still_rounds():
    # 5 * [0.95, 1.05] = [4.75, 5.25]; only 5 fits
    source = SimulatedSource(variation=0.05, seed=1)
    assert source.perturb([5] * 20) == [5] * 20
    # 0.5 * [0.95, 1.05] holds no integer, so the plain rounded draw is kept
    assert all(v in (0, 1) for v in source.perturb([0.5] * 20))


@pytest.mark.asyncio
async def test_zero_variation_is_identity(dataset: Dataset):
    result = await SimulatedSource(variation=0, seed=5).fetch(dataset)
    for name, series in result.update.items():
        assert series.values == dataset.get(name).values


def test_perturb_keeps_absences():
    source = SimulatedSource(seed=0)
    out = source.perturb([100, None, 200])
    assert out[1] is None
    assert out[0] is not None and out[2] is not None


@pytest.mark.parametrize("variation", [-0.1, 1.0, 2])
def test_invalid_variation(variation: float):
    with pytest.raises(ValueError):
        SimulatedSource(variation=variation)


@pytest.mark.asyncio
async def test_get_metadata():
    meta = await SimulatedSource(variation=0.1, seed=9).get_metadata()
    assert meta["source_label"] == "Simulated"
    assert meta["variation"] == 0.1
    assert meta["seed"] == 9
