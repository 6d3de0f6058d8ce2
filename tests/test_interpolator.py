import numpy as np
import pytest

from wifilogger.data_models import SignalSample
from wifilogger.interpolator import (
    NO_SIGNAL_RSSI, IdwInterpolator, interpolate,
)


def sample(x, y, rssi, count=1):
    return SignalSample(x=x, y=y, avg_rssi=rssi, min_rssi=int(rssi), max_rssi=int(rssi), sample_count=count)


def test_empty_samples_give_uniform_weak_grid():
    grid = interpolate([], 7, 5, 3.0)
    assert grid.shape == (7, 5)
    assert np.all(grid == NO_SIGNAL_RSSI)


def test_default_grid_is_100_by_100():
    grid = interpolate([sample(10, 10, -50)])
    assert grid.shape == (100, 100)
    assert np.all(np.isfinite(grid))


@pytest.mark.parametrize("width,height,power", [(1, 10, 2.0), (10, 1, 2.0), (10, 10, 0.0), (10, 10, -1.0)])
def test_invalid_arguments_fail_fast(width, height, power):
    with pytest.raises(ValueError):
        interpolate([sample(50, 50, -60)], width, height, power)


def test_sample_count_must_be_positive():
    with pytest.raises(ValueError):
        SignalSample(x=1, y=1, avg_rssi=-50, min_rssi=-50, max_rssi=-50, sample_count=0)


def test_cell_on_sample_takes_its_value_exactly():
    # 11x11 grid has a cell every 10 percent, so (30, 70) is cell (3, 7)
    samples = [sample(30, 70, -42.25), sample(90, 10, -80)]
    grid = interpolate(samples, 11, 11)
    assert grid[3, 7] == -42.25
    assert grid[9, 1] == -80


def test_coincidence_threshold():
    # Within 0.1 of cell (5, 5) at (50, 50)
    near = interpolate([sample(50.05, 50.0, -55.5), sample(0, 0, -90)], 11, 11)
    assert near[5, 5] == -55.5
    # Just outside the threshold the other sample contributes
    far = interpolate([sample(50.2, 50.0, -55.5), sample(0, 0, -90)], 11, 11)
    assert far[5, 5] != -55.5
    assert -90 < far[5, 5] < -55.5


def test_single_sample_fills_grid_with_its_value():
    grid = interpolate([sample(37, 12, -63)], 6, 6)
    assert np.allclose(grid, -63)


def test_symmetric_samples_with_equal_value():
    grid = interpolate([sample(30, 50, -60), sample(70, 50, -60)], 11, 11)
    assert grid[5, 5] == pytest.approx(-60)


def test_symmetric_samples_with_different_values_average():
    grid = interpolate([sample(30, 50, -40), sample(70, 50, -80)], 11, 11)
    assert grid[5, 5] == pytest.approx(-60)


def test_moving_sample_closer_pulls_value_toward_it():
    fixed = sample(100, 100, -90)
    cell_value = []
    for x in (10, 25, 40, 48):
        grid = interpolate([sample(x, 50, -40), fixed], 11, 11)
        cell_value.append(grid[5, 5])
    assert all(later > earlier for earlier, later in zip(cell_value, cell_value[1:]))


def test_values_bounded_by_sample_range():
    rng = np.random.default_rng(7)
    samples = [sample(float(x), float(y), float(r))
               for x, y, r in zip(rng.uniform(0, 100, 12), rng.uniform(0, 100, 12), rng.uniform(-95, -35, 12))]
    grid = interpolate(samples, 25, 30)
    low = min(s.avg_rssi for s in samples)
    high = max(s.avg_rssi for s in samples)
    assert grid.min() >= low - 1e-9
    assert grid.max() <= high + 1e-9


def test_result_independent_of_sample_order():
    samples = [sample(10, 20, -45), sample(80, 35, -70), sample(55, 90, -62), sample(50.03, 50, -50),
               sample(50, 50.02, -75)]
    forward = interpolate(samples, 21, 21)
    backward = interpolate(list(reversed(samples)), 21, 21)
    assert np.array_equal(forward, backward)


def test_higher_power_favours_nearest_sample():
    samples = [sample(20, 50, -40), sample(100, 50, -90)]
    gentle = interpolate(samples, 11, 11, power=1.0)
    sharp = interpolate(samples, 11, 11, power=4.0)
    # Cell (3, 5) at (30, 50) is closer to the strong sample
    assert sharp[3, 5] > gentle[3, 5]


def test_large_grid_matches_direct_formula():
    samples = [sample(12.5, 80, -52), sample(66, 20, -77), sample(90, 90, -60)]
    grid = interpolate(samples, 100, 100, 2.0)
    i, j = 41, 63
    gx, gy = i / 99 * 100, j / 99 * 100
    weights = [1 / np.hypot(gx - s.x, gy - s.y) ** 2 for s in samples]
    expected = sum(w * s.avg_rssi for w, s in zip(weights, samples)) / sum(weights)
    assert grid[i, j] == pytest.approx(expected)


def test_idw_interpolator_class():
    interpolator = IdwInterpolator(power=3.0)
    samples = [sample(0, 0, -40), sample(100, 100, -80)]
    assert np.array_equal(interpolator.interpolate(samples, 9, 9), interpolate(samples, 9, 9, 3.0))
    with pytest.raises(ValueError):
        IdwInterpolator(power=0)


def test_cell_coordinate_helpers():
    assert IdwInterpolator.cell_coordinate(0, 11) == 0.0
    assert IdwInterpolator.cell_coordinate(10, 11) == 100.0
    assert IdwInterpolator.nearest_cell(52, 11) == 5
    assert IdwInterpolator.nearest_cell(120, 11) == 10
