#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# -----------------------------------------------------------------------------
# WiFi Logger
#
# wifilogger/interpolator.py
#
# Description:
# Inverse Distance Weighting (IDW) interpolation engine. Turns a sparse set
# of aggregated signal samples into a dense grid of estimated RSSI values
# covering the whole floor plan.
# -----------------------------------------------------------------------------

from typing import Sequence

import numpy as np
from scipy.spatial.distance import cdist

from .data_models import SignalSample

# Value used for cells with no data to infer from (dBm)
NO_SIGNAL_RSSI = -100.0

# Cells closer than this (percentage units) to a sample take its value directly
COINCIDENCE_DISTANCE = 0.1

DEFAULT_GRID_SIZE = 100
DEFAULT_POWER = 2.0

# Upper bound on grid cells handled per distance matrix
_CELLS_PER_CHUNK = 8192


def interpolate(samples: Sequence[SignalSample],
                grid_width: int = DEFAULT_GRID_SIZE,
                grid_height: int = DEFAULT_GRID_SIZE,
                power: float = DEFAULT_POWER) -> np.ndarray:
    """
    Interpolate a grid of RSSI values from discrete samples using IDW.

    Cell (i, j) sits at the percentage coordinate
    (i / (grid_width - 1) * 100, j / (grid_height - 1) * 100) and its value is
    sum(w * avg_rssi) / sum(w) with w = 1 / distance ** power. A cell within
    COINCIDENCE_DISTANCE of a sample takes that sample's avg_rssi exactly.

    Args:
        samples: Aggregated signal samples with coordinates in 0-100
        grid_width: Number of cells along x (>= 2)
        grid_height: Number of cells along y (>= 2)
        power: IDW power exponent (> 0)

    Returns:
        float64 array of shape (grid_width, grid_height)

    Raises:
        ValueError: If the grid dimensions or power are invalid
    """
    if grid_width < 2 or grid_height < 2:
        raise ValueError(f"Grid must be at least 2x2, got {grid_width}x{grid_height}")
    if not power > 0:
        raise ValueError(f"IDW power must be positive, got {power}")

    if not samples:
        return np.full((grid_width, grid_height), NO_SIGNAL_RSSI)

    # Canonical order makes the result independent of the caller's ordering
    ordered = sorted(samples, key=lambda s: (s.x, s.y, s.avg_rssi))
    sample_points = np.array([(s.x, s.y) for s in ordered], dtype=float)
    sample_values = np.array([s.avg_rssi for s in ordered], dtype=float)

    grid_x = np.arange(grid_width) / (grid_width - 1) * 100.0
    grid_y = np.arange(grid_height) / (grid_height - 1) * 100.0
    cell_x, cell_y = np.meshgrid(grid_x, grid_y, indexing='ij')
    cells = np.column_stack((cell_x.ravel(), cell_y.ravel()))

    values = np.empty(len(cells))
    for start in range(0, len(cells), _CELLS_PER_CHUNK):
        stop = start + _CELLS_PER_CHUNK
        values[start:stop] = _idw_values(cells[start:stop], sample_points, sample_values, power)

    return values.reshape(grid_width, grid_height)


def _idw_values(cells: np.ndarray, sample_points: np.ndarray,
                sample_values: np.ndarray, power: float) -> np.ndarray:
    """Compute IDW estimates for a block of cell coordinates."""
    distances = cdist(cells, sample_points)
    coincident = distances < COINCIDENCE_DISTANCE

    with np.errstate(divide='ignore', over='ignore', invalid='ignore'):
        weights = 1.0 / np.power(np.where(coincident, 1.0, distances), power)
        weights[coincident] = 0.0
        weight_sum = weights.sum(axis=1)
        estimates = (weights * sample_values).sum(axis=1) / weight_sum

    usable = np.isfinite(estimates) & (weight_sum > 0)
    estimates = np.where(usable, estimates, NO_SIGNAL_RSSI)

    # The nearest sample is the coincident one whenever any sample is coincident
    nearest = np.argmin(distances, axis=1)
    return np.where(coincident.any(axis=1), sample_values[nearest], estimates)


class IdwInterpolator:
    """
    IDW interpolator bound to a fixed power exponent.
    """

    def __init__(self, power: float = DEFAULT_POWER):
        """
        Initialize the interpolator.

        Args:
            power: IDW power exponent; higher values favour nearby samples
        """
        if not power > 0:
            raise ValueError(f"IDW power must be positive, got {power}")
        self.power = power

    def interpolate(self, samples: Sequence[SignalSample],
                    grid_width: int = DEFAULT_GRID_SIZE,
                    grid_height: int = DEFAULT_GRID_SIZE) -> np.ndarray:
        return interpolate(samples, grid_width, grid_height, self.power)

    @staticmethod
    def cell_coordinate(index: int, size: int) -> float:
        """Percentage coordinate (0-100) of a grid index along an axis of `size` cells."""
        return index / (size - 1) * 100.0

    @staticmethod
    def nearest_cell(percent: float, size: int) -> int:
        """Grid index closest to a percentage coordinate along an axis of `size` cells."""
        index = int(round(percent / 100.0 * (size - 1)))
        return max(0, min(size - 1, index))
