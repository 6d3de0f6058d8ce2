#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# -----------------------------------------------------------------------------
# WiFi Logger
#
# wifilogger/heatmap_generator.py
#
# Description:
# Signal strength heatmap assembly. Aggregates stored observations into
# signal samples, filters them by network and frequency band, interpolates
# them into a coverage grid and maps signal strength to display colors.
# -----------------------------------------------------------------------------

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np
from PyQt5.QtGui import QColor

from .data_models import FrequencyBand, SignalSample, WifiLogEntry
from .interpolator import DEFAULT_GRID_SIZE, DEFAULT_POWER, IdwInterpolator


def aggregate_samples(entries: Iterable[WifiLogEntry],
                      ssid: Optional[str] = None,
                      band: FrequencyBand = FrequencyBand.ALL) -> List[SignalSample]:
    """
    Group log entries by position and summarize their RSSI.

    Args:
        entries: Stored log entries
        ssid: Only use entries for this network (None for all networks)
        band: Only use entries whose frequency falls inside this band

    Returns:
        One SignalSample per distinct (x, y), sorted by position
    """
    by_position: Dict[Tuple[float, float], List[int]] = {}

    for entry in entries:
        if ssid is not None and entry.ssid != ssid:
            continue
        if not band.contains(entry.frequency):
            continue
        by_position.setdefault((entry.x, entry.y), []).append(entry.rssi)

    samples = []
    for (x, y), rssi_values in sorted(by_position.items()):
        samples.append(SignalSample(
            x=x,
            y=y,
            avg_rssi=sum(rssi_values) / len(rssi_values),
            min_rssi=min(rssi_values),
            max_rssi=max(rssi_values),
            sample_count=len(rssi_values)
        ))
    return samples


class HeatmapState:
    """Base class of the heatmap assembly results."""
    pass


@dataclass(frozen=True)
class HeatmapNoData(HeatmapState):
    selected_ssid: Optional[str] = None
    selected_band: FrequencyBand = FrequencyBand.ALL


@dataclass(frozen=True, eq=False)
class HeatmapReady(HeatmapState):
    samples: List[SignalSample]
    grid: np.ndarray
    available_ssids: List[str]
    selected_ssid: Optional[str]
    selected_band: FrequencyBand


@dataclass(frozen=True)
class HeatmapError(HeatmapState):
    message: str


class HeatmapGenerator:
    """
    Builds coverage grids for a floor plan from a sample source.

    The source is any object providing:
    - heatmap_samples(floor_plan_id, ssid, band) -> List[SignalSample]
    - distinct_ssids(floor_plan_id) -> List[str]
    """

    def __init__(self, grid_width: int = DEFAULT_GRID_SIZE, grid_height: int = DEFAULT_GRID_SIZE,
                 power: float = DEFAULT_POWER, debug_mode: bool = False):
        """
        Initialize the heatmap generator.

        Args:
            grid_width: Number of grid cells along the floor plan width
            grid_height: Number of grid cells along the floor plan height
            power: IDW power exponent
            debug_mode: Enable debug output
        """
        if grid_width < 2 or grid_height < 2:
            raise ValueError(f"Grid must be at least 2x2, got {grid_width}x{grid_height}")
        self.grid_width = grid_width
        self.grid_height = grid_height
        self.interpolator = IdwInterpolator(power)
        self.debug_mode = debug_mode

    def generate(self, source, floor_plan_id,
                 ssid: Optional[str] = None,
                 band: FrequencyBand = FrequencyBand.ALL) -> HeatmapState:
        """
        Generate the heatmap state for a floor plan.

        Args:
            source: Sample source (see class docstring)
            floor_plan_id: Floor plan to build the heatmap for
            ssid: Network to focus on (None means all networks)
            band: Frequency band filter

        Returns:
            HeatmapReady, HeatmapNoData or HeatmapError
        """
        try:
            samples = source.heatmap_samples(floor_plan_id, ssid, band)
            available_ssids = source.distinct_ssids(floor_plan_id)
        except Exception as e:
            print(f"Warning: Could not load heatmap data for floor plan {floor_plan_id}: {e}")
            return HeatmapError(str(e) or "Unknown error")

        if not samples:
            if self.debug_mode:
                print(f"DEBUG: No heatmap data for floor plan {floor_plan_id} (ssid={ssid}, band={band.label})")
            return HeatmapNoData(selected_ssid=ssid, selected_band=band)

        grid = self.interpolator.interpolate(samples, self.grid_width, self.grid_height)
        if self.debug_mode:
            print(f"DEBUG: Interpolated {len(samples)} samples into a "
                  f"{self.grid_width}x{self.grid_height} grid for floor plan {floor_plan_id}")

        return HeatmapReady(
            samples=list(samples),
            grid=grid,
            available_ssids=list(available_ssids),
            selected_ssid=ssid,
            selected_band=band
        )

    def value_at(self, grid: np.ndarray, x: float, y: float) -> float:
        """Interpolated value of the cell closest to a floor plan position (percent)."""
        i = IdwInterpolator.nearest_cell(x, grid.shape[0])
        j = IdwInterpolator.nearest_cell(y, grid.shape[1])
        return float(grid[i, j])


# Color scale anchors (RGB)
EXCELLENT_GREEN = (0x00, 0xC8, 0x53)
GOOD_YELLOW = (0xFD, 0xD8, 0x35)
FAIR_ORANGE = (0xFF, 0x98, 0x00)
POOR_RED = (0xFF, 0x52, 0x52)
VERY_WEAK_RED = (0xD3, 0x2F, 0x2F)

# Alpha for each threshold (-30, -50, -60, -70, -80, -90 dBm)
ALPHA_VALUES = [0.75, 0.7, 0.65, 0.6, 0.5, 0.35]


def _lerp(start: float, end: float, t: float) -> float:
    t = max(0.0, min(1.0, t))
    return start + (end - start) * t


def _color(rgb, alpha: float) -> QColor:
    color = QColor(int(round(rgb[0])), int(round(rgb[1])), int(round(rgb[2])))
    color.setAlphaF(alpha)
    return color


def _lerp_rgb(start, end, t: float):
    return tuple(_lerp(s, e, t) for s, e in zip(start, end))


def rssi_to_color(rssi: float) -> QColor:
    """
    Map signal strength to a color with alpha transparency.

    Color scale (smoothly interpolated):
    - -30 to -50 dBm: Green (excellent)
    - -50 to -60 dBm: Green to Yellow (good)
    - -60 to -70 dBm: Yellow to Orange (fair)
    - -70 to -80 dBm: Orange to Light Red (poor)
    - -80 to -90 dBm: Light Red to Dark Red (very weak)

    Args:
        rssi: Signal strength in dBm

    Returns:
        QColor with alpha applied
    """
    if rssi >= -30:
        return _color(EXCELLENT_GREEN, ALPHA_VALUES[0])
    if rssi <= -90:
        return _color(VERY_WEAK_RED, ALPHA_VALUES[5])

    if rssi > -50:
        t = (-30 - rssi) / 20
        return _color(EXCELLENT_GREEN, _lerp(ALPHA_VALUES[0], ALPHA_VALUES[1], t))
    elif rssi > -60:
        t = (-50 - rssi) / 10
        return _color(_lerp_rgb(EXCELLENT_GREEN, GOOD_YELLOW, t), _lerp(ALPHA_VALUES[1], ALPHA_VALUES[2], t))
    elif rssi > -70:
        t = (-60 - rssi) / 10
        return _color(_lerp_rgb(GOOD_YELLOW, FAIR_ORANGE, t), _lerp(ALPHA_VALUES[2], ALPHA_VALUES[3], t))
    elif rssi > -80:
        t = (-70 - rssi) / 10
        return _color(_lerp_rgb(FAIR_ORANGE, POOR_RED, t), _lerp(ALPHA_VALUES[3], ALPHA_VALUES[4], t))
    else:
        t = (-80 - rssi) / 10
        return _color(_lerp_rgb(POOR_RED, VERY_WEAK_RED, t), _lerp(ALPHA_VALUES[4], ALPHA_VALUES[5], t))


def rssi_to_label(rssi: float) -> str:
    """Descriptive label for a signal strength in dBm."""
    if rssi >= -50:
        return "Excellent"
    elif rssi >= -60:
        return "Good"
    elif rssi >= -70:
        return "Fair"
    elif rssi >= -80:
        return "Poor"
    elif rssi >= -90:
        return "Very Weak"
    else:
        return "No Signal"
