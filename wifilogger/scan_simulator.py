#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# -----------------------------------------------------------------------------
# WiFi Logger
#
# wifilogger/scan_simulator.py
#
# Description:
# Simulated scan provider. Generates spatially consistent observations for a
# position on the floor plan from fixed access point locations, and can be
# told to behave like a disabled or failing radio.
# -----------------------------------------------------------------------------

import math
import random
from typing import List

from .data_models import NetworkObservation
from .wifi_scanner import ScanCompletion, ScanProvider, StartFailed

# Channel to (frequency MHz, band) mapping
CHANNEL_FREQ_MAP = {
    1: (2412, "2.4 GHz"), 6: (2437, "2.4 GHz"), 11: (2462, "2.4 GHz"),
    36: (5180, "5 GHz"), 44: (5220, "5 GHz"), 100: (5500, "5 GHz")
}


class SimulatedScanProvider(ScanProvider):
    """
    Scan provider producing synthetic but repeatable observations.

    Access point positions use the same percentage coordinates (0-100) as scan
    positions. Signal strength follows an empirical path loss model:
    ~0.5 dB/ft at 2.4 GHz, ~0.6 dB/ft at 5 GHz, over a floor ~164 ft wide.
    """

    DEFAULT_ACCESS_POINTS = [
        {"ssid": "WLANS", "bssid": "9C:A2:F4:10:20:8E", "x": 25.0, "y": 25.0, "base_power": -22, "channel": 1},
        {"ssid": "WLANS", "bssid": "9C:A2:F4:10:20:8F", "x": 25.0, "y": 25.0, "base_power": -28, "channel": 100},
        {"ssid": "WLANS-Guest", "bssid": "A6:A2:F4:31:42:8E", "x": 75.0, "y": 25.0, "base_power": -23, "channel": 6},
        {"ssid": "Office_Main", "bssid": "D4:CA:6E:AB:CD:01", "x": 50.0, "y": 75.0, "base_power": -30, "channel": 44},
        {"ssid": "", "bssid": "AC:67:B2:78:90:02", "x": 90.0, "y": 90.0, "base_power": -35, "channel": 11},
    ]

    FLOOR_WIDTH_FEET = 164.0

    def __init__(self, seed=None, access_points=None, noise_db: float = 2.0, debug_mode: bool = False):
        """
        Initialize the simulator.

        Args:
            seed: Random seed for reproducible results
            access_points: List of AP dicts (ssid, bssid, x, y, base_power, channel)
            noise_db: Maximum random variation added to each reading (dB)
            debug_mode: Enable debug output
        """
        self.random = random.Random(seed)
        self.access_points = access_points if access_points is not None else list(self.DEFAULT_ACCESS_POINTS)
        self.noise_db = noise_db
        self.debug_mode = debug_mode

        self.position = (50.0, 50.0)
        self.radio_enabled = True
        self.refuse_start = False
        self.fail_scan = False
        self.trigger_count = 0
        self._cached: List[NetworkObservation] = []

    def set_position(self, x: float, y: float):
        """Move the simulated device to a floor plan position (percent)."""
        self.position = (float(x), float(y))

    def is_scanning_enabled(self) -> bool:
        return self.radio_enabled

    def trigger_scan(self):
        self.trigger_count += 1
        if self.refuse_start:
            return StartFailed("simulated start refusal")
        if self.fail_scan:
            return ScanCompletion(success=False)

        observations = self.generate_observations(*self.position)
        self._cached = observations
        if self.debug_mode:
            print(f"DEBUG: Simulated scan at {self.position} produced {len(observations)} networks")
        return ScanCompletion(success=True, observations=observations)

    def get_cached_observations(self) -> List[NetworkObservation]:
        return list(self._cached)

    def preload_cache(self, observations: List[NetworkObservation]):
        """Seed the cache as if an earlier scan had returned `observations`."""
        self._cached = list(observations)

    def generate_observations(self, scan_x: float, scan_y: float) -> List[NetworkObservation]:
        """
        Generate observations for a scan position.

        Returns:
            List of NetworkObservation objects, strongest first
        """
        observations = []
        for ap in self.access_points:
            frequency, band = CHANNEL_FREQ_MAP[ap['channel']]
            rssi = self.calculate_signal_strength(ap['x'], ap['y'], scan_x, scan_y, ap['base_power'], band)
            observations.append(NetworkObservation(
                ssid=ap['ssid'],
                bssid=ap['bssid'],
                rssi=rssi,
                frequency=frequency,
                capabilities="[WPA2-PSK-CCMP][ESS]"
            ))
        observations.sort(key=lambda o: o.rssi, reverse=True)
        return observations

    def calculate_signal_strength(self, ap_x, ap_y, scan_x, scan_y, base_power, band="2.4 GHz") -> int:
        """
        Calculate signal strength using the empirical path loss model.

        Returns:
            int: Signal strength in dBm, clamped to -95..-20
        """
        distance_percent = math.sqrt((scan_x - ap_x) ** 2 + (scan_y - ap_y) ** 2)
        distance_feet = distance_percent * (self.FLOOR_WIDTH_FEET / 100.0)

        path_loss_per_foot = 0.5 if band == "2.4 GHz" else 0.6
        path_loss = distance_feet * path_loss_per_foot
        if self.noise_db:
            path_loss += self.random.uniform(-self.noise_db, self.noise_db)

        return max(-95, min(-20, int(base_power - path_loss)))
