#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# -----------------------------------------------------------------------------
# WiFi Logger
#
# wifilogger/data_models.py
#
# Description:
# Data model classes for the WiFi Logger. Contains the network observations
# produced by a scan, the raw log entries stored per floor plan position and
# the aggregated signal samples consumed by the interpolator.
# -----------------------------------------------------------------------------

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

HIDDEN_NETWORK_SSID = "<Hidden Network>"


class FrequencyBand(Enum):
    """
    WiFi frequency bands used to filter heatmap data.
    Each value holds the inclusive (min, max) frequency range in MHz.
    """
    ALL = (0, 1_000_000)
    FREQ_2_4GHZ = (2400, 2500)
    FREQ_5GHZ = (4900, 5900)
    FREQ_6GHZ = (5925, 7125)

    @property
    def min_frequency(self) -> int:
        return self.value[0]

    @property
    def max_frequency(self) -> int:
        return self.value[1]

    @property
    def label(self) -> str:
        return {
            FrequencyBand.ALL: "All",
            FrequencyBand.FREQ_2_4GHZ: "2.4 GHz",
            FrequencyBand.FREQ_5GHZ: "5 GHz",
            FrequencyBand.FREQ_6GHZ: "6 GHz",
        }[self]

    def contains(self, frequency: int) -> bool:
        """Check whether a frequency (MHz) falls inside this band."""
        return self.min_frequency <= frequency <= self.max_frequency

    @classmethod
    def from_frequency(cls, frequency: int) -> Optional["FrequencyBand"]:
        """Return the specific band a frequency belongs to, or None if unknown."""
        for band in (cls.FREQ_2_4GHZ, cls.FREQ_5GHZ, cls.FREQ_6GHZ):
            if band.contains(frequency):
                return band
        return None


@dataclass(frozen=True)
class SignalSample:
    """
    One aggregated measurement location on a floor plan.

    Coordinates are percentages (0-100) of the floor plan width and height.
    The RSSI statistics summarize every raw observation recorded there.
    """
    x: float
    y: float
    avg_rssi: float
    min_rssi: int
    max_rssi: int
    sample_count: int

    def __post_init__(self):
        if self.sample_count < 1:
            raise ValueError(f"sample_count must be at least 1, got {self.sample_count}")

    def to_dict(self):
        return {
            'x': self.x,
            'y': self.y,
            'avg_rssi': self.avg_rssi,
            'min_rssi': self.min_rssi,
            'max_rssi': self.max_rssi,
            'sample_count': self.sample_count
        }


class NetworkObservation:
    """
    Represents a single network seen during a scan cycle.
    """
    def __init__(self, ssid, bssid, rssi, frequency, capabilities=""):
        self.ssid = ssid if ssid else HIDDEN_NETWORK_SSID
        self.bssid = bssid
        self.rssi = int(rssi)
        self.frequency = int(frequency)
        self.capabilities = capabilities

    @property
    def network_id(self) -> str:
        return f"{self.ssid}|{self.bssid}"

    @property
    def band(self) -> Optional[FrequencyBand]:
        return FrequencyBand.from_frequency(self.frequency)

    @property
    def signal_percent(self) -> int:
        """Signal strength as a coarse percentage (0-100)."""
        if self.rssi >= -50:
            return 100
        elif self.rssi >= -60:
            return 80
        elif self.rssi >= -70:
            return 60
        elif self.rssi >= -80:
            return 40
        elif self.rssi >= -90:
            return 20
        else:
            return 0

    @property
    def signal_quality(self) -> str:
        """Human-readable signal quality description."""
        if self.rssi >= -50:
            return "Excellent"
        elif self.rssi >= -60:
            return "Good"
        elif self.rssi >= -70:
            return "Fair"
        elif self.rssi >= -80:
            return "Weak"
        else:
            return "Very Weak"

    def __eq__(self, other):
        if not isinstance(other, NetworkObservation):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self):
        return hash((self.ssid, self.bssid, self.rssi, self.frequency, self.capabilities))

    def __repr__(self):
        return f"NetworkObservation({self.ssid!r}, {self.bssid!r}, rssi={self.rssi}, frequency={self.frequency})"

    def to_dict(self):
        return {
            'ssid': self.ssid,
            'bssid': self.bssid,
            'rssi': self.rssi,
            'frequency': self.frequency,
            'capabilities': self.capabilities
        }

    @classmethod
    def from_dict(cls, data):
        """Create NetworkObservation instance from dictionary."""
        return cls(
            ssid=data['ssid'],
            bssid=data['bssid'],
            rssi=data['rssi'],
            frequency=data['frequency'],
            capabilities=data.get('capabilities', '')
        )


class WifiLogEntry:
    """
    A single stored observation: one network seen at one position of a floor plan.
    """
    def __init__(self, floor_plan_id, x, y, ssid, bssid, rssi, frequency, timestamp):
        self.floor_plan_id = floor_plan_id
        self.x = float(x)
        self.y = float(y)
        self.ssid = ssid
        self.bssid = bssid
        self.rssi = int(rssi)
        self.frequency = int(frequency)
        self.timestamp = int(timestamp)  # epoch milliseconds

    @classmethod
    def from_observation(cls, observation, floor_plan_id, x, y, timestamp):
        """Create a log entry recording an observation at a floor plan position."""
        return cls(
            floor_plan_id=floor_plan_id,
            x=x,
            y=y,
            ssid=observation.ssid,
            bssid=observation.bssid,
            rssi=observation.rssi,
            frequency=observation.frequency,
            timestamp=timestamp
        )

    def to_dict(self):
        return dict(self.__dict__)

    @classmethod
    def from_dict(cls, data):
        """Create WifiLogEntry instance from dictionary."""
        return cls(
            floor_plan_id=data['floor_plan_id'],
            x=data['x'],
            y=data['y'],
            ssid=data['ssid'],
            bssid=data['bssid'],
            rssi=data['rssi'],
            frequency=data['frequency'],
            timestamp=data['timestamp']
        )


def group_strongest_by_ssid(observations: Iterable[NetworkObservation]) -> List[NetworkObservation]:
    """
    Keep the strongest observation for each SSID.

    Returns:
        List of observations sorted by descending RSSI
    """
    strongest = {}
    for observation in observations:
        current = strongest.get(observation.ssid)
        if current is None or observation.rssi > current.rssi:
            strongest[observation.ssid] = observation
    return sorted(strongest.values(), key=lambda o: o.rssi, reverse=True)
