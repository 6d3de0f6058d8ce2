#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# -----------------------------------------------------------------------------
# WiFi Logger
#
# wifilogger/wifi_scanner.py
#
# Description:
# Scan provider interface used by the scan gate, plus the live Linux provider
# that drives NetworkManager's nmcli and parses its terse output into
# NetworkObservation objects.
# -----------------------------------------------------------------------------

import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Union

from .data_models import NetworkObservation


class WiFiScanError(Exception):
    """Exception raised for WiFi scanning errors."""
    pass


@dataclass(frozen=True)
class ScanCompletion:
    """Result of a scan that was started: fresh observations, or a failed update."""
    success: bool
    observations: List[NetworkObservation] = field(default_factory=list)


@dataclass(frozen=True)
class StartFailed:
    """The platform refused to start the scan."""
    reason: str = ""


TriggerResult = Union[ScanCompletion, StartFailed]


class ScanProvider(ABC):
    """
    Radio access used by the scan gate.
    Implementations own the platform calls and the cache of the last results.
    """

    @abstractmethod
    def is_scanning_enabled(self) -> bool:
        """Return True if the radio is on and scans can be requested."""
        raise NotImplementedError

    @abstractmethod
    def trigger_scan(self) -> TriggerResult:
        """Run one scan and block until the platform reports completion."""
        raise NotImplementedError

    @abstractmethod
    def get_cached_observations(self) -> List[NetworkObservation]:
        """Return the most recent results known to the platform (may be empty)."""
        raise NotImplementedError


class NmcliScanProvider(ScanProvider):
    """
    Live WiFi scan provider backed by NetworkManager's command line tool.

    Uses:
    - `nmcli radio wifi` to check whether the radio is enabled
    - `nmcli -t -f SSID,BSSID,SIGNAL,FREQ,SECURITY device wifi list --rescan yes`
      to scan
    """

    FIELDS = "SSID,BSSID,SIGNAL,FREQ,SECURITY"
    RADIO_QUERY_TIMEOUT = 2  # seconds; the scan gate holds its lock across this query

    def __init__(self, timeout: int = 30, nmcli_path: str = "nmcli",
                 runner=subprocess.run, debug_mode: bool = False):
        """
        Initialize the provider.

        Args:
            timeout: Maximum time to wait for a scan to complete (seconds)
            nmcli_path: nmcli executable name or path
            runner: Callable with the signature of subprocess.run
            debug_mode: Enable debug output
        """
        self.timeout = timeout
        self.nmcli_path = nmcli_path
        self.runner = runner
        self.debug_mode = debug_mode
        self._cached: List[NetworkObservation] = []

    def is_scanning_enabled(self) -> bool:
        try:
            result = self.runner(
                [self.nmcli_path, "radio", "wifi"],
                capture_output=True,
                text=True,
                timeout=self.RADIO_QUERY_TIMEOUT,
                check=True
            )
        except (subprocess.TimeoutExpired, subprocess.CalledProcessError, OSError) as e:
            print(f"Warning: Could not query WiFi radio state: {e}")
            return False
        state = result.stdout.strip().lower()
        if self.debug_mode:
            print(f"DEBUG: nmcli radio wifi reported '{state}'")
        return state == "enabled"

    def trigger_scan(self) -> TriggerResult:
        try:
            observations = self.scan()
        except OSError as e:
            return StartFailed(f"Could not run {self.nmcli_path}: {e}")
        except WiFiScanError as e:
            print(f"Warning: WiFi scan failed: {e}")
            return ScanCompletion(success=False)
        self._cached = observations
        return ScanCompletion(success=True, observations=observations)

    def get_cached_observations(self) -> List[NetworkObservation]:
        return list(self._cached)

    def scan(self) -> List[NetworkObservation]:
        """
        Perform a WiFi scan and return the detected networks.

        Returns:
            List of NetworkObservation objects, strongest first

        Raises:
            WiFiScanError: If scanning fails or times out
            OSError: If nmcli cannot be executed (missing or not permitted)
        """
        cmd = [self.nmcli_path, "-t", "-f", self.FIELDS, "device", "wifi", "list", "--rescan", "yes"]
        if self.debug_mode:
            print(f"DEBUG: Executing: {' '.join(cmd)}")
        try:
            result = self.runner(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=True
            )
        except subprocess.TimeoutExpired:
            raise WiFiScanError(f"WiFi scan timed out after {self.timeout} seconds")
        except subprocess.CalledProcessError as e:
            raise WiFiScanError(f"nmcli failed with exit code {e.returncode}: {e.stderr}")
        except OSError:
            raise
        except Exception as e:
            raise WiFiScanError(f"Unexpected error during WiFi scan: {e}")

        observations = parse_nmcli_output(result.stdout)
        if self.debug_mode:
            print(f"DEBUG: Scan completed. Found {len(observations)} networks.")
        return observations


def split_terse_line(line: str) -> List[str]:
    """
    Split one line of nmcli terse output into fields.
    Colons inside values are escaped as '\\:' and backslashes as '\\\\'.
    """
    fields = []
    current = []
    escaped = False
    for char in line:
        if escaped:
            current.append(char)
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == ":":
            fields.append("".join(current))
            current = []
        else:
            current.append(char)
    fields.append("".join(current))
    return fields


def signal_percent_to_dbm(percent: int) -> int:
    """Convert nmcli's 0-100 signal quality to an approximate RSSI in dBm."""
    percent = max(0, min(100, percent))
    return int(percent / 2 - 100)


def parse_nmcli_output(output: str) -> List[NetworkObservation]:
    """
    Parse `nmcli -t -f SSID,BSSID,SIGNAL,FREQ,SECURITY device wifi list` output.

    Args:
        output: Raw stdout from nmcli

    Returns:
        List of NetworkObservation objects sorted by descending RSSI
    """
    observations = []

    for line in output.splitlines():
        if not line.strip():
            continue
        fields = split_terse_line(line)
        if len(fields) < 5:
            print(f"Warning: Failed to parse nmcli line {line!r}: expected 5 fields, got {len(fields)}")
            continue
        ssid, bssid, signal, freq, security = fields[:5]
        try:
            rssi = signal_percent_to_dbm(int(signal))
            frequency = int(freq.split()[0]) if freq.strip() else 0
        except ValueError as e:
            print(f"Warning: Failed to parse nmcli line {line!r}: {e}")
            continue
        observations.append(NetworkObservation(
            ssid=ssid,
            bssid=bssid,
            rssi=rssi,
            frequency=frequency,
            capabilities=security
        ))

    observations.sort(key=lambda o: o.rssi, reverse=True)
    return observations
