#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# -----------------------------------------------------------------------------
# WiFi Logger
#
# wifilogger/scan_gate.py
#
# Description:
# Scan admission and rate control. Decides whether a scan request may start,
# must wait for the cooldown, or is throttled, and turns the provider's
# completion into a sequence of scan outcomes.
#
# Platforms throttle WiFi scans (a foreground app may scan 4 times in
# 2 minutes), so the gate enforces both a minimum interval between scans
# and a maximum number of scans per window.
# -----------------------------------------------------------------------------

import threading
import time
from dataclasses import dataclass
from typing import Callable, Iterator, Optional, Tuple

from .data_models import NetworkObservation
from .wifi_scanner import ScanCompletion, ScanProvider

MIN_SCAN_INTERVAL_MS = 30_000
THROTTLE_WINDOW_MS = 120_000
THROTTLE_WARNING_AFTER_SCANS = 4

THROTTLED_MESSAGE = "Too many scan requests. Scans are limited to 4 per 2 minutes."
WIFI_DISABLED_MESSAGE = "WiFi is disabled. Please enable WiFi to scan."
SCAN_FAILED_MESSAGE = "Scan failed. Possible throttling by the system."
START_FAILED_MESSAGE = "Could not start scan. System may be throttling requests."


class ScanOutcome:
    """Base class of every state emitted for a scan request."""
    pass


@dataclass(frozen=True)
class Scanning(ScanOutcome):
    pass


@dataclass(frozen=True)
class WaitingForCooldown(ScanOutcome):
    remaining_ms: int


@dataclass(frozen=True)
class Throttled(ScanOutcome):
    message: str
    retry_after_ms: int


@dataclass(frozen=True)
class Success(ScanOutcome):
    observations: Tuple[NetworkObservation, ...]
    is_cached: bool = False


@dataclass(frozen=True)
class Error(ScanOutcome):
    message: str


def system_clock_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


class ScanGateState:
    """
    Throttle bookkeeping for one scanning session.
    Timestamps are epoch milliseconds; None means "never".
    """
    def __init__(self):
        self.last_scan_timestamp: Optional[int] = None
        self.scan_count_in_window = 0
        self.window_start_timestamp: Optional[int] = None

    def to_dict(self):
        return dict(self.__dict__)


class ScanGate:
    """
    Rate controller wrapping a scan provider.

    A request is checked, in order, against the throttle window, the cooldown
    and the radio state. Counters are updated when a scan starts, never when it
    completes, and are not rolled back if the platform then refuses the scan.
    """

    def __init__(self, provider: ScanProvider, clock: Optional[Callable[[], int]] = None,
                 debug_mode: bool = False):
        """
        Initialize the gate.

        Args:
            provider: Radio access used to check state, scan and read cached results
            clock: Callable returning the current time in epoch milliseconds
            debug_mode: Enable debug output
        """
        self.provider = provider
        self.clock = clock or system_clock_ms
        self.debug_mode = debug_mode
        self.state = ScanGateState()
        self._lock = threading.Lock()

    def request_scan(self, now: Optional[int] = None) -> Iterator[ScanOutcome]:
        """
        Request a new scan.

        The admission decision and the counter update happen before this method
        returns. The returned iterator yields the outcomes in order: a single
        refusal (WaitingForCooldown, Throttled or Error), or Scanning followed by
        the final Success or Error once the provider completes.

        The provider scan runs when the item after Scanning is requested, so an
        admitted stream must be consumed to the end; a stream abandoned after
        Scanning has already used its cooldown and quota slot without scanning.
        ScanSession drains every stream it requests.

        Args:
            now: Request time in epoch milliseconds (defaults to the gate's clock)

        Returns:
            Iterator of ScanOutcome values
        """
        if now is None:
            now = self.clock()

        with self._lock:
            refusal = self._admit(now)
            if refusal is None:
                self._record_attempt(now)

        if refusal is not None:
            if self.debug_mode:
                print(f"DEBUG: Scan request at {now} refused: {refusal}")
            return iter((refusal,))

        if self.debug_mode:
            print(f"DEBUG: Scan request at {now} admitted. Gate state: {self.state.to_dict()}")
        return self._run_scan()

    def time_until_next_scan(self, now: Optional[int] = None) -> int:
        """Milliseconds until the cooldown allows another scan (0 if allowed now)."""
        if now is None:
            now = self.clock()
        with self._lock:
            return max(0, self._cooldown_remaining(now))

    def is_throttled(self, now: Optional[int] = None) -> bool:
        """Check whether the scan count for the current window is exhausted."""
        if now is None:
            now = self.clock()
        with self._lock:
            self._roll_window(now)
            return self.state.scan_count_in_window >= THROTTLE_WARNING_AFTER_SCANS

    def _admit(self, now: int) -> Optional[ScanOutcome]:
        """Return the refusal for a request at `now`, or None if the scan may start."""
        self._roll_window(now)

        if self.state.scan_count_in_window >= THROTTLE_WARNING_AFTER_SCANS:
            elapsed_in_window = now - self.state.window_start_timestamp
            return Throttled(THROTTLED_MESSAGE, THROTTLE_WINDOW_MS - elapsed_in_window)

        remaining = self._cooldown_remaining(now)
        if remaining > 0:
            return WaitingForCooldown(remaining)

        # Runs under the lock so no second request can be admitted meanwhile
        try:
            enabled = self.provider.is_scanning_enabled()
        except Exception as e:
            print(f"Warning: Could not check WiFi state: {e}")
            enabled = False
        if not enabled:
            return Error(WIFI_DISABLED_MESSAGE)

        return None

    def _roll_window(self, now: int):
        # A window is over once its full length has elapsed
        start = self.state.window_start_timestamp
        if start is None or now - start >= THROTTLE_WINDOW_MS:
            self.state.scan_count_in_window = 0
            self.state.window_start_timestamp = now

    def _cooldown_remaining(self, now: int) -> int:
        if self.state.last_scan_timestamp is None:
            return 0
        return MIN_SCAN_INTERVAL_MS - (now - self.state.last_scan_timestamp)

    def _record_attempt(self, now: int):
        self.state.scan_count_in_window += 1
        if self.state.scan_count_in_window == 1:
            self.state.window_start_timestamp = now
        self.state.last_scan_timestamp = now

    def _run_scan(self) -> Iterator[ScanOutcome]:
        yield Scanning()

        try:
            result = self.provider.trigger_scan()
        except Exception as e:
            print(f"Warning: Scan could not be started: {e}")
            yield self._fallback(START_FAILED_MESSAGE)
            return

        if isinstance(result, ScanCompletion):
            if result.success:
                yield Success(tuple(result.observations), is_cached=False)
            else:
                yield self._fallback(SCAN_FAILED_MESSAGE)
        else:
            if self.debug_mode:
                print(f"DEBUG: Platform refused to start scan: {result.reason}")
            yield self._fallback(START_FAILED_MESSAGE)

    def _fallback(self, message: str) -> ScanOutcome:
        """Serve cached results after a failed scan, or report the failure."""
        try:
            cached = self.provider.get_cached_observations()
        except Exception as e:
            print(f"Warning: Could not read cached scan results: {e}")
            cached = []
        if cached:
            if self.debug_mode:
                print(f"DEBUG: Scan failed, using {len(cached)} cached results")
            return Success(tuple(cached), is_cached=True)
        return Error(message)
