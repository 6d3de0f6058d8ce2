#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# -----------------------------------------------------------------------------
# WiFi Logger
#
# wifilogger/scan_session.py
#
# Description:
# Scan session object for the logging screen. Drives one scan gate request at
# a time, publishes every outcome through Qt signals, keeps the latest results
# and the user's network selection, and hands recorded observations to a
# persistence sink.
# -----------------------------------------------------------------------------

from dataclasses import dataclass
from typing import Callable, List, Optional, Union

from PyQt5.QtCore import QObject, pyqtSignal

from .data_models import NetworkObservation, WifiLogEntry
from .scan_gate import ScanGate, ScanOutcome, Success, system_clock_ms


@dataclass(frozen=True)
class Idle:
    """Session state before any scan has been requested. Not a gate outcome."""
    pass


SessionState = Union[Idle, ScanOutcome]


class ScanSession(QObject):
    """
    Runs scan requests against a ScanGate and tracks their results.
    """

    # Signals
    state_changed = pyqtSignal(object)  # Emitted with each ScanOutcome, in order
    results_changed = pyqtSignal(object)  # Emitted with the new list of NetworkObservation

    def __init__(self, gate: ScanGate,
                 sink: Optional[Callable[[List[WifiLogEntry]], None]] = None,
                 clock: Optional[Callable[[], int]] = None,
                 debug_mode: bool = False, parent=None):
        """
        Initialize the scan session.

        Args:
            gate: Scan gate owned by this session
            sink: Callable receiving log entries to persist (e.g. SurveyLog.add_entries)
            clock: Callable returning the current time in epoch milliseconds
            debug_mode: Enable debug output
            parent: Parent QObject
        """
        super().__init__(parent)
        self.gate = gate
        self.sink = sink
        self.clock = clock or system_clock_ms
        self.debug_mode = debug_mode

        self.ui_state: SessionState = Idle()
        self.results: List[NetworkObservation] = []
        self.selected = set()
        self.last_scan_time: Optional[int] = None
        self.is_busy = False

    def start_scan(self, now: Optional[int] = None) -> List[ScanOutcome]:
        """
        Request a scan and follow it to completion.

        Args:
            now: Request time in epoch milliseconds (defaults to the clock)

        Returns:
            The outcomes emitted for this request, in order (empty if a request
            was already in flight)
        """
        if self.is_busy:
            print("Warning: A scan is already in progress. Ignoring new request.")
            return []

        if now is None:
            now = self.clock()

        self.is_busy = True
        outcomes = []
        try:
            for outcome in self.gate.request_scan(now):
                outcomes.append(outcome)
                self._apply_outcome(outcome)
        finally:
            self.is_busy = False
        return outcomes

    def load_cached_results(self) -> bool:
        """
        Show the provider's cached results without requesting a scan.

        Returns:
            True if cached results were available
        """
        cached = self.gate.provider.get_cached_observations()
        if not cached:
            return False
        self._apply_outcome(Success(tuple(cached), is_cached=True))
        return True

    def _apply_outcome(self, outcome: ScanOutcome):
        if isinstance(outcome, Success):
            self.results = list(outcome.observations)
            self.last_scan_time = self.clock()
            self.results_changed.emit(list(self.results))
        self.ui_state = outcome
        if self.debug_mode:
            print(f"DEBUG: Scan session state -> {outcome}")
        self.state_changed.emit(outcome)

    def toggle_selection(self, observation: NetworkObservation):
        if observation in self.selected:
            self.selected.remove(observation)
        else:
            self.selected.add(observation)

    def select_all(self):
        self.selected = set(self.results)

    def clear_selection(self):
        self.selected = set()

    def save_selected(self, floor_plan_id, x: float, y: float) -> List[WifiLogEntry]:
        """
        Record the selected networks at a floor plan position, then clear the selection.

        Returns:
            The log entries passed to the sink
        """
        selected = sorted(self.selected, key=lambda o: o.rssi, reverse=True)
        entries = self._record(selected, floor_plan_id, x, y)
        self.clear_selection()
        return entries

    def save_all(self, floor_plan_id, x: float, y: float) -> List[WifiLogEntry]:
        """
        Record every network from the latest results at a floor plan position.

        Returns:
            The log entries passed to the sink
        """
        return self._record(self.results, floor_plan_id, x, y)

    def _record(self, observations, floor_plan_id, x, y) -> List[WifiLogEntry]:
        timestamp = self.clock()
        entries = [
            WifiLogEntry.from_observation(observation, floor_plan_id, x, y, timestamp)
            for observation in observations
        ]
        if self.sink is not None and entries:
            self.sink(entries)
        if self.debug_mode:
            print(f"DEBUG: Recorded {len(entries)} networks at ({x}, {y}) on floor plan {floor_plan_id}")
        return entries
