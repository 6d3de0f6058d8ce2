#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# -----------------------------------------------------------------------------
# WiFi Logger
#
# main.py
#
# Description:
# Command line entry point for the WiFi Logger. Loads configuration, runs one
# rate-limited scan at a floor plan position, records the observations in the
# survey log and prints a summary of the resulting coverage heatmap.
#
# Usage: python main.py [x y [floor_plan_id]]
# -----------------------------------------------------------------------------

import os
import sys

from wifilogger.config_manager import ConfigManager, DEFAULT_CONFIG_DIR, SCAN_PROVIDERS
from wifilogger.heatmap_generator import HeatmapGenerator, HeatmapReady, HeatmapError, rssi_to_label
from wifilogger.scan_gate import ScanGate, Scanning, WaitingForCooldown, Throttled, Success, Error
from wifilogger.scan_session import ScanSession
from wifilogger.scan_simulator import SimulatedScanProvider
from wifilogger.survey_store import SurveyLog, SurveyStoreError
from wifilogger.wifi_scanner import NmcliScanProvider


def print_outcome(outcome):
    """Print a human-readable line for each scan state."""
    if isinstance(outcome, Scanning):
        print("Scanning...")
    elif isinstance(outcome, WaitingForCooldown):
        print(f"Please wait {outcome.remaining_ms / 1000:.0f} s before scanning again.")
    elif isinstance(outcome, Throttled):
        print(f"{outcome.message} Retry in {outcome.retry_after_ms / 1000:.0f} s.")
    elif isinstance(outcome, Success):
        source = "cached" if outcome.is_cached else "fresh"
        print(f"Scan completed ({source} results). Found {len(outcome.observations)} networks.")
        for observation in outcome.observations:
            print(f"  {observation.ssid:<24} {observation.bssid}  {observation.rssi:>4} dBm  "
                  f"{observation.frequency} MHz  {observation.signal_quality}")
    elif isinstance(outcome, Error):
        print(f"ERROR: {outcome.message}")


def parse_arguments(argv):
    """Return (x, y, floor_plan_id) from the command line, with defaults."""
    x, y, floor_plan_id = 50.0, 50.0, 1
    if len(argv) >= 2:
        x, y = float(argv[0]), float(argv[1])
    if len(argv) >= 3:
        floor_plan_id = int(argv[2])
    if not (0 <= x <= 100 and 0 <= y <= 100):
        raise ValueError(f"Position must be within 0-100 percent, got ({x}, {y})")
    return x, y, floor_plan_id


def main():
    """
    Main entry point for the WiFi Logger.
    """
    # Set WIFI_LOGGER_DEBUG=1 (or True/true) in your environment to enable debug logging.
    debug_mode = os.environ.get("WIFI_LOGGER_DEBUG", "0").lower() in ("1", "true")
    if debug_mode:
        print("DEBUG: WIFI_LOGGER_DEBUG environment variable detected. Debug mode is ON.")

    try:
        x, y, floor_plan_id = parse_arguments(sys.argv[1:])
    except ValueError as e:
        print(f"ERROR: {e}")
        print("Usage: python main.py [x y [floor_plan_id]]")
        return 2

    config_file_path = os.path.join(DEFAULT_CONFIG_DIR, "config.json")
    if debug_mode:
        print(f"DEBUG: Configuration file path: {config_file_path}")
    config_manager = ConfigManager(config_file_path)

    try:
        grid_width, grid_height, power = config_manager.interpolation_settings()
    except ValueError as e:
        print(f"ERROR: Invalid configuration: {e}")
        return 1

    survey_path = config_manager.get("survey_path")
    try:
        survey = SurveyLog.load(survey_path, debug_mode=debug_mode)
    except SurveyStoreError as e:
        print(f"ERROR: {e}")
        return 1

    provider_name = config_manager.get("scan_provider")
    if provider_name not in SCAN_PROVIDERS:
        print(f"Warning: Unknown scan provider '{provider_name}'. Using 'nmcli'.")
        provider_name = "nmcli"
    if provider_name == "simulated":
        provider = SimulatedScanProvider(debug_mode=debug_mode)
        provider.set_position(x, y)
    else:
        provider = NmcliScanProvider(timeout=int(config_manager.get("scan_timeout")), debug_mode=debug_mode)

    gate = ScanGate(provider, debug_mode=debug_mode)
    session = ScanSession(gate, sink=survey.add_entries, debug_mode=debug_mode)
    session.state_changed.connect(print_outcome)

    outcomes = session.start_scan()
    if outcomes and isinstance(outcomes[-1], Success):
        entries = session.save_all(floor_plan_id, x, y)
        try:
            survey.save(survey_path)
        except SurveyStoreError as e:
            print(f"ERROR: {e}")
            return 1
        print(f"Recorded {len(entries)} observations at ({x}, {y}) on floor plan {floor_plan_id}.")

    generator = HeatmapGenerator(grid_width, grid_height, power, debug_mode=debug_mode)
    state = generator.generate(survey, floor_plan_id)
    if isinstance(state, HeatmapReady):
        value = generator.value_at(state.grid, x, y)
        print(f"Heatmap: {len(state.samples)} positions, {len(state.available_ssids)} networks, "
              f"grid range {state.grid.min():.1f} to {state.grid.max():.1f} dBm.")
        print(f"Estimated signal at ({x}, {y}): {value:.1f} dBm ({rssi_to_label(value)})")
    elif isinstance(state, HeatmapError):
        print(f"ERROR: Could not build heatmap: {state.message}")
    else:
        print("Heatmap: no data recorded for this floor plan yet.")

    return 0


if __name__ == '__main__':
    sys.exit(main())
