#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# -----------------------------------------------------------------------------
# WiFi Logger
#
# wifilogger/survey_store.py
#
# Description:
# Survey log storage. Keeps the raw WiFi log entries recorded on each floor
# plan, answers the aggregated heatmap queries and saves/loads the log as a
# JSON document.
# -----------------------------------------------------------------------------

import json
import os
from typing import Iterable, List, Optional

from .data_models import FrequencyBand, SignalSample, WifiLogEntry
from .heatmap_generator import aggregate_samples

SURVEY_FORMAT_VERSION = 1


class SurveyStoreError(Exception):
    """Exception raised when a survey file cannot be read or written."""
    pass


class SurveyLog:
    """
    In-memory collection of WifiLogEntry records, grouped by floor plan id.

    The JSON file layout is:
    {
        "version": 1,
        "entries": [ {WifiLogEntry.to_dict()}, ... ]
    }
    """

    def __init__(self, entries: Optional[Iterable[WifiLogEntry]] = None, debug_mode: bool = False):
        self.entries: List[WifiLogEntry] = list(entries) if entries is not None else []
        self.debug_mode = debug_mode

    def add_entries(self, entries: Iterable[WifiLogEntry]):
        """Append log entries (the sink used by a scan session)."""
        new_entries = list(entries)
        self.entries.extend(new_entries)
        if self.debug_mode:
            print(f"DEBUG: Stored {len(new_entries)} log entries ({len(self.entries)} total)")

    def entries_for(self, floor_plan_id) -> List[WifiLogEntry]:
        """All entries for a floor plan, newest first."""
        entries = [e for e in self.entries if e.floor_plan_id == floor_plan_id]
        return sorted(entries, key=lambda e: e.timestamp, reverse=True)

    def heatmap_samples(self, floor_plan_id, ssid: Optional[str] = None,
                        band: FrequencyBand = FrequencyBand.ALL) -> List[SignalSample]:
        """Aggregated samples for a floor plan, optionally filtered by SSID and band."""
        return aggregate_samples(self.entries_for(floor_plan_id), ssid=ssid, band=band)

    def distinct_ssids(self, floor_plan_id) -> List[str]:
        """Sorted list of network names recorded on a floor plan."""
        return sorted({e.ssid for e in self.entries if e.floor_plan_id == floor_plan_id})

    def clear_floor_plan(self, floor_plan_id) -> int:
        """Remove every entry of a floor plan and return how many were removed."""
        before = len(self.entries)
        self.entries = [e for e in self.entries if e.floor_plan_id != floor_plan_id]
        return before - len(self.entries)

    def to_dict(self):
        return {
            'version': SURVEY_FORMAT_VERSION,
            'entries': [entry.to_dict() for entry in self.entries]
        }

    @classmethod
    def from_dict(cls, data, debug_mode: bool = False):
        """Create SurveyLog instance from dictionary."""
        entries = [WifiLogEntry.from_dict(entry_data) for entry_data in data['entries']]
        return cls(entries, debug_mode=debug_mode)

    def save(self, file_path: str):
        """
        Save the survey log to a JSON file, creating its directory if needed.

        Raises:
            SurveyStoreError: If the file cannot be written
        """
        directory = os.path.dirname(file_path)
        try:
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(file_path, 'w', encoding='utf-8') as f:
                json.dump(self.to_dict(), f, indent=4)
        except OSError as e:
            raise SurveyStoreError(f"Could not save survey to '{file_path}': {e}") from e
        if self.debug_mode:
            print(f"DEBUG: Saved {len(self.entries)} log entries to {file_path}")

    @classmethod
    def load(cls, file_path: str, debug_mode: bool = False) -> "SurveyLog":
        """
        Load a survey log from a JSON file. A missing file yields an empty log.

        Raises:
            SurveyStoreError: If the file is unreadable or malformed
        """
        if not os.path.exists(file_path):
            print(f"Info: Survey file '{file_path}' not found. Starting with an empty survey.")
            return cls(debug_mode=debug_mode)

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            survey = cls.from_dict(data, debug_mode=debug_mode)
        except json.JSONDecodeError as e:
            raise SurveyStoreError(f"Survey file '{file_path}' is malformed: {e}") from e
        except (KeyError, TypeError, ValueError) as e:
            raise SurveyStoreError(f"Survey file '{file_path}' has unexpected content: {e}") from e
        except OSError as e:
            raise SurveyStoreError(f"Could not read survey file '{file_path}': {e}") from e

        if debug_mode:
            print(f"DEBUG: Loaded {len(survey.entries)} log entries from {file_path}")
        return survey
