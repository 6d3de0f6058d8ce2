import pytest
from PyQt5.QtCore import QCoreApplication

from wifilogger.scan_gate import (
    Error, ScanGate, ScanOutcome, Scanning, Success, WaitingForCooldown, WIFI_DISABLED_MESSAGE,
)
from wifilogger.scan_session import Idle, ScanSession
from wifilogger.survey_store import SurveyLog
from wifilogger.wifi_scanner import ScanCompletion

T0 = 1_700_000_000_000


@pytest.fixture(scope="module", autouse=True)
def qt_app():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def survey():
    return SurveyLog()


@pytest.fixture
def session(provider, clock, survey):
    return ScanSession(ScanGate(provider, clock=clock), sink=survey.add_entries, clock=clock)


def test_signals_follow_outcome_order(session, provider, observations):
    provider.results.append(ScanCompletion(success=True, observations=observations))
    states, results = [], []
    session.state_changed.connect(states.append)
    session.results_changed.connect(results.append)

    assert isinstance(session.ui_state, Idle)
    outcomes = session.start_scan()

    assert states == outcomes
    assert states[0] == Scanning()
    assert isinstance(states[1], Success)
    assert results == [observations]
    assert session.results == observations
    assert session.ui_state == states[-1]
    assert session.last_scan_time is not None
    assert not session.is_busy


def test_cooldown_keeps_previous_results(session, provider, observations, clock):
    provider.results.append(ScanCompletion(success=True, observations=observations))
    session.start_scan()
    clock.advance(5000)

    outcomes = session.start_scan()

    assert outcomes == [WaitingForCooldown(25_000)]
    assert session.ui_state == WaitingForCooldown(25_000)
    assert session.results == observations


def test_disabled_radio_surfaces_error(session, provider):
    provider.enabled = False
    assert session.start_scan() == [Error(WIFI_DISABLED_MESSAGE)]
    assert session.results == []


def test_busy_session_ignores_new_request(session, provider):
    session.is_busy = True
    assert session.start_scan() == []
    assert provider.trigger_count == 0


def test_save_all_sends_entries_to_sink(session, provider, observations, survey, clock):
    provider.results.append(ScanCompletion(success=True, observations=observations))
    session.start_scan()

    entries = session.save_all(3, 42.5, 17.0)

    assert len(entries) == 3
    assert survey.entries == entries
    assert {e.timestamp for e in entries} == {clock.now}
    assert all((e.floor_plan_id, e.x, e.y) == (3, 42.5, 17.0) for e in entries)
    assert [e.bssid for e in entries] == [o.bssid for o in observations]


def test_save_selected_records_selection_and_clears_it(session, provider, observations, survey):
    provider.results.append(ScanCompletion(success=True, observations=observations))
    session.start_scan()

    session.toggle_selection(observations[2])
    session.toggle_selection(observations[0])
    session.toggle_selection(observations[2])
    entries = session.save_selected(1, 10, 10)

    assert [e.bssid for e in entries] == [observations[0].bssid]
    assert survey.entries == entries
    assert session.selected == set()


def test_select_all_and_clear(session, provider, observations):
    provider.results.append(ScanCompletion(success=True, observations=observations))
    session.start_scan()
    session.select_all()
    assert session.selected == set(observations)
    session.clear_selection()
    assert session.selected == set()


def test_save_with_nothing_selected_skips_sink(session, survey):
    assert session.save_selected(1, 0, 0) == []
    assert survey.entries == []


def test_load_cached_results(session, provider, observations):
    assert session.load_cached_results() is False

    provider.cached = observations
    states = []
    session.state_changed.connect(states.append)

    assert session.load_cached_results() is True
    assert states == [Success(tuple(observations), is_cached=True)]
    assert session.results == observations
    assert provider.trigger_count == 0


def test_idle_is_session_state_not_gate_outcome(session):
    assert session.ui_state == Idle()
    assert not isinstance(session.ui_state, ScanOutcome)
