import json

import pytest

from wifilogger.data_models import FrequencyBand, WifiLogEntry
from wifilogger.survey_store import SurveyLog, SurveyStoreError


def make_entries():
    return [
        WifiLogEntry(1, 20.0, 30.0, "Office", "aa:01", -55, 2412, 1000),
        WifiLogEntry(1, 20.0, 30.0, "Office", "aa:02", -65, 5180, 1000),
        WifiLogEntry(1, 70.0, 80.0, "Guest", "bb:01", -75, 2462, 2000),
        WifiLogEntry(2, 50.0, 50.0, "Lab", "cc:01", -45, 5500, 3000),
    ]


def test_save_and_load(tmp_path):
    path = tmp_path / "nested" / "survey.json"
    SurveyLog(make_entries()).save(str(path))

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["version"] == 1
    assert len(data["entries"]) == 4

    loaded = SurveyLog.load(str(path))
    assert [e.to_dict() for e in loaded.entries] == [e.to_dict() for e in make_entries()]


def test_load_missing_file_gives_empty_log(tmp_path):
    survey = SurveyLog.load(str(tmp_path / "absent.json"))
    assert survey.entries == []


@pytest.mark.parametrize("content", ["{not json", '{"version": 1}', '{"entries": [{"x": 1}]}'])
def test_load_malformed_file_raises(tmp_path, content):
    path = tmp_path / "survey.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(SurveyStoreError):
        SurveyLog.load(str(path))


def test_queries_are_scoped_to_floor_plan():
    survey = SurveyLog(make_entries())

    assert [e.timestamp for e in survey.entries_for(1)] == [2000, 1000, 1000]
    assert survey.distinct_ssids(1) == ["Guest", "Office"]
    assert survey.distinct_ssids(2) == ["Lab"]

    samples = survey.heatmap_samples(1, band=FrequencyBand.FREQ_2_4GHZ)
    assert [(s.x, s.y, s.avg_rssi) for s in samples] == [(20.0, 30.0, -55), (70.0, 80.0, -75)]


def test_add_entries_and_clear_floor_plan():
    survey = SurveyLog()
    survey.add_entries(make_entries())
    assert len(survey.entries) == 4
    assert survey.clear_floor_plan(1) == 3
    assert [e.floor_plan_id for e in survey.entries] == [2]
