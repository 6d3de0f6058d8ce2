import json

import pytest

from wifilogger.config_manager import DEFAULTS, ConfigManager


def test_missing_file_uses_defaults(tmp_path):
    config = ConfigManager(str(tmp_path / "config.json"))
    assert config.get("grid_width") == 100
    assert config.get("idw_power") == 2.0
    assert config.get("unknown", "fallback") == "fallback"
    assert config.interpolation_settings() == (100, 100, 2.0)


def test_set_persists_immediately(tmp_path):
    path = tmp_path / "sub" / "config.json"
    config = ConfigManager(str(path))
    config.set("grid_width", 50)

    assert json.loads(path.read_text(encoding="utf-8")) == {"grid_width": 50}
    assert ConfigManager(str(path)).get("grid_width") == 50


def test_malformed_file_gives_empty_config(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{broken", encoding="utf-8")
    config = ConfigManager(str(path))
    assert config.config == {}
    assert config.get_all_config() == DEFAULTS


@pytest.mark.parametrize("key,value", [("grid_width", 1), ("grid_height", 0), ("idw_power", 0)])
def test_invalid_interpolation_settings(tmp_path, key, value):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({key: value}), encoding="utf-8")
    with pytest.raises(ValueError):
        ConfigManager(str(path)).interpolation_settings()
