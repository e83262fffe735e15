"""Tests for config loading and dotted-key access."""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from bomfeed.config.defaults import DEFAULT_AREAS, DEFAULT_FORECAST_FEEDS
from bomfeed.config.loader import default_config, get_config_value, load_config
from bomfeed.models.common import StateCode


class TestLoadConfig:
    def test_load_from_yaml(self, config_yaml_path: Path):
        config = load_config(config_yaml_path)
        assert config.feeds.base_url == "https://test-bom.example.com"
        assert config.feeds.chunk_size == 1024
        assert config.search.default_limit == 5
        assert config.logging.level == "DEBUG"

    def test_default_feeds_injected(self, config_yaml_path: Path):
        config = load_config(config_yaml_path)
        assert config.feeds.forecast_feeds[StateCode.VIC] == "IDV10753"
        assert config.feeds.observation_feeds[StateCode.ACT] == "IDN60910"
        assert config.feeds.search_order[0] == StateCode.VIC

    def test_default_areas_injected(self, config_yaml_path: Path):
        config = load_config(config_yaml_path)
        assert len(config.areas) == len(DEFAULT_AREAS)
        assert config.areas[0].area_code == "VIC_PT042"

    def test_explicit_values_not_overridden(self, tmp_path: Path):
        data = {
            "feeds": {"forecast_feeds": {"VIC": "IDV99999"}, "search_order": ["VIC"]},
            "areas": [{"name": "Test", "area_code": "VIC_PT001", "state": "VIC"}],
        }
        path = tmp_path / "custom.yaml"
        with open(path, "w") as f:
            yaml.dump(data, f)
        config = load_config(path)
        assert config.feeds.forecast_feeds == {StateCode.VIC: "IDV99999"}
        assert config.feeds.search_order == [StateCode.VIC]
        assert [a.area_code for a in config.areas] == ["VIC_PT001"]

    def test_empty_yaml_uses_defaults(self, tmp_path: Path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        config = load_config(path)
        assert len(config.feeds.forecast_feeds) == len(DEFAULT_FORECAST_FEEDS)
        assert len(config.areas) == len(DEFAULT_AREAS)

    def test_invalid_yaml_values(self, tmp_path: Path):
        path = tmp_path / "bad.yaml"
        path.write_text("feeds:\n  chunk_size: 1\n")
        with pytest.raises(ValidationError):
            load_config(path)

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_default_config_matches_empty_yaml(self, tmp_path: Path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path) == default_config()


class TestGetConfigValue:
    def test_nested(self):
        config = default_config()
        assert get_config_value(config, "feeds.chunk_size") == 16384

    def test_dict_key(self):
        config = default_config()
        assert get_config_value(config, "feeds.forecast_feeds.QLD") == "IDQ11295"

    def test_list_index(self):
        config = default_config()
        assert get_config_value(config, "areas.1.name") == "Sydney"

    def test_missing_key(self):
        with pytest.raises(KeyError):
            get_config_value(default_config(), "feeds.nope")
