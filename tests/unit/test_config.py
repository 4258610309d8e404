"""
Unit tests for configuration loading.
"""

import json

from project_pulse.utils.config import (
    SystemConfig, get_config, load_config_from_env, load_config_from_file, set_config
)


class TestConfig:
    """Test cases for configuration management."""

    def test_defaults(self):
        config = SystemConfig()

        assert config.log_level == "INFO"
        assert config.orchestration.analysis_timeout_seconds == 10.0
        assert config.orchestration.recommendation_limit == 5
        assert config.agents.target_utilization_percent == 80.0
        assert config.agents.hours_per_day == 8.0

    def test_load_from_env(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("JSON_LOGGING", "true")
        monkeypatch.setenv("ORCHESTRATION_TIMEOUT", "2.5")
        monkeypatch.setenv("HOURS_PER_DAY", "6")

        config = load_config_from_env()

        assert config.log_level == "DEBUG"
        assert config.json_logging is True
        assert config.orchestration.analysis_timeout_seconds == 2.5
        assert config.agents.hours_per_day == 6.0

    def test_load_from_missing_file(self, tmp_path):
        config = load_config_from_file(tmp_path / "absent.json")
        assert config == SystemConfig()

    def test_load_from_invalid_file_returns_defaults(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        assert load_config_from_file(path) == SystemConfig()

    def test_get_config_merges_env_over_file(self, tmp_path, monkeypatch):
        path = tmp_path / "project_pulse.json"
        path.write_text(json.dumps({
            "log_level": "WARNING",
            "orchestration": {"recommendation_limit": 3, "analysis_timeout_seconds": 20},
        }), encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("ORCHESTRATION_TIMEOUT", "4")
        monkeypatch.delenv("LOG_LEVEL", raising=False)

        config = get_config()

        assert config.log_level == "WARNING"
        assert config.orchestration.recommendation_limit == 3
        assert config.orchestration.analysis_timeout_seconds == 4.0

    def test_set_config(self):
        custom = SystemConfig(debug=True)
        set_config(custom)

        assert get_config() is custom
