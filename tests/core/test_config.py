"""
Tests for configuration management.

Covers TOML loading, environment overrides and validation of the
recorder configuration.
"""

import pytest

from quoterecorder.core.config import (
    ConfigManager,
    FetchConfig,
    RecorderConfig,
    load_config_from_env,
)
from quoterecorder.core.exceptions import ConfigurationError

ENV_KEYS = (
    "QUOTERECORDER_CHART_URL",
    "QUOTERECORDER_RETRY_TIMES",
    "QUOTERECORDER_RETRY_INTERVAL_SECONDS",
    "QUOTERECORDER_FETCH_TIMEOUT",
    "QUOTERECORDER_DATABASE",
    "QUOTERECORDER_DATA_DIR",
    "QUOTERECORDER_CACHE_RAW_FILES",
    "QUOTERECORDER_LOGGING_LEVEL",
    "QUOTERECORDER_LOGGING_FILE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


class TestDefaults:
    """Test default configuration values."""

    def test_default_config(self):
        config = RecorderConfig()

        assert config.fetch.retry_times == 5
        assert config.fetch.retry_interval_seconds == 10.0
        assert config.fetch.chart_url.endswith("/v7/finance/chart")
        assert config.storage.cache_raw_files is False
        assert config.markets["america"] == "America/New_York"

    def test_fetch_config_validation(self):
        with pytest.raises(ConfigurationError):
            FetchConfig(retry_times=0)
        with pytest.raises(ConfigurationError):
            FetchConfig(retry_interval_seconds=-1)
        with pytest.raises(ConfigurationError):
            FetchConfig(timeout=0)

    def test_round_trip_dict(self):
        config = RecorderConfig.from_dict({"fetch": {"retry_times": 2}, "markets": {"Tokyo": "Asia/Tokyo"}})

        restored = RecorderConfig.from_dict(config.to_dict())

        assert restored == config
        assert restored.markets["tokyo"] == "Asia/Tokyo"
        assert restored.markets["china"] == "Asia/Shanghai"

    def test_unknown_key_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            RecorderConfig.from_dict({"fetch": {"retries": 3}})

        assert "unknown configuration key in [fetch]: retries" in exc_info.value.message

    def test_wrong_value_type_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            RecorderConfig.from_dict({"fetch": {"retry_times": "3"}})

        assert exc_info.value.message == "fetch.retry_times must be int, got str"

    def test_bool_is_not_a_number(self):
        with pytest.raises(ConfigurationError, match="storage.queue_size must be int"):
            RecorderConfig.from_dict({"storage": {"queue_size": True}})

    def test_int_accepted_for_float_field(self):
        config = RecorderConfig.from_dict({"fetch": {"retry_interval_seconds": 0}})

        assert config.fetch.retry_interval_seconds == 0

    def test_section_must_be_table(self):
        with pytest.raises(ConfigurationError, match=r"\[storage\] must be a table"):
            RecorderConfig.from_dict({"storage": "quotes.duckdb"})

    def test_unknown_market_timezone_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            RecorderConfig.from_dict({"markets": {"mars": "Mars/Olympus_Mons"}})

        assert "unknown timezone 'Mars/Olympus_Mons'" in exc_info.value.message
        assert exc_info.value.details == {"market": "mars"}


class TestConfigManager:
    """Test loading configuration from files and environment."""

    def test_missing_file_uses_defaults(self, tmp_path):
        manager = ConfigManager(tmp_path / "absent.toml")

        assert manager.get_config() == RecorderConfig()

    def test_load_toml(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text(
            '[fetch]\nretry_times = 2\nretry_interval_seconds = 0.5\n\n'
            '[storage]\ndatabase = "quotes.duckdb"\ncache_raw_files = true\n\n'
            '[logging]\nlevel = "DEBUG"\n',
            encoding="utf-8",
        )

        config = ConfigManager(path).get_config()

        assert config.fetch.retry_times == 2
        assert config.fetch.retry_interval_seconds == 0.5
        assert config.storage.database == "quotes.duckdb"
        assert config.storage.cache_raw_files is True
        assert config.logging.level == "DEBUG"

    def test_invalid_toml_raises(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("[fetch\nretry_times = ", encoding="utf-8")

        with pytest.raises(ConfigurationError) as exc_info:
            ConfigManager(path)

        assert exc_info.value.details["path"] == str(path)

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "config.toml"
        path.write_text("[fetch]\nretry_times = 2\n", encoding="utf-8")
        monkeypatch.setenv("QUOTERECORDER_RETRY_TIMES", "7")
        monkeypatch.setenv("QUOTERECORDER_CACHE_RAW_FILES", "TRUE")
        monkeypatch.setenv("QUOTERECORDER_LOGGING_LEVEL", "WARNING")

        config = ConfigManager(path).get_config()

        assert config.fetch.retry_times == 7
        assert config.storage.cache_raw_files is True
        assert config.logging.level == "WARNING"

    def test_env_ignored_when_disabled(self, tmp_path, monkeypatch):
        monkeypatch.setenv("QUOTERECORDER_RETRY_TIMES", "7")

        config = ConfigManager(tmp_path / "absent.toml", use_env=False).get_config()

        assert config.fetch.retry_times == 5


def test_load_config_from_env(monkeypatch):
    monkeypatch.setenv("QUOTERECORDER_DATABASE", "/tmp/q.duckdb")
    monkeypatch.setenv("QUOTERECORDER_FETCH_TIMEOUT", "12.5")

    assert load_config_from_env() == {
        "fetch": {"timeout": 12.5},
        "storage": {"database": "/tmp/q.duckdb"},
    }
