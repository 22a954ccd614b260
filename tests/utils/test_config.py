"""
Unit tests for config.py (monitor settings, INI/env loading, channels.yaml overrides)
"""

import tempfile
from pathlib import Path

import pytest

from channel_monitor.core.exceptions import ChannelMonitorError, ConfigurationError
from channel_monitor.utils.config import (
    ChannelSettings,
    ConfigManager,
    LoggingConfig,
    MonitorConfig,
)

ENV_NAMES = (
    "CHANNEL_MONITOR_WINDOW_SIZE",
    "CHANNEL_MONITOR_PERIOD_UNIT",
    "CHANNEL_MONITOR_AVERAGING_PERIOD",
    "CHANNEL_MONITOR_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Ensure no override variables leak in from the environment"""
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config_dir():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


class TestMonitorConfig:
    """Test MonitorConfig validation"""

    def test_defaults(self):
        config = MonitorConfig()

        assert config.window_size == 10
        assert config.period_unit == 1.0
        assert config.averaging_period == 60.0

    def test_invalid_window_size(self):
        with pytest.raises(ConfigurationError) as exc_info:
            MonitorConfig(window_size=0)

        assert "Window size must be >= 1" in str(exc_info.value)

    def test_invalid_period_unit(self):
        with pytest.raises(ConfigurationError, match="Period unit"):
            MonitorConfig(period_unit=0)

    def test_invalid_averaging_period(self):
        with pytest.raises(ConfigurationError, match="Averaging period"):
            MonitorConfig(averaging_period=-1)

    def test_configuration_error_is_monitor_error(self):
        """Verify exception hierarchy"""
        assert issubclass(ConfigurationError, ChannelMonitorError)


class TestLoggingConfig:
    """Test LoggingConfig validation"""

    def test_valid_level_case_insensitive(self):
        assert LoggingConfig(log_level="debug").log_level == "debug"

    def test_invalid_level(self):
        with pytest.raises(ConfigurationError, match="Invalid log level"):
            LoggingConfig(log_level="VERBOSE")


class TestChannelSettings:
    """Test pydantic schema for channel override blocks"""

    def test_overrides_only_set_keys(self):
        settings = ChannelSettings(window_size=5)

        assert settings.overrides() == {"window_size": 5}

    def test_rejects_non_positive(self):
        with pytest.raises(ValueError):
            ChannelSettings(period_unit=0)


class TestConfigManager:
    """Test file and environment loading"""

    def test_missing_files_use_defaults(self, config_dir):
        manager = ConfigManager(config_dir=str(config_dir))

        assert manager.monitor_config == MonitorConfig()
        assert manager.logging_config == LoggingConfig()
        assert manager.configured_channels == []
        assert manager.get_channel_config("anything") == MonitorConfig()

    def test_ini_values(self, config_dir):
        (config_dir / "monitor_config.ini").write_text(
            "[monitor]\n"
            "window_size = 30\n"
            "period_unit = 60\n"
            "averaging_period = 600\n"
            "\n"
            "[logging]\n"
            "log_level = DEBUG\n"
            "log_dir = /tmp/monitor-logs\n"
        )

        manager = ConfigManager(config_dir=str(config_dir))

        assert manager.monitor_config == MonitorConfig(
            window_size=30, period_unit=60.0, averaging_period=600.0
        )
        assert manager.logging_config.log_level == "DEBUG"
        assert manager.logging_config.log_dir == "/tmp/monitor-logs"

    def test_env_overrides_ini(self, config_dir, monkeypatch):
        (config_dir / "monitor_config.ini").write_text("[monitor]\nwindow_size = 30\n")
        monkeypatch.setenv("CHANNEL_MONITOR_WINDOW_SIZE", "5")
        monkeypatch.setenv("CHANNEL_MONITOR_LOG_LEVEL", "WARNING")

        manager = ConfigManager(config_dir=str(config_dir))

        assert manager.monitor_config.window_size == 5
        assert manager.logging_config.log_level == "WARNING"

    def test_invalid_env_value(self, config_dir, monkeypatch):
        monkeypatch.setenv("CHANNEL_MONITOR_PERIOD_UNIT", "fast")

        with pytest.raises(ConfigurationError, match="CHANNEL_MONITOR_PERIOD_UNIT"):
            ConfigManager(config_dir=str(config_dir))

    def test_invalid_ini_value(self, config_dir):
        (config_dir / "monitor_config.ini").write_text("[monitor]\nwindow_size = ten\n")

        with pytest.raises(ConfigurationError, match="monitor_config.ini"):
            ConfigManager(config_dir=str(config_dir))

    def test_ini_value_out_of_range(self, config_dir):
        (config_dir / "monitor_config.ini").write_text("[monitor]\naveraging_period = 0\n")

        with pytest.raises(ConfigurationError):
            ConfigManager(config_dir=str(config_dir))


class TestChannelOverrides:
    """Test channels.yaml resolution"""

    def test_resolution_order(self, config_dir):
        """Verify channel block > YAML defaults > INI"""
        (config_dir / "monitor_config.ini").write_text(
            "[monitor]\nwindow_size = 30\nperiod_unit = 1\naveraging_period = 120\n"
        )
        (config_dir / "channels.yaml").write_text(
            "defaults:\n"
            "  averaging_period: 300\n"
            "channels:\n"
            "  fills:\n"
            "    period_unit: 60\n"
            "  audit: {}\n",
            encoding="utf-8",
        )

        manager = ConfigManager(config_dir=str(config_dir))

        fills = manager.get_channel_config("fills")
        assert fills == MonitorConfig(window_size=30, period_unit=60.0, averaging_period=300.0)

        other = manager.get_channel_config("orders")
        assert other == MonitorConfig(window_size=30, period_unit=1.0, averaging_period=300.0)

        assert sorted(manager.configured_channels) == ["audit", "fills"]

    def test_unknown_key_rejected(self, config_dir):
        (config_dir / "channels.yaml").write_text(
            "channels:\n  orders:\n    windowsize: 10\n", encoding="utf-8"
        )

        with pytest.raises(ConfigurationError, match="channels.orders"):
            ConfigManager(config_dir=str(config_dir))

    def test_invalid_value_rejected(self, config_dir):
        (config_dir / "channels.yaml").write_text(
            "defaults:\n  window_size: 0\n", encoding="utf-8"
        )

        with pytest.raises(ConfigurationError, match="defaults"):
            ConfigManager(config_dir=str(config_dir))

    def test_malformed_yaml(self, config_dir):
        (config_dir / "channels.yaml").write_text("channels: [unclosed\n", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="Failed to parse"):
            ConfigManager(config_dir=str(config_dir))

    def test_channels_must_be_mapping(self, config_dir):
        (config_dir / "channels.yaml").write_text("channels:\n  - orders\n", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="must be a mapping"):
            ConfigManager(config_dir=str(config_dir))

    def test_empty_yaml_file(self, config_dir):
        (config_dir / "channels.yaml").write_text("", encoding="utf-8")

        manager = ConfigManager(config_dir=str(config_dir))

        assert manager.get_channel_config("orders") == MonitorConfig()
