"""
Configuration management with INI files, YAML channel overrides and
environment overrides
"""

import logging
import os
from configparser import ConfigParser
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from channel_monitor.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

ONE_SECOND_SECONDS = 1.0
ONE_MINUTE_SECONDS = 60.0
DEFAULT_MOVING_AVERAGE_WINDOW = 10

# Environment variables override INI values
ENV_WINDOW_SIZE = "CHANNEL_MONITOR_WINDOW_SIZE"
ENV_PERIOD_UNIT = "CHANNEL_MONITOR_PERIOD_UNIT"
ENV_AVERAGING_PERIOD = "CHANNEL_MONITOR_AVERAGING_PERIOD"
ENV_LOG_LEVEL = "CHANNEL_MONITOR_LOG_LEVEL"


@dataclass
class MonitorConfig:
    """Decay settings for one channel's histories"""
    window_size: int = DEFAULT_MOVING_AVERAGE_WINDOW
    period_unit: float = ONE_SECOND_SECONDS
    averaging_period: float = ONE_MINUTE_SECONDS

    def __post_init__(self):
        if self.window_size < 1:
            raise ConfigurationError(f"Window size must be >= 1, got {self.window_size}")

        if self.period_unit <= 0:
            raise ConfigurationError(f"Period unit must be positive, got {self.period_unit}")

        if self.averaging_period <= 0:
            raise ConfigurationError(
                f"Averaging period must be positive, got {self.averaging_period}"
            )


@dataclass
class LoggingConfig:
    """Logging system configuration"""
    log_level: str = "INFO"
    log_dir: str = "logs"

    def __post_init__(self):
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.log_level.upper() not in valid_levels:
            raise ConfigurationError(
                f"Invalid log level: {self.log_level}. "
                f"Must be one of {valid_levels}"
            )


class ChannelSettings(BaseModel):
    """Pydantic schema for a channels.yaml override block."""

    model_config = ConfigDict(extra="forbid")

    window_size: Optional[int] = Field(None, ge=1, description="Moving average window")
    period_unit: Optional[float] = Field(None, gt=0, description="Rate unit in seconds")
    averaging_period: Optional[float] = Field(
        None, gt=0, description="Staleness time constant in seconds"
    )

    def overrides(self) -> Dict[str, Any]:
        """Only the keys that were actually set."""
        return self.model_dump(exclude_none=True)


class ConfigManager:
    """
    Manages monitor configuration from INI/YAML files with environment overrides

    Resolution order for a channel (highest first):
    1. channels.yaml ``channels.<name>`` block
    2. channels.yaml ``defaults`` block
    3. Environment variables
    4. monitor_config.ini ``[monitor]`` section
    5. Built-in defaults
    """

    def __init__(self, config_dir: str = "configs"):
        self.config_dir = Path(config_dir)
        self._monitor_config = None
        self._logging_config = None
        self._channel_defaults: Dict[str, Any] = {}
        self._channel_overrides: Dict[str, Dict[str, Any]] = {}

        # Load configurations
        self._load_configs()

    def _load_configs(self):
        """Load all configuration files"""
        ini = self._read_ini()
        self._monitor_config = self._load_monitor_config(ini)
        self._logging_config = self._load_logging_config(ini)
        self._load_channel_overrides()

    def _read_ini(self) -> Optional[ConfigParser]:
        config_file = self.config_dir / "monitor_config.ini"
        if not config_file.exists():
            return None

        config = ConfigParser()
        config.read(config_file)
        return config

    def _load_monitor_config(self, ini: Optional[ConfigParser]) -> MonitorConfig:
        """
        Load default monitor settings

        Priority: ENV > INI file > built-in defaults
        """
        values: Dict[str, Any] = {}

        if ini is not None and "monitor" in ini:
            section = ini["monitor"]
            try:
                if "window_size" in section:
                    values["window_size"] = section.getint("window_size")
                if "period_unit" in section:
                    values["period_unit"] = section.getfloat("period_unit")
                if "averaging_period" in section:
                    values["averaging_period"] = section.getfloat("averaging_period")
            except ValueError as e:
                raise ConfigurationError(f"Invalid monitor_config.ini [monitor] value: {e}") from e

        env_overrides = (
            (ENV_WINDOW_SIZE, "window_size", int),
            (ENV_PERIOD_UNIT, "period_unit", float),
            (ENV_AVERAGING_PERIOD, "averaging_period", float),
        )
        for env_name, key, cast in env_overrides:
            raw = os.getenv(env_name)
            if raw is None:
                continue
            try:
                values[key] = cast(raw)
            except ValueError as e:
                raise ConfigurationError(f"Invalid {env_name}={raw!r}: {e}") from e

        return MonitorConfig(**values)

    def _load_logging_config(self, ini: Optional[ConfigParser]) -> LoggingConfig:
        """Load logging configuration from INI file"""
        log_level = "INFO"
        log_dir = "logs"

        if ini is not None and "logging" in ini:
            logging_section = ini["logging"]
            log_level = logging_section.get("log_level", log_level)
            log_dir = logging_section.get("log_dir", log_dir)

        return LoggingConfig(
            log_level=os.getenv(ENV_LOG_LEVEL, log_level),
            log_dir=log_dir,
        )

    def _load_channel_overrides(self) -> None:
        """
        Load per-channel overrides from channels.yaml

        Format:
            defaults:
              window_size: 20
            channels:
              orders:
                averaging_period: 300

        Raises:
            ConfigurationError: If the YAML is malformed or a block is invalid
        """
        yaml_file = self.config_dir / "channels.yaml"
        if not yaml_file.exists():
            return

        try:
            with open(yaml_file, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to parse {yaml_file}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"{yaml_file} must contain a mapping")

        self._channel_defaults = self._validate_block("defaults", data.get("defaults") or {})

        channels = data.get("channels") or {}
        if not isinstance(channels, dict):
            raise ConfigurationError(f"{yaml_file}: 'channels' must be a mapping")

        self._channel_overrides = {
            str(name): self._validate_block(f"channels.{name}", block or {})
            for name, block in channels.items()
        }
        logger.debug(f"Loaded overrides for {len(self._channel_overrides)} channels")

    @staticmethod
    def _validate_block(where: str, block: Any) -> Dict[str, Any]:
        if not isinstance(block, dict):
            raise ConfigurationError(f"channels.yaml {where}: expected a mapping")
        try:
            return ChannelSettings(**block).overrides()
        except ValidationError as e:
            raise ConfigurationError(f"channels.yaml {where}: {e}") from e

    def get_channel_config(self, name: str) -> MonitorConfig:
        """
        Resolve settings for one channel

        Args:
            name: Channel name

        Returns:
            MonitorConfig with channel and default overrides applied
        """
        merged = asdict(self._monitor_config)
        merged.update(self._channel_defaults)
        merged.update(self._channel_overrides.get(name, {}))
        return MonitorConfig(**merged)

    @property
    def configured_channels(self) -> list[str]:
        """Channel names with an explicit channels.yaml block"""
        return list(self._channel_overrides)

    @property
    def monitor_config(self) -> MonitorConfig:
        """Get default monitor configuration"""
        return self._monitor_config

    @property
    def logging_config(self) -> LoggingConfig:
        """Get logging configuration"""
        return self._logging_config
