"""
Logging configuration with multi-handler setup and structured channel stats logging
"""

import json
import logging
import sys
from dataclasses import asdict
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler, TimedRotatingFileHandler
from pathlib import Path
from typing import Union

from channel_monitor.utils.config import LoggingConfig

STATS_LOGGER_NAME = "channel_stats"


class StatsLogFilter(logging.Filter):
    """
    Filter to isolate channel statistics records from general logging

    Only allows log records with logger name 'channel_stats' to pass through
    to the stats-specific handler.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Determine if log record should be processed

        Args:
            record: Log record to evaluate

        Returns:
            True if record.name == 'channel_stats', False otherwise
        """
        return record.name == STATS_LOGGER_NAME


class MonitorLogger:
    """
    Centralized logging system for channel monitoring

    Features:
    - Multi-handler logging (console, file, stats-specific)
    - Automatic log rotation (size-based and time-based)
    - Structured JSON logging for channel statistics
    """

    def __init__(self, config: Union[LoggingConfig, dict]):
        """
        Initialize logging infrastructure

        Args:
            config: LoggingConfig (e.g. ConfigManager.logging_config) or a
                configuration dictionary with keys:
                - log_level: str (DEBUG, INFO, WARNING, ERROR)
                - log_dir: str (directory path for log files)

        Raises:
            OSError: If log directory creation fails
        """
        if isinstance(config, LoggingConfig):
            config = asdict(config)
        self.log_level = config.get('log_level', 'INFO')
        self.log_dir = Path(config.get('log_dir', 'logs'))
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self._setup_logging()

    def _setup_logging(self) -> None:
        """
        Configure root logger with all handlers

        Sets up:
        1. Console handler (INFO+, simple format)
        2. Rotating file handler (DEBUG+, detailed format)
        3. Stats-specific handler (INFO, JSON lines, daily rotation)
        """
        root_logger = logging.getLogger()
        root_logger.setLevel(getattr(logging, self.log_level.upper()))

        # Clear existing handlers to avoid duplicates
        root_logger.handlers.clear()

        log_format = logging.Formatter(
            '%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s'
        )

        # Console Handler - INFO and above
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(log_format)
        root_logger.addHandler(console_handler)

        # File Handler - All levels, rotating (10MB max, 5 backups)
        file_handler = RotatingFileHandler(
            self.log_dir / 'channel_monitor.log',
            maxBytes=10*1024*1024,  # 10MB
            backupCount=5
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(log_format)
        root_logger.addHandler(file_handler)

        # Stats Log - channel statistics only (daily rotation, 30-day retention)
        stats_handler = TimedRotatingFileHandler(
            self.log_dir / 'channel_stats.log',
            when='midnight',
            backupCount=30
        )
        stats_handler.setLevel(logging.INFO)
        stats_handler.addFilter(StatsLogFilter())
        root_logger.addHandler(stats_handler)

    @staticmethod
    def log_stats(action: str, data: dict) -> None:
        """
        Log channel statistics in structured JSON format

        Args:
            action: Event type (CHANNEL_CLOSED, CHANNEL_REGISTERED, etc.)
            data: Statistics dictionary, typically ChannelStats.to_dict()

        Example:
            MonitorLogger.log_stats('CHANNEL_CLOSED', {
                'name': 'orders',
                'send_count': 1200,
                'error_ratio': 0.01
            })
        """
        logger = logging.getLogger(STATS_LOGGER_NAME)
        log_entry = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'action': action,
            **data
        }
        logger.info(json.dumps(log_entry))
