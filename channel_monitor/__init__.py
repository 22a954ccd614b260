"""
Channel Monitor
Live, time-decayed send statistics for message channels
"""

__version__ = "0.1.0"

from channel_monitor.monitoring import MessageChannelMonitor, MonitorRegistry
from channel_monitor.utils.config import ConfigManager

__all__ = ["MessageChannelMonitor", "MonitorRegistry", "ConfigManager"]
