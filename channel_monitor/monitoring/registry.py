"""
Registry of per-channel monitors.

Each registered channel owns its own MessageChannelMonitor; nothing is
shared across channels.
"""

import logging
import threading
import time
from typing import Dict, List, Optional

from channel_monitor.core.exceptions import ChannelRegistrationError
from channel_monitor.utils.config import ConfigManager, MonitorConfig

from .channel_monitor import MessageChannelMonitor
from .moving_average import Clock
from .stats import ChannelStats

logger = logging.getLogger(__name__)


class MonitorRegistry:
    """
    Registers message channels and owns their monitors.

    Architecture:
    - One MessageChannelMonitor per channel name, created at registration
    - Channel settings resolved through ConfigManager when one is given
    - shutdown() dumps every channel's final state to the log

    Thread safety:
    - Registration and lookup are lock-protected
    - Monitors themselves are safe to use from any thread
    """

    def __init__(
        self,
        config_manager: Optional[ConfigManager] = None,
        clock: Clock = time.perf_counter,
    ):
        """
        Initialize registry.

        Args:
            config_manager: Source of per-channel settings (default: built-in defaults)
            clock: Monotonic clock handed to every monitor
        """
        self._config_manager = config_manager
        self._clock = clock
        self._monitors: Dict[str, MessageChannelMonitor] = {}
        self._lock = threading.Lock()

    def _channel_config(self, name: str) -> MonitorConfig:
        if self._config_manager is None:
            return MonitorConfig()
        return self._config_manager.get_channel_config(name)

    def register(self, name: str) -> MessageChannelMonitor:
        """
        Register a channel and create its monitor.

        Args:
            name: Channel name

        Returns:
            New MessageChannelMonitor for the channel

        Raises:
            ChannelRegistrationError: If the name is empty or already registered
        """
        if not name:
            raise ChannelRegistrationError("Channel name must not be empty")

        with self._lock:
            if name in self._monitors:
                raise ChannelRegistrationError(f"Channel '{name}' is already registered")
            monitor = MessageChannelMonitor(name, self._channel_config(name), clock=self._clock)
            self._monitors[name] = monitor

        logger.info(f"Registered channel monitor: {name}")
        return monitor

    def get(self, name: str) -> MessageChannelMonitor:
        """
        Get the monitor of a registered channel.

        Raises:
            ChannelRegistrationError: If the channel is not registered
        """
        with self._lock:
            monitor = self._monitors.get(name)
        if monitor is None:
            raise ChannelRegistrationError(f"Channel '{name}' is not registered")
        return monitor

    def get_or_register(self, name: str) -> MessageChannelMonitor:
        """Get a channel's monitor, registering the channel on first use."""
        with self._lock:
            monitor = self._monitors.get(name)
        if monitor is not None:
            return monitor
        try:
            return self.register(name)
        except ChannelRegistrationError:
            # Lost a registration race to another thread
            return self.get(name)

    def names(self) -> List[str]:
        with self._lock:
            return list(self._monitors)

    def get_stats(self, name: str) -> ChannelStats:
        """Snapshot of one channel."""
        return self.get(name).snapshot()

    def get_all_stats(self) -> Dict[str, ChannelStats]:
        """
        Snapshot of every registered channel.

        Returns:
            Dictionary mapping channel name to ChannelStats
        """
        with self._lock:
            monitors = list(self._monitors.values())
        return {monitor.name: monitor.snapshot() for monitor in monitors}

    def shutdown(self) -> None:
        """Dump each channel's final state and forget all channels."""
        with self._lock:
            monitors = list(self._monitors.values())
            self._monitors.clear()

        for monitor in monitors:
            monitor.destroy()
        logger.info(f"Channel monitors shut down ({len(monitors)} channels)")

    def __contains__(self, name: str) -> bool:
        with self._lock:
            return name in self._monitors

    def __len__(self) -> int:
        with self._lock:
            return len(self._monitors)
