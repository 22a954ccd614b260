"""
Live send statistics for message channels.

This package provides low-overhead, bounded-memory statistics for the send
attempts of each monitored channel: counts, decayed rates, error ratio and
duration distribution.

Usage:
    from channel_monitor.monitoring import MonitorRegistry, monitored

    registry = MonitorRegistry()
    orders = registry.register("orders")

    # Instrument code
    @monitored(orders)
    def publish(order):
        broker.send(order)

    # Query statistics
    print(f"Send rate: {orders.get_send_rate():.1f}/s")
    print(f"Mean duration: {orders.get_mean_send_duration() * 1000:.2f}ms")

    # Shutdown (dumps final state to the log)
    registry.shutdown()
"""

from .channel_monitor import MessageChannelMonitor, SendContext
from .counters import SendCounters
from .duration_history import DurationHistory
from .interceptor import MonitoredChannel, monitor_send, monitored, monitored_async
from .moving_average import ExponentialMovingAverage
from .rate_history import RateHistory
from .ratio_history import RatioHistory
from .registry import MonitorRegistry
from .stats import ChannelStats

__all__ = [
    "MessageChannelMonitor",
    "SendContext",
    "MonitorRegistry",
    "monitor_send",
    "monitored",
    "monitored_async",
    "MonitoredChannel",
    "ChannelStats",
    "SendCounters",
    "ExponentialMovingAverage",
    "DurationHistory",
    "RateHistory",
    "RatioHistory",
]
