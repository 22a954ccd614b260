"""
Channel statistics snapshot for reporting layers.

Read-only view of one channel's accumulators at a point in time.
"""

import time
from dataclasses import dataclass, field


@dataclass(slots=True)
class ChannelStats:
    """
    Point-in-time statistics for a single monitored channel.

    Durations in seconds, rates in events per monitor period unit
    (per second by default).
    """

    name: str

    # Counters
    send_count: int = 0
    send_error_count: int = 0

    # Throughput
    time_since_last_send: float = 0.0
    send_rate: float = 0.0
    error_rate: float = 0.0
    error_ratio: float = 0.0

    # Duration distribution (successful sends only)
    mean_send_duration: float = 0.0
    min_send_duration: float = 0.0
    max_send_duration: float = 0.0
    standard_deviation_send_duration: float = 0.0

    # Metadata
    last_updated: float = field(default_factory=time.time)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "send_count": self.send_count,
            "send_error_count": self.send_error_count,
            "time_since_last_send": self.time_since_last_send,
            "send_rate": self.send_rate,
            "error_rate": self.error_rate,
            "error_ratio": self.error_ratio,
            "mean_send_duration_ms": self.mean_send_duration * 1000,
            "min_send_duration_ms": self.min_send_duration * 1000,
            "max_send_duration_ms": self.max_send_duration * 1000,
            "standard_deviation_send_duration_ms": self.standard_deviation_send_duration * 1000,
            "last_updated": self.last_updated,
        }
