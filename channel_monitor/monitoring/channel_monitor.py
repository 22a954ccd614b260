"""
Per-channel send monitor.

Composes counters and decayed histories for one message channel and exposes
the start/complete hooks an interceptor calls around every send attempt.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Optional

from channel_monitor.utils.config import MonitorConfig
from channel_monitor.utils.logger import MonitorLogger

from .counters import SendCounters
from .duration_history import DurationHistory
from .moving_average import Clock
from .rate_history import RateHistory
from .ratio_history import RatioHistory
from .stats import ChannelStats

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SendContext:
    """Start of one monitored send, handed back to on_complete()."""

    channel: str
    started_at: float
    completed: bool = False


class MessageChannelMonitor:
    """
    Accumulates live send statistics for one message channel.

    Architecture:
    - SendCounters for attempts and failures
    - DurationHistory for successful send durations
    - RateHistory for overall throughput and for error throughput
    - RatioHistory for the success ratio

    Hook contract:
    - on_start() once before the send: counts the attempt and the rate
    - on_complete() once after it: records duration and success, or the
      error count, failure and error rate
    - Recording never raises on behalf of the monitored send; the caller
      re-raises the original failure

    Thread safety:
    - Hooks and accessors may be called from any thread
    - Each accumulator is individually consistent; a reader may see a new
      send count slightly before the matching duration lands

    Example:
        monitor = MessageChannelMonitor("orders")
        context = monitor.on_start()
        try:
            channel.send(message)
        except Exception:
            monitor.on_complete(context, success=False)
            raise
        monitor.on_complete(context, success=True)
    """

    def __init__(
        self,
        name: str,
        config: Optional[MonitorConfig] = None,
        clock: Clock = time.perf_counter,
    ):
        """
        Initialize channel monitor.

        Args:
            name: Channel name
            config: Window and period settings (default: MonitorConfig())
            clock: Monotonic clock returning seconds, shared by all histories
        """
        self._name = name
        self._config = config or MonitorConfig()
        self._clock = clock

        window = self._config.window_size
        self._counters = SendCounters()
        self._send_duration = DurationHistory(window_size=window, clock=clock)
        self._send_rate = RateHistory(
            period_unit=self._config.period_unit,
            averaging_period=self._config.averaging_period,
            window_size=window,
            clock=clock,
        )
        self._send_error_rate = RateHistory(
            period_unit=self._config.period_unit,
            averaging_period=self._config.averaging_period,
            window_size=window,
            clock=clock,
        )
        self._send_success_ratio = RatioHistory(window_size=window, clock=clock)
        self._completion_lock = threading.Lock()

    @property
    def name(self) -> str:
        return self._name

    @property
    def config(self) -> MonitorConfig:
        return self._config

    def on_start(self) -> SendContext:
        """
        Record the start of a send attempt.

        Returns:
            SendContext to pass to on_complete()
        """
        context = SendContext(channel=self._name, started_at=self._clock())

        self._counters.increment_total()
        self._send_rate.increment()

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Recording send on channel({self._name})")
        return context

    def on_complete(
        self,
        context: SendContext,
        success: bool,
        duration_seconds: Optional[float] = None,
    ) -> None:
        """
        Record the outcome of a send attempt.

        Failed sends are counted but contribute no duration: duration
        statistics cover successfully completed sends only.

        Args:
            context: Context returned by on_start()
            success: Whether the send completed without error
            duration_seconds: Elapsed time (default: measured since on_start)

        Raises:
            ValueError: If duration_seconds is negative
        """
        if duration_seconds is not None and duration_seconds < 0:
            raise ValueError(f"Send duration must be >= 0, got {duration_seconds}")

        # Claim the context: only one caller may record its outcome
        with self._completion_lock:
            already_completed = context.completed
            context.completed = True

        if already_completed:
            logger.warning(
                f"Send on channel({self._name}) already completed, ignoring duplicate outcome"
            )
            return

        if duration_seconds is None:
            duration_seconds = max(0.0, self._clock() - context.started_at)

        if success:
            self._send_success_ratio.success()
            self._send_duration.append(duration_seconds)
        else:
            self._counters.increment_error()
            self._send_success_ratio.failure()
            self._send_error_rate.increment()

        if logger.isEnabledFor(logging.DEBUG):
            status = "SUCCESS" if success else "FAILURE"
            logger.debug(
                f"Send on channel({self._name}) {status} in {duration_seconds * 1000:.3f}ms"
            )

    def get_send_count(self) -> int:
        return self._counters.get_total()

    def get_send_error_count(self) -> int:
        return self._counters.get_errors()

    def get_time_since_last_send(self) -> float:
        """Seconds since the last send started, 0.0 before any send."""
        return self._send_rate.get_time_since_last_measurement()

    def get_send_rate(self) -> float:
        """Sends per period unit, decayed while the channel is idle."""
        return self._send_rate.get_mean()

    def get_error_rate(self) -> float:
        """Failed sends per period unit, decayed while no failures occur."""
        return self._send_error_rate.get_mean()

    def get_error_ratio(self) -> float:
        """Decayed share of failed sends in [0, 1], 0.0 before any outcome."""
        if self._send_success_ratio.get_count() == 0:
            return 0.0
        return 1.0 - self._send_success_ratio.get_mean()

    def get_mean_send_duration(self) -> float:
        return self._send_duration.get_mean()

    def get_min_send_duration(self) -> float:
        return self._send_duration.get_min()

    def get_max_send_duration(self) -> float:
        return self._send_duration.get_max()

    def get_standard_deviation_send_duration(self) -> float:
        return self._send_duration.get_standard_deviation()

    def snapshot(self) -> ChannelStats:
        """
        Collect every accessor into one ChannelStats.

        Fields are read one after another; concurrent sends may land
        between reads.
        """
        return ChannelStats(
            name=self._name,
            send_count=self.get_send_count(),
            send_error_count=self.get_send_error_count(),
            time_since_last_send=self.get_time_since_last_send(),
            send_rate=self.get_send_rate(),
            error_rate=self.get_error_rate(),
            error_ratio=self.get_error_ratio(),
            mean_send_duration=self.get_mean_send_duration(),
            min_send_duration=self.get_min_send_duration(),
            max_send_duration=self.get_max_send_duration(),
            standard_deviation_send_duration=self.get_standard_deviation_send_duration(),
        )

    def destroy(self) -> None:
        """
        Dump final state to the log at teardown.

        The monitor stays usable afterwards; nothing is released.
        """
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Send duration for channel({self._name}): {self._send_duration}")
        MonitorLogger.log_stats("CHANNEL_CLOSED", self.snapshot().to_dict())

    def __str__(self) -> str:
        return f"MessageChannelMonitor: [name={self._name}, sends={self.get_send_count()}]"
