"""
Decayed event rate with live staleness.

Estimates events per period from event timestamps only. Two decay effects
are composed:

1. Historical smoothing: instantaneous rates (period / inter-arrival gap)
   are folded into an exponentially weighted mean and variance.
2. Live staleness: at read time the smoothed mean is scaled down by the
   idle time since the last event, so a channel that stopped sending
   reads as slowing toward zero rather than holding its old rate.
"""

import logging
import time
from typing import Optional

from .moving_average import Clock, ExponentialMovingAverage

logger = logging.getLogger(__name__)


class RateHistory(ExponentialMovingAverage):
    """
    Exponentially weighted rate of events per ``period_unit``.

    Staleness decay (read time only, never mutates state):
        decayed = mean * H / (H + idle)
        H = min(averaging_period, count * period_unit / mean)

    H is the span of time the recorded events cover, capped by the
    averaging period. A few recent events therefore go stale quickly,
    while a long steady stream decays over ``averaging_period``.
    The factor is 1 at idle=0, strictly decreasing and tends to 0.

    Example:
        rate = RateHistory(period_unit=1.0, averaging_period=60.0)
        rate.increment()
        rate.get_mean()  # events per second, falls while idle

    The standard deviation is that of the smoothed rate, without
    staleness decay.
    """

    def __init__(
        self,
        period_unit: float = 1.0,
        averaging_period: float = 60.0,
        window_size: int = 10,
        clock: Clock = time.perf_counter,
        initial_interval: Optional[float] = None,
    ):
        """
        Initialize rate history.

        Args:
            period_unit: Time unit rates are reported in (seconds)
            averaging_period: Staleness time constant (seconds)
            window_size: Effective number of recent intervals smoothed over
            clock: Monotonic clock returning seconds
            initial_interval: Interval assumed for the first event when it
                arrives at construction time (default: period_unit)

        Raises:
            ValueError: If any period, the initial interval or the window
                size is not positive
        """
        super().__init__(window_size=window_size, clock=clock)

        if period_unit <= 0:
            raise ValueError(f"Period unit must be positive, got {period_unit}")
        if averaging_period <= 0:
            raise ValueError(f"Averaging period must be positive, got {averaging_period}")
        if initial_interval is not None and initial_interval <= 0:
            raise ValueError(f"Initial interval must be positive, got {initial_interval}")

        self._period_unit = period_unit
        self._averaging_period = averaging_period
        self._initial_interval = initial_interval or period_unit

        self._created_at = clock()
        self._first_update: Optional[float] = None
        self._intervals = 0

    @property
    def period_unit(self) -> float:
        return self._period_unit

    @property
    def averaging_period(self) -> float:
        return self._averaging_period

    def increment(self) -> None:
        """
        Record one event occurring now.

        The first event is rated by the time it took to arrive after
        construction. That seed is provisional: the first measured gap
        between events replaces it, and later gaps are smoothed with a cold
        start weight of 1 / intervals. A zero gap has no defined rate and
        only advances the count.
        """
        with self._lock:
            # Timestamp under the lock so successive gaps are never negative
            now = self._clock()

            if self._count == 0:
                elapsed = now - self._created_at
                if elapsed <= 0:
                    elapsed = self._initial_interval
                self._first_update = now
                self._count = 1
                self._mean = self._period_unit / elapsed
                self._variance = 0.0
            else:
                gap = now - self._last_update
                self._count += 1
                if gap > 0:
                    self._intervals += 1
                    self._blend(self._period_unit / gap, samples=self._intervals)
                elif logger.isEnabledFor(logging.DEBUG):
                    logger.debug(f"Zero interval at event {self._count}, rate update skipped")

            self._last_update = now

    def append(self, value: float) -> None:
        """Rates are driven by event timestamps; use increment()."""
        raise TypeError("RateHistory records events with increment(), not values")

    def get_mean(self) -> float:
        """
        Current rate in events per ``period_unit``, decayed for idle time.

        Returns:
            0.0 before any event, otherwise the stale-decayed smoothed rate
        """
        with self._lock:
            if self._count == 0:
                return 0.0
            mean = self._mean
            count = self._count
            idle = max(0.0, self._clock() - self._last_update)

        if mean <= 0:
            return 0.0

        horizon = min(self._averaging_period, count * self._period_unit / mean)
        return mean * horizon / (horizon + idle)

    def get_first_update(self) -> Optional[float]:
        """Clock reading of the first event, None before any event."""
        with self._lock:
            return self._first_update
