"""
Exponentially weighted accumulator shared by the channel histories.

Tracks a decayed mean and variance of a value stream in constant memory.
No raw samples are retained.
"""

import math
import threading
import time
from typing import Callable, Optional

Clock = Callable[[], float]


class ExponentialMovingAverage:
    """
    Exponentially weighted mean and variance of a value stream.

    Smoothing:
    - Steady state weight is alpha = 2 / (window_size + 1)
    - Cold start weight is 1 / n while that is larger than alpha, so the
      first samples yield a plain running mean instead of being dominated
      by a single early value

    Thread safety:
    - One lock per instance guards every update and every read
    - Readers never observe mean updated without variance (no torn reads)
    """

    def __init__(self, window_size: int = 10, clock: Clock = time.perf_counter):
        """
        Initialize accumulator.

        Args:
            window_size: Effective number of recent samples the decay approximates
            clock: Monotonic clock returning seconds (injectable for tests)

        Raises:
            ValueError: If window_size is not positive
        """
        if window_size < 1:
            raise ValueError(f"Window size must be positive, got {window_size}")

        self._window_size = window_size
        self._alpha = 2.0 / (window_size + 1)
        self._clock = clock

        self._count = 0
        self._mean = 0.0
        self._variance = 0.0
        self._last_update: Optional[float] = None

        self._lock = threading.Lock()

    @property
    def window_size(self) -> int:
        """Effective sample window of the decay."""
        return self._window_size

    @property
    def alpha(self) -> float:
        """Steady state smoothing factor."""
        return self._alpha

    def _blend(self, value: float, samples: Optional[int] = None) -> None:
        """
        Fold a value into mean and variance.

        The cold start weight is 1 / samples, where samples defaults to the
        current count, so callers increment the count first. Caller must
        hold the lock.
        """
        weight = max(self._alpha, 1.0 / (samples or self._count))
        diff = value - self._mean
        increment = weight * diff
        self._mean += increment
        # Clamp: rounding can push a near-zero variance below zero
        self._variance = max(0.0, (1.0 - weight) * (self._variance + diff * increment))

    def _append_locked(self, value: float) -> None:
        """Record one sample. Caller must hold the lock."""
        self._count += 1
        self._blend(value)
        self._last_update = self._clock()

    def append(self, value: float) -> None:
        """
        Record one sample.

        Args:
            value: Observed value
        """
        with self._lock:
            self._append_locked(value)

    def get_count(self) -> int:
        """Number of samples recorded so far."""
        with self._lock:
            return self._count

    def get_mean(self) -> float:
        """Decayed mean, 0.0 before any sample."""
        with self._lock:
            return self._mean

    def get_standard_deviation(self) -> float:
        """Decayed standard deviation, 0.0 before any sample."""
        with self._lock:
            return math.sqrt(self._variance)

    def get_time_since_last_measurement(self) -> float:
        """Seconds since the last sample, 0.0 before any sample."""
        with self._lock:
            if self._last_update is None:
                return 0.0
            return self._clock() - self._last_update

    def __repr__(self) -> str:
        with self._lock:
            return (
                f"{type(self).__name__}(window_size={self._window_size}, "
                f"count={self._count}, mean={self._mean:.6f}, "
                f"sigma={math.sqrt(self._variance):.6f})"
            )
