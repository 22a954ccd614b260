"""
Decayed duration statistics for completed sends.
"""

import math

from .moving_average import ExponentialMovingAverage


class DurationHistory(ExponentialMovingAverage):
    """
    Exponentially weighted duration distribution with cumulative extremes.

    Mean and standard deviation decay over the sample window; min and max
    cover every sample ever appended and are never reset. There is no
    staleness decay: this tracks a value distribution, not an occurrence rate.

    Example:
        history = DurationHistory(window_size=10)
        history.append(0.012)
        history.get_mean()  # 0.012
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._min = math.inf
        self._max = -math.inf

    def append(self, value: float) -> None:
        """
        Record one duration.

        Args:
            value: Duration in seconds
        """
        with self._lock:
            self._append_locked(value)
            self._min = min(self._min, value)
            self._max = max(self._max, value)
            # min <= mean <= max even after float rounding
            self._mean = min(max(self._mean, self._min), self._max)

    def get_min(self) -> float:
        """Smallest duration seen, 0.0 before any sample."""
        with self._lock:
            return self._min if self._count else 0.0

    def get_max(self) -> float:
        """Largest duration seen, 0.0 before any sample."""
        with self._lock:
            return self._max if self._count else 0.0

    def __str__(self) -> str:
        with self._lock:
            if not self._count:
                return "[N=0]"
            return (
                f"[N={self._count}, min={self._min:.6f}, max={self._max:.6f}, "
                f"mean={self._mean:.6f}, sigma={math.sqrt(self._variance):.6f}]"
            )
