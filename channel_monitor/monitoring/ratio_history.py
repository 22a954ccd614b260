"""
Decayed success ratio over a binary outcome stream.
"""

from .moving_average import ExponentialMovingAverage

SUCCESS = 1.0
FAILURE = 0.0


class RatioHistory(ExponentialMovingAverage):
    """
    Exponentially weighted proportion of successful outcomes.

    Each outcome is folded in as 1.0 (success) or 0.0 (failure), so the
    decayed mean is already a ratio in [0, 1]. The ratio does not go stale:
    a channel with no recent sends keeps its last known ratio.
    Callers wanting an error ratio use ``1 - get_mean()``.
    """

    def success(self) -> None:
        """Record a successful outcome."""
        self.append(SUCCESS)

    def failure(self) -> None:
        """Record a failed outcome."""
        self.append(FAILURE)
