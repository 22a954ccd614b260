"""
Unit tests for RatioHistory
"""

from channel_monitor.monitoring.ratio_history import RatioHistory


class TestRatioHistory:
    """Test decayed success ratio"""

    def test_empty_ratio_is_zero(self):
        """Verify undefined ratio reads as 0 before any outcome"""
        history = RatioHistory()

        assert history.get_count() == 0
        assert history.get_mean() == 0.0

    def test_mixed_outcomes_between_zero_and_one(self):
        """Verify one success and one failure give a ratio strictly inside (0, 1)"""
        history = RatioHistory()

        history.success()
        history.failure()

        assert 0.0 < history.get_mean() < 1.0
        assert history.get_count() == 2

    def test_only_successes_approach_one(self):
        """Verify ratio is 1 after only successes"""
        history = RatioHistory()

        for _ in range(20):
            history.success()

        assert history.get_mean() == 1.0

    def test_only_failures_approach_zero(self):
        """Verify ratio is 0 after only failures"""
        history = RatioHistory()

        for _ in range(20):
            history.failure()

        assert history.get_mean() == 0.0

    def test_recent_failures_dominate(self):
        """Verify ratio moves toward 0 after a run of failures"""
        history = RatioHistory(window_size=10)

        for _ in range(20):
            history.success()
        for _ in range(20):
            history.failure()

        assert history.get_mean() < 0.05

    def test_ratio_stays_in_unit_interval(self):
        """Verify ratio never leaves [0, 1]"""
        history = RatioHistory(window_size=4)

        for i in range(200):
            if i % 3:
                history.success()
            else:
                history.failure()
            assert 0.0 <= history.get_mean() <= 1.0
