"""
Monotonic send counters.
"""

import threading


class SendCounters:
    """
    Total and failed send attempts for one channel.

    Both tallies only ever grow. Every failed attempt was first counted
    as an attempt, so errors <= total holds at every point.

    Thread safety:
    - Increments are lock-protected, no lost updates under contention
    """

    def __init__(self):
        self._total = 0
        self._errors = 0
        self._lock = threading.Lock()

    def increment_total(self) -> int:
        """Count one attempt and return the new total."""
        with self._lock:
            self._total += 1
            return self._total

    def increment_error(self) -> int:
        """Count one failed attempt and return the new error count."""
        with self._lock:
            self._errors += 1
            return self._errors

    def get_total(self) -> int:
        return self._total

    def get_errors(self) -> int:
        return self._errors
