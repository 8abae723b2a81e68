"""Query statistics tracking service.

Counts answered and blocked queries across all handler threads.
"""

import threading

from sinkhole.models.run_statistics import RunStatistics


class StatisticsTracker:
    """Thread-safe total/blocked query counters.

    A single lock guards both counters, so no reader ever observes a total
    increment without the matching blocked increment. The lock covers the
    counter update only; rendering happens elsewhere.

    Attributes:
        _lock: Guards both counters.
        _total_queries: Answered queries.
        _blocked_queries: Answered queries classified as blocked.

    Example:
        >>> tracker = StatisticsTracker()
        >>> tracker.record(blocked=True)
        RunStatistics(total_queries=1, blocked_queries=1)
        >>> tracker.record(blocked=False).percentage
        50.0
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._total_queries = 0
        self._blocked_queries = 0

    def record(self, blocked: bool) -> RunStatistics:
        """Record one answered query.

        Args:
            blocked: Whether the query was classified as blocked.

        Returns:
            RunStatistics: Snapshot including this query.
        """
        with self._lock:
            self._total_queries += 1
            if blocked:
                self._blocked_queries += 1
            total, blocked_total = self._total_queries, self._blocked_queries

        return RunStatistics(total_queries=total, blocked_queries=blocked_total)

    def snapshot(self) -> RunStatistics:
        """Return a consistent point-in-time view of the counters."""
        with self._lock:
            total, blocked_total = self._total_queries, self._blocked_queries

        return RunStatistics(total_queries=total, blocked_queries=blocked_total)
