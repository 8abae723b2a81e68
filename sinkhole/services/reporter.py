"""Background reporting of answered queries.

Console status updates and per-query log lines are written by a single
worker thread, so query handlers hand off their results and return the
answer without waiting on stdout or stderr.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Optional

from sinkhole.models.run_statistics import RunStatistics
from sinkhole.services.logger import StatusLine, log_query


logger = logging.getLogger(__name__)


class QueryReporter:
    """Single-worker queue for status line updates and query log lines.

    Snapshots can arrive slightly out of order when handler threads race
    between recording and reporting; the worker skips any snapshot older
    than the one already shown so the status line never goes backwards.

    Attributes:
        status_line: Console status for simple log mode, or None.
        log_queries: Emit one structured log line per answered query.

    Example:
        >>> reporter = QueryReporter(StatusLine(), log_queries=False)
        >>> reporter.report(RunStatistics(total_queries=1, blocked_queries=1))
        >>> reporter.close()
    """

    def __init__(self, status_line: Optional[StatusLine] = None, log_queries: bool = False):
        self.status_line = status_line
        self.log_queries = log_queries
        self._shown_total = 0  # Only touched by the worker thread
        self._executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="sinkhole-reporter"
        )

    def report(
        self, stats: RunStatistics, query_entry: Optional[Dict[str, Any]] = None
    ) -> None:
        """Queue one answered query for reporting. Never blocks on I/O.

        Args:
            stats: Statistics snapshot taken when the query was recorded.
            query_entry: Keyword arguments for log_query(), or None.
        """
        try:
            self._executor.submit(self._emit, stats, query_entry)
        except RuntimeError:
            # Executor already shut down
            logger.debug(f"Reporter closed, dropping report for query {stats.total_queries}")

    def close(self) -> None:
        """Flush pending reports and stop the worker."""
        self._executor.shutdown(wait=True)

    def _emit(self, stats: RunStatistics, query_entry: Optional[Dict[str, Any]]) -> None:
        try:
            if self.status_line is not None and stats.total_queries > self._shown_total:
                self._shown_total = stats.total_queries
                self.status_line.update(stats)
            if query_entry is not None:
                log_query(**query_entry)
        except Exception:
            logger.exception("Failed to log query")
