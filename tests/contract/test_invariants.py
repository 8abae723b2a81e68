"""Contract tests for concurrency invariants.

These tests verify:
- total/blocked counters never diverge under concurrent updates
- the console status line never moves backwards
- the blacklist cannot be mutated after startup
- classification is safe to share across threads
"""

import random
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from unittest.mock import Mock

import dns.message

from sinkhole.models.blacklist import BlacklistSet
from sinkhole.services.classifier import QueryClassifier
from sinkhole.services.logger import StatusLine
from sinkhole.services.reporter import QueryReporter
from sinkhole.services.statistics import StatisticsTracker


@pytest.mark.parametrize("total,blocked", [(0, 0), (1, 0), (1, 1), (1000, 333), (2500, 2500)])
def test_concurrent_records_are_all_counted(total, blocked):
    """Verify N concurrent record() calls with K blocked give total=N, blocked=K.

    Test Steps:
    1. Shuffle K blocked and N-K unblocked flags
    2. Record all of them from a pool of threads
    3. Verify snapshot counters and rounded percentage
    """
    flags = [True] * blocked + [False] * (total - blocked)
    random.shuffle(flags)
    tracker = StatisticsTracker()

    with ThreadPoolExecutor(max_workers=16) as executor:
        list(executor.map(tracker.record, flags))

    stats = tracker.snapshot()
    assert stats.total_queries == total
    assert stats.blocked_queries == blocked
    expected = round(blocked / total * 100, 2) if total else 0
    assert stats.percentage == expected


def test_readers_never_see_partial_updates():
    """Verify blocked-only writes keep total == blocked for every reader.

    Test Steps:
    1. Writers record only blocked queries
    2. Readers take snapshots concurrently
    3. Every snapshot must show total == blocked
    """
    tracker = StatisticsTracker()
    stop = threading.Event()
    violations = []

    def reader():
        while not stop.is_set():
            stats = tracker.snapshot()
            if stats.total_queries != stats.blocked_queries:
                violations.append(stats)

    def writer():
        for _ in range(2000):
            tracker.record(blocked=True)

    readers = [threading.Thread(target=reader) for _ in range(4)]
    writers = [threading.Thread(target=writer) for _ in range(4)]
    for thread in readers + writers:
        thread.start()
    for thread in writers:
        thread.join()
    stop.set()
    for thread in readers:
        thread.join()

    assert violations == []
    assert tracker.snapshot().total_queries == 8000


def test_status_line_never_goes_backwards():
    """Verify status updates only move forward and end at the final count.

    Test Steps:
    1. Many threads record and hand snapshots to the reporter
    2. Close the reporter to flush pending updates
    3. Shown totals are strictly increasing and the last equals N
    """
    status_line = Mock(spec=StatusLine)
    reporter = QueryReporter(status_line=status_line)
    tracker = StatisticsTracker()

    def handle(blocked):
        reporter.report(tracker.record(blocked))

    with ThreadPoolExecutor(max_workers=8) as executor:
        list(executor.map(handle, [False] * 500))
    reporter.close()

    seen = [c.args[0].total_queries for c in status_line.update.call_args_list]
    assert seen == sorted(set(seen))
    assert seen[-1] == 500


def test_blacklist_is_immutable():
    """Verify the blacklist offers no mutation after construction."""
    blacklist = BlacklistSet(["ads.example.com"])

    assert not hasattr(blacklist, "add")
    assert not hasattr(blacklist, "discard")
    with pytest.raises(AttributeError):
        blacklist.extra = "x"


def test_classifier_shared_across_threads():
    """Verify concurrent classification gives consistent answers."""
    classifier = QueryClassifier(BlacklistSet(["ads.example.com"]))
    names = ["ads.example.com", "example.com"] * 200

    with ThreadPoolExecutor(max_workers=8) as executor:
        results = list(
            executor.map(
                lambda name: classifier.is_blocked(dns.message.make_query(name, "A")),
                names,
            )
        )

    assert results == [True, False] * 200
