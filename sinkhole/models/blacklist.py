"""Blacklist data models.

This module provides the immutable set of blocked domains consulted for
every query and the per-source results produced while building it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, List

from sinkhole.utils.domain_utils import canonicalize_domain


class BlacklistSet:
    """Immutable set of canonical blocked domain names.

    Built once at startup and shared read-only by every query handler
    thread, so lookups need no locking.

    Example:
        >>> blacklist = BlacklistSet(["Ads.Example.com", "tracker.example.net."])
        >>> "ads.example.com." in blacklist
        True
        >>> len(blacklist)
        2
    """

    __slots__ = ("_domains",)

    def __init__(self, domains: Iterable[str] = ()):
        self._domains = frozenset(canonicalize_domain(d) for d in domains)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        return canonicalize_domain(name) in self._domains

    def __len__(self) -> int:
        return len(self._domains)

    def __iter__(self) -> Iterator[str]:
        return iter(self._domains)

    def __repr__(self) -> str:
        return f"BlacklistSet({len(self._domains)} domains)"


class SourceStatus(Enum):
    """Outcome of loading one blacklist source."""

    LOADED = "LOADED"  # Content fetched and merged (possibly empty)
    FAILED = "FAILED"  # Fetch failed, source skipped


@dataclass
class SourceLoadResult:
    """Result of loading a single blacklist source.

    Attributes:
        location: URL or local path of the source.
        status: Whether the source was merged or skipped.
        domain_count: Distinct canonical domains the source contained.
        error: Failure description when status is FAILED.
    """

    location: str
    status: SourceStatus
    domain_count: int = 0
    error: str | None = None

    def is_loaded(self) -> bool:
        """Check if the source contributed to the blacklist.

        Returns:
            bool: True if status is LOADED, False otherwise.
        """
        return self.status == SourceStatus.LOADED


@dataclass
class BlacklistLoadSummary:
    """Aggregated startup report for blacklist loading.

    Attributes:
        results: Per-source results in configured order.
        distinct_domains: Size of the merged blacklist.

    Invariants:
        - loaded_sources + failed_sources == len(results)
        - distinct_domains <= sum(r.domain_count for r in results)
    """

    results: List[SourceLoadResult]
    distinct_domains: int

    @property
    def loaded_sources(self) -> int:
        return sum(1 for r in self.results if r.is_loaded())

    @property
    def failed_sources(self) -> int:
        return len(self.results) - self.loaded_sources

    def to_json(self) -> dict:
        """Serialize to JSON-compatible dict.

        Returns:
            dict: JSON-serializable representation.
        """
        return {
            "total_sources": len(self.results),
            "loaded_sources": self.loaded_sources,
            "failed_sources": self.failed_sources,
            "distinct_domains": self.distinct_domains,
            "sources": [
                {
                    "location": r.location,
                    "status": r.status.value,
                    "domain_count": r.domain_count,
                    "error": r.error,
                }
                for r in self.results
            ],
        }
