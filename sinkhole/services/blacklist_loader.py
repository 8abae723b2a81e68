"""Blacklist loading service.

Fetches every configured blacklist source once at startup and merges the
contents into a single immutable BlacklistSet. A source that cannot be
fetched is logged and skipped; it never aborts startup.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Set, Tuple
from urllib.parse import unquote, urlparse

import requests

from sinkhole.exceptions import SourceFetchError
from sinkhole.models.blacklist import (
    BlacklistLoadSummary,
    BlacklistSet,
    SourceLoadResult,
    SourceStatus,
)
from sinkhole.services.logger import log_source_failure
from sinkhole.utils.domain_utils import canonicalize_domain, is_comment_or_blank
from sinkhole.utils.retry import exponential_backoff_retry


logger = logging.getLogger(__name__)


@exponential_backoff_retry()
def _download(url: str, timeout: int) -> str:
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    return response.text


def fetch_source(location: str, timeout: int = 30) -> str:
    """Fetch the raw content of one blacklist source.

    HTTP(S) URLs are downloaded with transient failures retried. ``file://``
    URLs and bare paths are read from the local filesystem.

    Args:
        location: Source URL or local path.
        timeout: HTTP timeout in seconds.

    Returns:
        str: Source content.

    Raises:
        SourceFetchError: If the source is unreachable or unreadable.
    """
    parsed = urlparse(location)

    if parsed.scheme in ("http", "https"):
        try:
            return _download(location, timeout)
        except requests.RequestException as e:
            raise SourceFetchError(location, str(e)) from e

    path = Path(unquote(parsed.path)) if parsed.scheme == "file" else Path(location)
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceFetchError(location, str(e)) from e


def parse_blacklist_content(content: str) -> Set[str]:
    """Extract canonical domains from blacklist text.

    One domain per line; surrounding whitespace, blank lines and ``#``
    comments are ignored.

    Args:
        content: Raw source content.

    Returns:
        Set[str]: Canonical domain names.

    Examples:
        >>> sorted(parse_blacklist_content("Ads.Example.com\\n\\n# comment\\ntracker.example.net.\\n"))
        ['ads.example.com', 'tracker.example.net']
    """
    domains = set()
    for line in content.splitlines():
        if is_comment_or_blank(line):
            continue
        domain = canonicalize_domain(line)
        if domain:
            domains.add(domain)
    return domains


def load_blacklist(
    locations: Iterable[str], timeout: int = 30
) -> Tuple[BlacklistSet, List[SourceLoadResult]]:
    """Build the blacklist from all sources.

    Args:
        locations: Source URLs or paths, processed in order.
        timeout: HTTP timeout in seconds per source.

    Returns:
        Tuple[BlacklistSet, List[SourceLoadResult]]: Frozen blacklist and
        one result per source.
    """
    domains: Set[str] = set()
    results: List[SourceLoadResult] = []

    for location in locations:
        try:
            content = fetch_source(location, timeout)
        except SourceFetchError as e:
            log_source_failure(location, e.reason)
            results.append(
                SourceLoadResult(
                    location=location, status=SourceStatus.FAILED, error=e.reason
                )
            )
            continue

        source_domains = parse_blacklist_content(content)
        domains.update(source_domains)
        logger.debug(f"Loaded {len(source_domains)} domains from {location}")
        results.append(
            SourceLoadResult(
                location=location,
                status=SourceStatus.LOADED,
                domain_count=len(source_domains),
            )
        )

    return BlacklistSet(domains), results


def summarize(blacklist: BlacklistSet, results: List[SourceLoadResult]) -> BlacklistLoadSummary:
    """Combine per-source results with the final blacklist size."""
    return BlacklistLoadSummary(results=results, distinct_domains=len(blacklist))
