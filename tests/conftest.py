"""pytest fixtures for testing."""

import pytest
from unittest.mock import Mock

import dns.message
import dns.rrset

from sinkhole.models.blacklist import BlacklistSet
from sinkhole.services.upstream import UpstreamResolver


def build_answer(query, records=(), rcode=None):
    """Build an upstream-style answer for a query.

    Args:
        query: Query being answered.
        records: Iterable of (name, ttl, rdtype, value) tuples.
        rcode: Optional response code.
    """
    answer = dns.message.make_response(query)
    for name, ttl, rdtype, value in records:
        answer.answer.append(dns.rrset.from_text(name, ttl, "IN", rdtype, value))
    if rcode is not None:
        answer.set_rcode(rcode)
    return answer


@pytest.fixture
def make_answer():
    """Factory for upstream-style answers."""
    return build_answer


@pytest.fixture
def blacklist():
    """Blacklist with two blocked domains."""
    return BlacklistSet(["ads.example.com", "tracker.example.net"])


@pytest.fixture
def mock_upstream():
    """Mock upstream resolver answering every query with one A record."""
    mock = Mock(spec=UpstreamResolver)
    mock.send.side_effect = lambda query: build_answer(
        query,
        [(query.question[0].name.to_text(), 300, "A", "93.184.216.34")],
    )
    return mock
