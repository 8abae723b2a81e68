"""Unit tests for domain utilities."""

import pytest

from sinkhole.utils.domain_utils import (
    canonicalize_domain,
    is_comment_or_blank,
    is_ip_address,
)


@pytest.mark.parametrize(
    "name,expected",
    [
        ("ads.example.com", "ads.example.com"),
        ("ads.example.com.", "ads.example.com"),
        ("ADS.Example.COM.", "ads.example.com"),
        ("  ads.example.com\r", "ads.example.com"),
        ("", ""),
        (".", ""),
    ],
)
def test_canonicalize_domain(name, expected):
    """Test case, whitespace and trailing dot normalization."""
    assert canonicalize_domain(name) == expected


def test_canonicalize_domain_is_idempotent():
    """Test canonical form is a fixed point."""
    once = canonicalize_domain("Tracker.Example.NET.")
    assert canonicalize_domain(once) == once


@pytest.mark.parametrize(
    "line,expected",
    [
        ("", True),
        ("   ", True),
        ("# ad servers", True),
        ("  # indented comment", True),
        ("ads.example.com", False),
        ("ads.example.com # trailing", False),
    ],
)
def test_is_comment_or_blank(line, expected):
    """Test detection of lines without a domain."""
    assert is_comment_or_blank(line) is expected


def test_is_ip_address():
    """Test IP literal validation."""
    assert is_ip_address("1.1.1.1") is True
    assert is_ip_address("2606:4700:4700::1111") is True
    assert is_ip_address("one.one.one.one") is False
    assert is_ip_address("256.0.0.1") is False
