"""Domain name utilities for blacklist matching."""

import ipaddress


def canonicalize_domain(name: str) -> str:
    """Normalize a domain name for blacklist comparison.

    Blacklist entries and query names are compared in this form only:
    surrounding whitespace removed, lower-cased, trailing dot stripped.

    Args:
        name: Domain name as found in a list or a DNS question.

    Returns:
        str: Canonical domain name.

    Examples:
        >>> canonicalize_domain("Ads.Example.COM.")
        'ads.example.com'
        >>> canonicalize_domain("  tracker.example.net  ")
        'tracker.example.net'
    """
    return name.strip().rstrip(".").lower()


def is_comment_or_blank(line: str) -> bool:
    """Check if a list line carries no domain.

    Args:
        line: Raw line from a blacklist or sources file.

    Returns:
        bool: True for empty lines and ``#`` comments.
    """
    stripped = line.strip()
    return not stripped or stripped.startswith("#")


def is_ip_address(value: str) -> bool:
    """Validate if string is an IPv4 or IPv6 address literal.

    Examples:
        >>> is_ip_address("1.1.1.1")
        True
        >>> is_ip_address("::1")
        True
        >>> is_ip_address("dns.example.com")
        False
    """
    try:
        ipaddress.ip_address(value)
        return True
    except ValueError:
        return False
