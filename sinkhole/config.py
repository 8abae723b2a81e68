"""Configuration module for the DNS sinkhole.

Loads and validates environment variables, and reads the list of
blacklist sources.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List

from sinkhole.exceptions import ConfigMissingError
from sinkhole.utils.domain_utils import is_comment_or_blank, is_ip_address


LOG_MODES = ("simple", "full")


@dataclass
class Config:
    """Application configuration loaded from environment variables."""

    # Blacklist Configuration
    blacklist_sources_file: str
    blacklist_fetch_timeout: int

    # Upstream Configuration
    upstream_server: str
    upstream_port: int
    upstream_timeout_ms: int

    # Listener Configuration
    listen_address: str
    listen_port: int
    enable_tcp: bool

    # Operational Configuration
    log_mode: str
    verbose: bool

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables.

        Raises:
            ValueError: If a variable is invalid.

        Returns:
            Config: Validated configuration instance.
        """
        # Blacklist Configuration
        blacklist_sources_file = os.getenv(
            "BLACKLIST_SOURCES_FILE", "blacklists.txt"
        ).strip()
        if not blacklist_sources_file:
            raise ValueError("BLACKLIST_SOURCES_FILE must not be empty")

        blacklist_fetch_timeout = cls._get_int_env("BLACKLIST_FETCH_TIMEOUT", "30")
        if not 1 <= blacklist_fetch_timeout <= 300:
            raise ValueError("BLACKLIST_FETCH_TIMEOUT must be between 1 and 300 seconds")

        # Upstream Configuration
        upstream_server = os.getenv("UPSTREAM_SERVER", "1.1.1.1").strip()
        if not is_ip_address(upstream_server):
            raise ValueError("UPSTREAM_SERVER must be an IPv4 or IPv6 address")

        upstream_port = cls._get_int_env("UPSTREAM_PORT", "53")
        if not 1 <= upstream_port <= 65535:
            raise ValueError("UPSTREAM_PORT must be between 1 and 65535")

        upstream_timeout_ms = cls._get_int_env("UPSTREAM_TIMEOUT_MS", "200")
        if not 1 <= upstream_timeout_ms <= 60000:
            raise ValueError("UPSTREAM_TIMEOUT_MS must be between 1 and 60000")

        # Listener Configuration
        listen_address = os.getenv("LISTEN_ADDRESS", "0.0.0.0").strip()
        if not is_ip_address(listen_address):
            raise ValueError("LISTEN_ADDRESS must be an IPv4 or IPv6 address")

        listen_port = cls._get_int_env("LISTEN_PORT", "53")
        if not 0 <= listen_port <= 65535:
            raise ValueError("LISTEN_PORT must be between 0 and 65535")

        enable_tcp = cls._get_bool_env("ENABLE_TCP", "true")

        # Operational Configuration
        log_mode = os.getenv("LOG_MODE", "simple").strip().lower()
        if log_mode not in LOG_MODES:
            raise ValueError(f"LOG_MODE must be one of: {', '.join(LOG_MODES)}")

        verbose = cls._get_bool_env("VERBOSE", "false")

        return cls(
            blacklist_sources_file=blacklist_sources_file,
            blacklist_fetch_timeout=blacklist_fetch_timeout,
            upstream_server=upstream_server,
            upstream_port=upstream_port,
            upstream_timeout_ms=upstream_timeout_ms,
            listen_address=listen_address,
            listen_port=listen_port,
            enable_tcp=enable_tcp,
            log_mode=log_mode,
            verbose=verbose,
        )

    @staticmethod
    def _get_int_env(key: str, default: str) -> int:
        """Get integer environment variable or raise ValueError.

        Args:
            key: Environment variable name.
            default: Value used when the variable is not set.

        Returns:
            int: Parsed value.

        Raises:
            ValueError: If the value is not an integer.
        """
        value = os.getenv(key, default)
        try:
            return int(value)
        except ValueError:
            raise ValueError(f"{key} must be an integer, got {value!r}") from None

    @staticmethod
    def _get_bool_env(key: str, default: str) -> bool:
        return os.getenv(key, default).lower() in ("true", "1", "yes")

    @property
    def upstream_timeout(self) -> float:
        """Upstream query timeout in seconds."""
        return self.upstream_timeout_ms / 1000


def read_source_locations(path: str) -> List[str]:
    """Read blacklist source locations, one per line.

    Blank lines and ``#`` comments are ignored.

    Args:
        path: Path of the plain-text sources file.

    Returns:
        List[str]: Source URLs or local paths in file order.

    Raises:
        ConfigMissingError: If the file cannot be read.
    """
    try:
        content = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigMissingError(path, str(e)) from e

    return [line.strip() for line in content.splitlines() if not is_comment_or_blank(line)]
