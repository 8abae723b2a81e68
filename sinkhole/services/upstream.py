"""Upstream resolver client.

Forwards client queries to the recursive resolver over UDP, falling back
to TCP for truncated answers. The whole exchange shares one time budget.
"""

import logging
import time

import dns.exception
import dns.flags
import dns.message
import dns.query

from sinkhole.exceptions import UpstreamFailure


logger = logging.getLogger(__name__)


class UpstreamResolver:
    """Time-bounded client for a single upstream DNS server.

    Attributes:
        server: IP address of the upstream resolver.
        port: Upstream port.
        timeout: Total time budget per query in seconds.

    Example:
        >>> upstream = UpstreamResolver("1.1.1.1", timeout=0.2)
        >>> answer = upstream.send(dns.message.make_query("example.com", "A"))
    """

    def __init__(self, server: str, port: int = 53, timeout: float = 0.2):
        self.server = server
        self.port = port
        self.timeout = timeout

    def send(self, query: dns.message.Message) -> dns.message.Message:
        """Forward a query and wait for the answer.

        Args:
            query: Client query, sent with its own transaction ID.

        Returns:
            dns.message.Message: Upstream answer.

        Raises:
            UpstreamFailure: On timeout, network error or malformed answer.
        """
        deadline = time.monotonic() + self.timeout

        try:
            answer = dns.query.udp(
                query,
                self.server,
                timeout=self.timeout,
                port=self.port,
                ignore_unexpected=True,
            )
            if answer.flags & dns.flags.TC:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise dns.exception.Timeout(timeout=self.timeout)
                logger.debug(f"Truncated answer from {self.server}, retrying over TCP")
                answer = dns.query.tcp(
                    query, self.server, timeout=remaining, port=self.port
                )
        except (dns.exception.DNSException, OSError) as e:
            raise UpstreamFailure(
                f"Upstream {self.server}:{self.port} failed: {type(e).__name__}"
            ) from e

        return answer
