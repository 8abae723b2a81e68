"""DNS listener service.

UDP and TCP front ends that decode client queries, hand each one to the
QueryPipeline on its own thread and send back the answer, or SERVFAIL when
the upstream resolver gave none.
"""

import logging
import socket
import socketserver
import struct
import threading
from typing import List, Optional

import dns.exception
import dns.flags
import dns.message
import dns.rcode

from sinkhole.exceptions import UpstreamFailure
from sinkhole.services.pipeline import QueryPipeline


logger = logging.getLogger(__name__)

# Classic DNS UDP size limit for clients without EDNS
UDP_DEFAULT_PAYLOAD = 512
TCP_IDLE_TIMEOUT = 10.0


def server_failure(query: dns.message.Message) -> dns.message.Message:
    """Build a SERVFAIL answer for a query."""
    response = dns.message.make_response(query)
    response.set_rcode(dns.rcode.SERVFAIL)
    return response


def udp_payload_limit(query: dns.message.Message) -> int:
    """Largest answer the client accepts over UDP.

    Examples:
        >>> udp_payload_limit(dns.message.make_query("example.com", "A"))
        512
        >>> udp_payload_limit(dns.message.make_query("example.com", "A", use_edns=0, payload=1232))
        1232
    """
    if query.edns < 0:
        return UDP_DEFAULT_PAYLOAD
    return max(UDP_DEFAULT_PAYLOAD, query.payload)


def respond(
    pipeline: QueryPipeline, wire: bytes, udp: bool = False
) -> Optional[bytes]:
    """Answer one wire-format query.

    Args:
        pipeline: Query handler.
        wire: Raw client message.
        udp: Enforce the client's UDP size limit, truncating if exceeded.

    Returns:
        Optional[bytes]: Wire-format answer, or None if the input is dropped.
    """
    try:
        query = dns.message.from_wire(wire)
    except dns.exception.DNSException as e:
        logger.debug(f"Dropping malformed query: {type(e).__name__}")
        return None

    if query.flags & dns.flags.QR:
        logger.debug("Dropping message with response flag set")
        return None

    try:
        answer = pipeline.handle(query)
    except UpstreamFailure:
        answer = server_failure(query)
    except Exception as e:
        logger.error(f"Unexpected error handling query: {e}", exc_info=True)
        answer = server_failure(query)

    max_size = udp_payload_limit(query) if udp else 65535
    try:
        return answer.to_wire(max_size=max_size)
    except dns.exception.TooBig:
        # Empty truncated answer makes the client retry over TCP
        truncated = dns.message.make_response(query)
        truncated.flags |= dns.flags.TC
        return truncated.to_wire()


class DNSUDPHandler(socketserver.BaseRequestHandler):
    """Handles one UDP datagram."""

    def handle(self) -> None:
        data, sock = self.request
        response = respond(self.server.pipeline, data, udp=True)
        if response:
            sock.sendto(response, self.client_address)


class DNSTCPHandler(socketserver.BaseRequestHandler):
    """Handles a TCP connection carrying length-prefixed queries."""

    def handle(self) -> None:
        self.request.settimeout(TCP_IDLE_TIMEOUT)
        while True:
            try:
                wire = self._read_frame()
                if wire is None:
                    return
                response = respond(self.server.pipeline, wire)
                if response is None:
                    return
                self.request.sendall(struct.pack("!H", len(response)) + response)
            except OSError as e:
                logger.debug(f"TCP connection from {self.client_address[0]} ended: {e}")
                return

    def _read_frame(self) -> Optional[bytes]:
        header = self._recv_exactly(2)
        if header is None:
            return None
        (length,) = struct.unpack("!H", header)
        return self._recv_exactly(length)

    def _recv_exactly(self, count: int) -> Optional[bytes]:
        data = b""
        while len(data) < count:
            chunk = self.request.recv(count - len(data))
            if not chunk:
                return None
            data += chunk
        return data


class _PipelineServerMixin:
    allow_reuse_address = True
    daemon_threads = True

    def __init__(self, server_address, handler, pipeline: QueryPipeline):
        if ":" in server_address[0]:
            self.address_family = socket.AF_INET6
        super().__init__(server_address, handler)
        self.pipeline = pipeline


class ThreadingUDPServer(
    _PipelineServerMixin, socketserver.ThreadingMixIn, socketserver.UDPServer
):
    pass


class ThreadingTCPServer(
    _PipelineServerMixin, socketserver.ThreadingMixIn, socketserver.TCPServer
):
    pass


class SinkholeServer:
    """Runs the UDP (and optionally TCP) listeners in background threads.

    Example:
        >>> server = SinkholeServer(pipeline, "127.0.0.1", 5353)
        >>> server.start()
        >>> server.stop()
    """

    def __init__(
        self,
        pipeline: QueryPipeline,
        address: str = "0.0.0.0",
        port: int = 53,
        enable_tcp: bool = True,
    ):
        self.pipeline = pipeline
        self.address = address
        self.port = port
        self.enable_tcp = enable_tcp
        self._servers: List[socketserver.BaseServer] = []
        self._threads: List[threading.Thread] = []

    @property
    def bound_port(self) -> int:
        """Port actually bound, useful when configured with port 0."""
        if not self._servers:
            return self.port
        return self._servers[0].server_address[1]

    def start(self) -> None:
        udp_server = ThreadingUDPServer(
            (self.address, self.port), DNSUDPHandler, self.pipeline
        )
        self._servers.append(udp_server)

        if self.enable_tcp:
            # Same port as UDP, even when an ephemeral port was requested
            try:
                tcp_server = ThreadingTCPServer(
                    (self.address, self.bound_port), DNSTCPHandler, self.pipeline
                )
            except OSError:
                for server in self._servers:
                    server.server_close()
                self._servers.clear()
                raise
            self._servers.append(tcp_server)

        for server in self._servers:
            thread = threading.Thread(
                target=server.serve_forever,
                name=f"sinkhole-{type(server).__name__}",
                daemon=True,
            )
            thread.start()
            self._threads.append(thread)

        logger.info(
            f"Listening on {self.address}:{self.bound_port} "
            f"({'UDP/TCP' if self.enable_tcp else 'UDP'})"
        )

    def stop(self) -> None:
        for server in self._servers:
            server.shutdown()
            server.server_close()
        for thread in self._threads:
            thread.join(timeout=2.0)
        self._servers.clear()
        self._threads.clear()
        logger.info("Server stopped")
