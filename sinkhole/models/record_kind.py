"""Answer record classification for response rewriting."""

from enum import Enum

import dns.rdatatype


class RecordKind(Enum):
    """Kinds of answer records the rewriter distinguishes."""

    A = "A"  # IPv4 address, sinkholed to 127.0.0.1
    AAAA = "AAAA"  # IPv6 address, sinkholed to ::1
    OTHER = "OTHER"  # Everything else, passed through

    @classmethod
    def from_rdtype(cls, rdtype: int) -> "RecordKind":
        """Classify a DNS record type.

        Args:
            rdtype: dnspython rdata type value.

        Returns:
            RecordKind: A, AAAA or OTHER.
        """
        if rdtype == dns.rdatatype.A:
            return cls.A
        if rdtype == dns.rdatatype.AAAA:
            return cls.AAAA
        return cls.OTHER
