"""Response rewriting for blocked queries.

Replaces address records in an upstream answer with loopback addresses
while keeping every other part of the message intact.
"""

import dns.flags
import dns.message
import dns.rdatatype
import dns.rrset

from sinkhole.exceptions import UpstreamFailure
from sinkhole.models.record_kind import RecordKind


IPV4_LOOPBACK = "127.0.0.1"
IPV6_LOOPBACK = "::1"


def sinkhole_rrset(rrset: dns.rrset.RRset) -> dns.rrset.RRset:
    """Map one answer RRset to its sinkholed form.

    Args:
        rrset: Answer RRset from the upstream resolver.

    Returns:
        dns.rrset.RRset: Loopback RRset with the same owner name, class and
        TTL for A/AAAA; the original RRset for any other type.
    """
    match RecordKind.from_rdtype(rrset.rdtype):
        case RecordKind.A:
            return dns.rrset.from_text(
                rrset.name, rrset.ttl, rrset.rdclass, dns.rdatatype.A, IPV4_LOOPBACK
            )
        case RecordKind.AAAA:
            return dns.rrset.from_text(
                rrset.name, rrset.ttl, rrset.rdclass, dns.rdatatype.AAAA, IPV6_LOOPBACK
            )
        case RecordKind.OTHER:
            return rrset


def rewrite_answer(
    answer: dns.message.Message | None, query: dns.message.Message
) -> dns.message.Message:
    """Build a sanitized answer for a blocked query.

    The new message carries the client's questions, the response flag, the
    mapped answer section, and the upstream answer's ID, flags (opcode and
    rcode included), authority and additional sections and EDNS settings.

    Args:
        answer: Upstream answer, or None if the upstream gave none.
        query: Original client query.

    Returns:
        dns.message.Message: Freshly built sanitized answer.

    Raises:
        UpstreamFailure: If there is no upstream answer to rewrite.
    """
    if answer is None:
        raise UpstreamFailure("No upstream answer to rewrite")

    sanitized = dns.message.Message(id=answer.id)
    sanitized.flags = answer.flags | dns.flags.QR
    sanitized.use_edns(
        answer.edns,
        answer.ednsflags,
        answer.payload,
        options=answer.options,
    )

    sanitized.question = list(query.question)
    sanitized.answer = [sinkhole_rrset(rrset) for rrset in answer.answer]
    sanitized.authority = list(answer.authority)
    sanitized.additional = list(answer.additional)

    return sanitized
