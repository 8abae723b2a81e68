"""Per-query processing pipeline.

Sequence for every inbound query:
    classify -> forward upstream -> rewrite (blocked) or pass through
    -> record statistics -> optional query log -> return answer
"""

import logging
from typing import List

import dns.message
import dns.rcode
import dns.rdatatype

from sinkhole.exceptions import UpstreamFailure
from sinkhole.services.classifier import QueryClassifier
from sinkhole.services.reporter import QueryReporter
from sinkhole.services.rewriter import rewrite_answer
from sinkhole.services.statistics import StatisticsTracker
from sinkhole.services.upstream import UpstreamResolver


logger = logging.getLogger(__name__)


def describe_question(query: dns.message.Message) -> tuple[str, str]:
    """Get name and type of the first question, for logging.

    Returns:
        tuple[str, str]: (name, type), or ("", "") for a query without questions.
    """
    if not query.question:
        return "", ""
    question = query.question[0]
    return question.name.to_text(), dns.rdatatype.to_text(question.rdtype)


def answer_addresses(answer: dns.message.Message) -> List[str]:
    """Collect A/AAAA addresses from the answer section."""
    return [
        rdata.address
        for rrset in answer.answer
        if rrset.rdtype in (dns.rdatatype.A, dns.rdatatype.AAAA)
        for rdata in rrset
    ]


class QueryPipeline:
    """Handler invoked by the listener once per inbound query.

    Attributes:
        classifier: Blacklist classifier (read-only, shared).
        upstream: Upstream resolver client.
        statistics: Run statistics, updated once per answered query.
        reporter: Background reporter for the status line and query log, or None.
    """

    def __init__(
        self,
        classifier: QueryClassifier,
        upstream: UpstreamResolver,
        statistics: StatisticsTracker,
        reporter: QueryReporter | None = None,
    ):
        self.classifier = classifier
        self.upstream = upstream
        self.statistics = statistics
        self.reporter = reporter

    def handle(self, query: dns.message.Message) -> dns.message.Message:
        """Resolve one client query.

        Args:
            query: Parsed client query.

        Returns:
            dns.message.Message: Sanitized answer for blocked queries, the
            upstream answer object itself otherwise.

        Raises:
            UpstreamFailure: If the upstream gave no answer. Nothing is
            recorded in the statistics for such queries.
        """
        blocked = self.classifier.is_blocked(query)

        try:
            answer = self.upstream.send(query)
        except UpstreamFailure as e:
            name, _ = describe_question(query)
            logger.warning(f"No upstream answer for {name}: {e}")
            raise

        if blocked:
            answer = rewrite_answer(answer, query)

        self._log_query(query, answer, blocked)
        return answer

    def _log_query(
        self, query: dns.message.Message, answer: dns.message.Message, blocked: bool
    ) -> None:
        stats = self.statistics.record(blocked)
        if self.reporter is None:
            return

        query_entry = None
        if self.reporter.log_queries:
            name, record_type = describe_question(query)
            query_entry = {
                "name": name,
                "record_type": record_type,
                "blocked": blocked,
                "addresses": answer_addresses(answer),
                "rcode": dns.rcode.to_text(answer.rcode()),
            }
        # Console writes happen on the reporter thread, after the answer is returned
        self.reporter.report(stats, query_entry)
