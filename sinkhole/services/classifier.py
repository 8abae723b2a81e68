"""Query classification against the blacklist."""

import dns.message

from sinkhole.models.blacklist import BlacklistSet


class QueryClassifier:
    """Decides whether a query asks for a blacklisted name.

    Holds only a reference to the read-only BlacklistSet, so one instance is
    safely shared by all handler threads.
    """

    def __init__(self, blacklist: BlacklistSet):
        self.blacklist = blacklist

    def is_blocked(self, query: dns.message.Message) -> bool:
        """Check every question name of a query.

        Args:
            query: Inbound DNS query.

        Returns:
            bool: True if any question name is blacklisted, False otherwise
            (including queries without questions).
        """
        return any(
            question.name.to_text() in self.blacklist for question in query.question
        )
