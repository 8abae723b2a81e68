"""Run statistics snapshot model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RunStatistics:
    """Point-in-time view of the query counters.

    Attributes:
        total_queries: Answered queries since startup.
        blocked_queries: Answered queries classified as blocked.

    Invariants:
        - 0 <= blocked_queries <= total_queries
    """

    total_queries: int = 0
    blocked_queries: int = 0

    @property
    def percentage(self) -> float:
        """Share of blocked queries, rounded to two decimals.

        Returns:
            float: Percentage between 0.0 and 100.0, or 0.0 if nothing was recorded.
        """
        if self.total_queries == 0:
            return 0.0
        return round(self.blocked_queries / self.total_queries * 100, 2)

    def render(self) -> str:
        """Format the status line shown on the console.

        Example:
            >>> RunStatistics(total_queries=3, blocked_queries=1).render()
            'Block count: 1/3 (33.33%)'
        """
        return (
            f"Block count: {self.blocked_queries}/{self.total_queries} "
            f"({self.percentage}%)"
        )

    def to_json(self) -> dict:
        return {
            "total_queries": self.total_queries,
            "blocked_queries": self.blocked_queries,
            "block_percentage": self.percentage,
        }
