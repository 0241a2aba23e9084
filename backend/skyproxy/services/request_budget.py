"""Upstream request budget — informational counter of calls made since startup."""

from dataclasses import dataclass


@dataclass
class RequestBudget:
    """Counts upstream calls against a soft ceiling. Never blocks a call."""
    limit: int = 150
    count: int = 0

    @property
    def remaining(self) -> int:
        return self.limit - self.count

    def increment(self) -> int:
        self.count += 1
        return self.count

    def snapshot(self) -> dict:
        return {"count": self.count, "limit": self.limit, "remaining": self.remaining}

    def meta(self) -> dict:
        """Counters in the shape attached to search responses."""
        return {
            "requestCount": self.count,
            "requestLimit": self.limit,
            "requestsRemaining": self.remaining,
        }
