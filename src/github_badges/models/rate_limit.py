"""Rate limit status models."""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel


class RateLimitResource(BaseModel):
    """One bucket from the /rate_limit endpoint (core, search, graphql, ...)."""

    name: str
    limit: int = 0
    remaining: int = 0
    reset: datetime

    @classmethod
    def from_api(cls, name: str, data: dict[str, Any]) -> "RateLimitResource":
        """Create from a GitHub REST /rate_limit resource entry."""
        return cls(
            name=name,
            limit=data.get("limit", 0),
            remaining=data.get("remaining", 0),
            reset=datetime.fromtimestamp(data.get("reset", 0), tz=timezone.utc),
        )

    @property
    def used(self) -> int:
        return self.limit - self.remaining

    @property
    def usage_percent(self) -> float:
        """Share of the bucket already spent, 0 when the bucket is empty."""
        if self.limit <= 0:
            return 0.0
        return self.used / self.limit * 100

    @property
    def seconds_until_reset(self) -> float:
        return max(0.0, self.reset.timestamp() - datetime.now(timezone.utc).timestamp())
