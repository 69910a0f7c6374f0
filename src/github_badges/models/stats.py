"""Repository totals and rank models for the stats card."""

from datetime import datetime, timedelta
from typing import Any

from pydantic import BaseModel, Field

# Repositories pushed to within this window count as active
ACTIVE_WINDOW = timedelta(days=365)


class AccountTotals(BaseModel):
    """Global counts carried by the first page of the repository query."""

    pull_requests: int = 0
    issues: int = 0

    @classmethod
    def from_graphql(cls, user: dict[str, Any]) -> "AccountTotals":
        """Create from the GraphQL user object."""
        return cls(
            pull_requests=(user.get("pullRequests") or {}).get("totalCount") or 0,
            issues=(user.get("issues") or {}).get("totalCount") or 0,
        )


class RepoAggregate(BaseModel):
    """Totals accumulated across repository pages."""

    total_stars: int = 0
    total_forks: int = 0
    repo_count: int = 0
    active_repos_last_year: int = 0

    def add_repository(self, repo: dict[str, Any], now: datetime) -> None:
        """Add one GraphQL repository node."""
        self.total_stars += repo.get("stargazerCount") or 0
        self.total_forks += repo.get("forkCount") or 0
        pushed_at = _parse_datetime(repo.get("pushedAt"))
        if pushed_at is not None and pushed_at >= now - ACTIVE_WINDOW:
            self.active_repos_last_year += 1


class RankInputs(BaseModel):
    """Raw counts feeding the rank model."""

    total_commits: int = Field(default=0, ge=0)
    prs: int = Field(default=0, ge=0)
    issues: int = Field(default=0, ge=0)
    reviews: int = Field(default=0, ge=0)
    stars: int = Field(default=0, ge=0)
    followers: int = Field(default=0, ge=0)


class RankResult(BaseModel):
    """Letter grade and percentile; a lower percentile is a better rank."""

    level: str
    percentile: float = Field(ge=0, le=100)


class StatsSummary(BaseModel):
    """Everything the stats card shows."""

    login: str
    repos: RepoAggregate
    inputs: RankInputs
    rank: RankResult


def _parse_datetime(value: str | None) -> datetime | None:
    """Parse ISO datetime string."""
    if not value:
        return None
    try:
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        return datetime.fromisoformat(value)
    except (ValueError, TypeError):
        return None
