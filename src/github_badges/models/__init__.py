"""Data models for GitHub Badges."""

from github_badges.models.contribution import (
    ContributionDay,
    ContributionWindow,
    StreakSummary,
)
from github_badges.models.language import LanguageShare, LanguageTally, LanguageTotal
from github_badges.models.rate_limit import RateLimitResource
from github_badges.models.stats import (
    AccountTotals,
    RankInputs,
    RankResult,
    RepoAggregate,
    StatsSummary,
)

__all__ = [
    "LanguageTotal",
    "LanguageShare",
    "LanguageTally",
    "ContributionDay",
    "ContributionWindow",
    "StreakSummary",
    "AccountTotals",
    "RepoAggregate",
    "RankInputs",
    "RankResult",
    "StatsSummary",
    "RateLimitResource",
]
