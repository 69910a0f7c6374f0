"""GitHub Badges - SVG stats, streak and top-language cards for a GitHub account.

This SDK computes the data behind three cards:
- Top languages by bytes across owned, non-fork repositories
- Contribution totals and current/longest streaks since joining
- Repository totals, activity counts and a percentile rank

Example usage:
    ```python
    from github_badges import BadgeClient, Config

    async with BadgeClient(Config.from_env()) as client:
        stats = await client.stats()
        print(f"Rank: {stats.rank.level} (top {stats.rank.percentile:.1f}%)")
    ```
"""

from github_badges._version import version as __version__
from github_badges.config import Config
from github_badges.exceptions import (
    ConfigurationError,
    GitHubAPIError,
    GitHubBadgesError,
    GitHubGraphQLError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    RateLimitExceededError,
    UnknownThemeError,
)
from github_badges.models import (
    AccountTotals,
    ContributionDay,
    ContributionWindow,
    LanguageShare,
    LanguageTally,
    LanguageTotal,
    RankInputs,
    RankResult,
    RateLimitResource,
    RepoAggregate,
    StatsSummary,
    StreakSummary,
)
from github_badges.rank import calculate_rank
from github_badges.sdk import BadgeClient, CardData

__all__ = [
    "__version__",
    # Main SDK class
    "BadgeClient",
    "CardData",
    # Configuration
    "Config",
    # Rank model
    "calculate_rank",
    # Exceptions
    "GitHubBadgesError",
    "ConfigurationError",
    "GitHubAPIError",
    "GitHubRateLimitError",
    "GitHubNotFoundError",
    "GitHubGraphQLError",
    "RateLimitExceededError",
    "UnknownThemeError",
    # Models - Languages
    "LanguageTotal",
    "LanguageShare",
    "LanguageTally",
    # Models - Contributions
    "ContributionDay",
    "ContributionWindow",
    "StreakSummary",
    # Models - Stats
    "AccountTotals",
    "RepoAggregate",
    "RankInputs",
    "RankResult",
    "StatsSummary",
    "RateLimitResource",
]
