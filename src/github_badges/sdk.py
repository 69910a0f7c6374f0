"""GitHub Badges SDK - High-level API for computing card summaries."""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import httpx

from github_badges.config import Config
from github_badges.exceptions import GitHubBadgesError
from github_badges.models.contribution import StreakSummary
from github_badges.models.language import LanguageShare
from github_badges.models.rate_limit import RateLimitResource
from github_badges.models.stats import StatsSummary
from github_badges.services.contribution_collector import ContributionCollector
from github_badges.services.github_graphql_client import GitHubGraphQLClient
from github_badges.services.github_rest_client import GitHubRestClient
from github_badges.services.language_collector import LanguageCollector
from github_badges.services.stats_collector import StatsCollector
from github_badges.utils.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


@dataclass
class CardData:
    """The three summaries, one per card."""

    languages: list[LanguageShare]
    streak: StreakSummary
    stats: StatsSummary


class BadgeClient:
    """High-level SDK for computing the data behind the badge cards.

    Clients are built from the given configuration when the context is
    entered and are owned by this instance; nothing is shared between
    instances.

    Example usage:
        ```python
        from github_badges import BadgeClient, Config

        async with BadgeClient(Config.from_env()) as client:
            languages = await client.top_languages()
            streak = await client.streak()
            stats = await client.stats()
        ```

    Args:
        config: Application configuration; username and token are required.
        transport: Optional httpx transport shared by both API clients.
    """

    def __init__(
        self,
        config: Config,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._config = config
        self._transport = transport
        self._rate_limiter: RateLimiter | None = None
        self._rest_client: GitHubRestClient | None = None
        self._graphql_client: GitHubGraphQLClient | None = None
        self._initialized = False

    @property
    def login(self) -> str:
        return self._config.github_username or ""

    async def __aenter__(self) -> "BadgeClient":
        """Async context manager entry."""
        await self._initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    async def _initialize(self) -> None:
        """Validate configuration and build clients."""
        if self._initialized:
            return

        self._config.validate()

        self._rate_limiter = RateLimiter()
        self._rest_client = GitHubRestClient(
            config=self._config,
            rate_limiter=self._rate_limiter,
            transport=self._transport,
        )
        self._graphql_client = GitHubGraphQLClient(
            config=self._config,
            rate_limiter=self._rate_limiter,
            transport=self._transport,
        )

        self._initialized = True
        logger.debug("BadgeClient initialized for %s", self.login)

    async def close(self) -> None:
        """Close all HTTP connections."""
        if self._rest_client:
            await self._rest_client.close()
        if self._graphql_client:
            await self._graphql_client.close()
        self._initialized = False
        logger.debug("BadgeClient closed")

    def _ensure_initialized(self) -> None:
        """Ensure the client is initialized."""
        if not self._initialized:
            raise GitHubBadgesError(
                "Client not initialized. Use 'async with BadgeClient(...) as client:'"
            )

    async def top_languages(self) -> list[LanguageShare]:
        """Get the user's most used languages (at most six)."""
        self._ensure_initialized()
        logger.info("Fetching top languages for %s", self.login)

        collector = LanguageCollector(self._graphql_client, top=self._config.top_languages)
        return await collector.collect_top_languages(self.login)

    async def streak(self, now: datetime | None = None) -> StreakSummary:
        """Get contribution totals and streaks since the join date."""
        self._ensure_initialized()
        logger.info("Fetching contribution streak for %s", self.login)

        collector = ContributionCollector(
            self._graphql_client,
            joining_year=self._config.joining_year,
        )
        return await collector.collect_streak(self.login, now=now)

    async def stats(self, now: datetime | None = None) -> StatsSummary:
        """Get repository totals, rank inputs and the rank."""
        self._ensure_initialized()
        logger.info("Fetching stats for %s", self.login)

        collector = StatsCollector(
            self._rest_client,
            self._graphql_client,
            all_commits=self._config.all_commits,
            review_batch_size=self._config.review_batch_size,
        )
        return await collector.collect_stats(self.login, now=now)

    async def collect_all(self, now: datetime | None = None) -> CardData:
        """Compute all three summaries concurrently."""
        self._ensure_initialized()

        languages, streak, stats = await asyncio.gather(
            self.top_languages(),
            self.streak(now=now),
            self.stats(now=now),
        )
        return CardData(languages=languages, streak=streak, stats=stats)

    async def rate_limits(self) -> list[RateLimitResource]:
        """Get current rate limit usage for every API bucket.

        The local budgets are refreshed from the answer as a side effect.
        """
        self._ensure_initialized()
        resources = await self._rest_client.get_rate_limits()
        self._rate_limiter.sync(resources)
        return resources
