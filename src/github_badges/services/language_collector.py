"""Top languages collector service."""

import logging

from github_badges.models.language import LanguageShare, LanguageTally
from github_badges.services.github_graphql_client import GitHubGraphQLClient

logger = logging.getLogger(__name__)


class LanguageCollector:
    """Aggregates language sizes over all owned, non-fork repositories."""

    def __init__(self, graphql_client: GitHubGraphQLClient, top: int = 6):
        self.graphql_client = graphql_client
        self.top = top

    async def collect_tally(self, login: str) -> LanguageTally:
        """Sum language sizes across every repository page.

        Args:
            login: GitHub username

        Returns:
            LanguageTally holding one running total per language name
        """
        tally = LanguageTally()
        repo_count = 0

        async for page in self.graphql_client.iter_language_pages(login):
            for repo in page.nodes:
                tally.add_repository(repo)
            repo_count += len(page.nodes)

        logger.debug(
            "Counted %d languages over %d repositories for %s",
            len(tally.totals),
            repo_count,
            login,
        )
        return tally

    async def collect_top_languages(self, login: str) -> list[LanguageShare]:
        """Top languages by share of total bytes, largest first."""
        tally = await self.collect_tally(login)
        shares = tally.shares(limit=self.top)
        if not shares:
            logger.info("No languages detected for %s", login)
        return shares
