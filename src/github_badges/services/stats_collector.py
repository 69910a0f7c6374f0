"""Stats card collector service."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import AsyncIterator

from github_badges.models.stats import (
    AccountTotals,
    RankInputs,
    RepoAggregate,
    StatsSummary,
)
from github_badges.rank import calculate_rank
from github_badges.services.github_graphql_client import GitHubGraphQLClient
from github_badges.services.github_rest_client import GitHubRestClient

logger = logging.getLogger(__name__)


class StatsCollector:
    """Fans in repository totals, commits, reviews and followers, then ranks them."""

    def __init__(
        self,
        rest_client: GitHubRestClient,
        graphql_client: GitHubGraphQLClient,
        all_commits: bool = True,
        review_batch_size: int = 10,
    ):
        self.rest_client = rest_client
        self.graphql_client = graphql_client
        self.all_commits = all_commits
        self.review_batch_size = max(1, review_batch_size)

    async def collect_repo_aggregate(
        self,
        login: str,
        now: datetime,
    ) -> tuple[RepoAggregate, AccountTotals]:
        """Aggregate stars, forks and activity over every repository page.

        The first page also yields the account's PR and issue totals; later
        pages only contribute repositories.

        Returns:
            Tuple of (RepoAggregate, AccountTotals)
        """
        pages = self.graphql_client.iter_stats_pages(login)
        aggregate = RepoAggregate()

        first = await anext(pages)
        totals = first.totals or AccountTotals()
        aggregate.repo_count = first.total_count
        for repo in first.nodes:
            aggregate.add_repository(repo, now)

        async for page in pages:
            aggregate.repo_count = page.total_count or aggregate.repo_count
            for repo in page.nodes:
                aggregate.add_repository(repo, now)

        logger.debug(
            "Aggregated %d repositories for %s (%d stars, %d forks)",
            aggregate.repo_count,
            login,
            aggregate.total_stars,
            aggregate.total_forks,
        )
        return aggregate, totals

    async def collect_commit_count(self, login: str) -> int:
        """Total commits authored by the user, or 0 if the search fails.

        Commit search is a secondary metric: any failure, including a
        malformed answer, is logged and never fails the card.
        """
        try:
            return await self.rest_client.search_commit_count(f"author:{login}")
        except Exception as e:
            logger.warning("Failed to search commits for %s: %s", login, e)
            return 0

    async def iter_review_counts(self, login: str) -> AsyncIterator[int]:
        """Yield the review count of every pull request in every owned repository.

        Repositories and pull requests paginate independently; a repository
        with no pull requests or a pull request with no reviews simply
        contributes nothing.
        """
        async for repo in self.rest_client.iter_owner_repos(login):
            owner = (repo.get("owner") or {}).get("login") or login
            name = repo["name"]
            async for pulls in self.rest_client.iter_pull_requests(owner, name):
                for i in range(0, len(pulls), self.review_batch_size):
                    batch = pulls[i : i + self.review_batch_size]
                    counts = await asyncio.gather(
                        *(
                            self.rest_client.count_reviews(owner, name, pr["number"])
                            for pr in batch
                        )
                    )
                    for count in counts:
                        yield count

    async def collect_review_count(self, login: str) -> int:
        """Total reviews across all pull requests of all owned repositories."""
        total = 0
        async for count in self.iter_review_counts(login):
            total += count
        logger.debug("Found %d reviews for %s", total, login)
        return total

    async def collect_follower_count(self, login: str) -> int:
        """Follower count from the user profile."""
        data = await self.rest_client.get_user(login)
        return data.get("followers") or 0

    async def collect_stats(
        self,
        login: str,
        now: datetime | None = None,
    ) -> StatsSummary:
        """Collect every stats source and rank the result.

        Args:
            login: GitHub username
            now: Reference time for repository activity (defaults to now)

        Returns:
            StatsSummary with repository totals, rank inputs and the rank
        """
        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)

        tasks = [
            asyncio.ensure_future(source)
            for source in (
                self.collect_repo_aggregate(login, now),
                self.collect_commit_count(login),
                self.collect_review_count(login),
                self.collect_follower_count(login),
            )
        ]
        try:
            (repos, totals), commits, reviews, followers = await asyncio.gather(*tasks)
        except Exception:
            # The first failure decides the card; stop the remaining traversals
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        inputs = RankInputs(
            total_commits=commits,
            prs=totals.pull_requests,
            issues=totals.issues,
            reviews=reviews,
            stars=repos.total_stars,
            followers=followers,
        )
        rank = calculate_rank(inputs, all_commits=self.all_commits)

        logger.info("Ranked %s at %s (%.2f percentile)", login, rank.level, rank.percentile)

        return StatsSummary(login=login, repos=repos, inputs=inputs, rank=rank)
