"""GitHub GraphQL API client for repository and contribution data."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Optional

from github_badges.exceptions import GitHubGraphQLError
from github_badges.models.contribution import ContributionWindow
from github_badges.models.stats import AccountTotals
from github_badges.services.base_client import (
    USER_AGENT,
    BaseGitHubClient,
    retry_transport_errors,
)
from github_badges.utils.pagination import has_next_page

logger = logging.getLogger(__name__)

# Owned, non-fork repositories with their largest languages
LANGUAGES_QUERY = """
query($login: String!, $after: String, $perPage: Int!, $languages: Int!) {
  user(login: $login) {
    repositories(
      first: $perPage
      after: $after
      ownerAffiliations: OWNER
      isFork: false
    ) {
      nodes {
        name
        languages(first: $languages, orderBy: {field: SIZE, direction: DESC}) {
          edges {
            size
            node {
              name
              color
            }
          }
        }
      }
      pageInfo {
        hasNextPage
        endCursor
      }
    }
  }
}
"""

# Owned repositories for stars/forks/activity; PR and issue totals ride along
STATS_QUERY = """
query($login: String!, $after: String, $perPage: Int!) {
  user(login: $login) {
    repositories(first: $perPage, ownerAffiliations: OWNER, after: $after) {
      totalCount
      nodes {
        name
        stargazerCount
        forkCount
        pushedAt
      }
      pageInfo {
        hasNextPage
        endCursor
      }
    }
    pullRequests {
      totalCount
    }
    issues {
      totalCount
    }
  }
}
"""

CONTRIBUTIONS_QUERY = """
query($login: String!, $from: DateTime!, $to: DateTime!) {
  user(login: $login) {
    contributionsCollection(from: $from, to: $to) {
      contributionCalendar {
        totalContributions
        weeks {
          contributionDays {
            date
            contributionCount
          }
        }
      }
    }
  }
}
"""

ACCOUNT_CREATED_QUERY = """
query($login: String!) {
  user(login: $login) {
    createdAt
  }
}
"""


@dataclass
class RepositoryPage:
    """One page of a user's repository connection.

    Only the first page of the stats query carries account totals.
    """

    nodes: list[dict[str, Any]]
    total_count: int = 0
    totals: AccountTotals | None = None


def format_datetime(value: datetime) -> str:
    """Format an aware or naive-UTC datetime as a GraphQL DateTime."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%SZ")


class GitHubGraphQLClient(BaseGitHubClient):
    """Async client for GitHub GraphQL API."""

    def _get_headers(self) -> dict[str, str]:
        """Get headers for API requests."""
        if not self.config.github_token:
            raise GitHubGraphQLError(
                "GitHub token is required for GraphQL API. "
                "Set GITHUB_TOKEN environment variable."
            )

        return {
            "Authorization": f"Bearer {self.config.github_token}",
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }

    @retry_transport_errors
    async def execute(
        self,
        query: str,
        variables: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """Execute a GraphQL query.

        Args:
            query: GraphQL query string
            variables: Query variables

        Returns:
            Query result data

        Raises:
            GitHubGraphQLError: If the query fails
        """
        await self.rate_limiter.acquire("graphql")

        client = await self._get_client()
        payload: dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables

        response = await client.post(self.config.github_graphql_url, json=payload)

        self.rate_limiter.update_from_headers("graphql", response.headers)

        if response.status_code != 200:
            raise GitHubGraphQLError(
                f"GraphQL request failed with status {response.status_code}: {response.text}"
            )

        result = response.json()

        if result.get("errors"):
            error_messages = [e.get("message", "Unknown error") for e in result["errors"]]
            raise GitHubGraphQLError(
                f"GraphQL errors: {'; '.join(error_messages)}",
                errors=result["errors"],
            )

        return result.get("data") or {}

    async def _get_user(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        result = await self.execute(query, variables)
        user = result.get("user")
        if not user:
            raise GitHubGraphQLError(f"Could not fetch user data for {variables['login']}")
        return user

    async def paginate_repositories(
        self,
        query: str,
        variables: dict[str, Any],
    ) -> AsyncIterator[RepositoryPage]:
        """Yield pages of the user's repository connection until it is drained.

        Pagination is strictly forward: each request passes the previous
        page's endCursor. The first page also carries account totals when the
        query selects them.
        """
        after: str | None = None
        first = True

        while True:
            user = await self._get_user(query, {**variables, "after": after})
            connection = user.get("repositories") or {}

            page = RepositoryPage(
                nodes=connection.get("nodes") or [],
                total_count=connection.get("totalCount") or 0,
                totals=AccountTotals.from_graphql(user) if first else None,
            )
            logger.debug("Fetched repository page with %d nodes", len(page.nodes))
            yield page

            page_info = connection.get("pageInfo")
            if not has_next_page(page_info):
                break
            after = page_info.get("endCursor")
            if not after:
                raise GitHubGraphQLError("hasNextPage without endCursor")
            first = False

    def iter_language_pages(self, login: str) -> AsyncIterator[RepositoryPage]:
        """Pages of owned non-fork repositories with their language edges."""
        return self.paginate_repositories(
            LANGUAGES_QUERY,
            {
                "login": login,
                "perPage": self.config.default_per_page,
                "languages": self.config.languages_per_repo,
            },
        )

    def iter_stats_pages(self, login: str) -> AsyncIterator[RepositoryPage]:
        """Pages of owned repositories; the first one carries PR/issue totals."""
        return self.paginate_repositories(
            STATS_QUERY,
            {"login": login, "perPage": self.config.default_per_page},
        )

    async def get_contribution_window(
        self,
        login: str,
        from_datetime: datetime,
        to_datetime: datetime,
    ) -> ContributionWindow:
        """Get the contribution calendar for a window of at most one year.

        Args:
            login: GitHub username
            from_datetime: Window start
            to_datetime: Window end

        Returns:
            ContributionWindow with days and the window's reported total
        """
        variables = {
            "login": login,
            "from": format_datetime(from_datetime),
            "to": format_datetime(to_datetime),
        }
        user = await self._get_user(CONTRIBUTIONS_QUERY, variables)
        collection = user.get("contributionsCollection") or {}
        return ContributionWindow.from_graphql(collection.get("contributionCalendar") or {})

    async def get_account_created_at(self, login: str) -> datetime:
        """Get the account creation timestamp."""
        user = await self._get_user(ACCOUNT_CREATED_QUERY, {"login": login})
        value = user.get("createdAt")
        if not value:
            raise GitHubGraphQLError(f"No creation date reported for {login}")
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        return datetime.fromisoformat(value)
