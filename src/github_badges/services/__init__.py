"""Services for GitHub data collection."""

from github_badges.services.base_client import BaseGitHubClient
from github_badges.services.contribution_collector import ContributionCollector
from github_badges.services.github_graphql_client import GitHubGraphQLClient
from github_badges.services.github_rest_client import GitHubRestClient
from github_badges.services.language_collector import LanguageCollector
from github_badges.services.stats_collector import StatsCollector

__all__ = [
    "BaseGitHubClient",
    "GitHubRestClient",
    "GitHubGraphQLClient",
    "LanguageCollector",
    "ContributionCollector",
    "StatsCollector",
]
