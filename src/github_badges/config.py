"""Configuration management for GitHub Badges."""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from github_badges.exceptions import ConfigurationError

THEMES = ("light", "dark")


def _parse_bool(value: str | None, default: bool) -> bool:
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _parse_int(value: str | None) -> int | None:
    if value is None or value.strip() == "":
        return None
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"Expected an integer, got {value!r}")


@dataclass
class Config:
    """Application configuration."""

    github_token: str | None = None
    github_username: str | None = None
    github_api_url: str = "https://api.github.com"
    github_graphql_url: str = "https://api.github.com/graphql"

    # Streak window starts on Jan 1 of this year; None means account creation date
    joining_year: int | None = None

    # Rank model: commit median is 1000 when counting all commits, 250 otherwise
    all_commits: bool = True

    # Pagination
    default_per_page: int = 100
    languages_per_repo: int = 10
    top_languages: int = 6

    # Review traversal fans out over this many PRs at a time
    review_batch_size: int = 10

    # Boundary
    cache_ttl_seconds: int = 600
    default_theme: str = "light"

    # Timeouts
    request_timeout: float = 30.0

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        # override=False ensures environment variables take precedence over .env
        load_dotenv(override=False)

        ttl = _parse_int(os.getenv("BADGES_CACHE_TTL"))
        theme = os.getenv("BADGES_THEME") or "light"
        if theme not in THEMES:
            raise ConfigurationError(f"Unknown theme in BADGES_THEME: {theme}")

        return cls(
            github_token=os.getenv("GITHUB_TOKEN") or None,
            github_username=os.getenv("GITHUB_USERNAME") or None,
            github_api_url=os.getenv("GITHUB_API_URL", "https://api.github.com"),
            github_graphql_url=os.getenv(
                "GITHUB_GRAPHQL_URL", "https://api.github.com/graphql"
            ),
            joining_year=_parse_int(os.getenv("GITHUB_JOINING_YEAR")),
            all_commits=_parse_bool(os.getenv("GITHUB_ALL_COMMITS"), True),
            cache_ttl_seconds=ttl if ttl is not None else 600,
            default_theme=theme,
        )

    @property
    def is_authenticated(self) -> bool:
        """Check if a GitHub token is configured."""
        return bool(self.github_token)

    @property
    def has_username(self) -> bool:
        """Check if the account identity is configured."""
        return bool(self.github_username)

    def validate(self) -> None:
        """Fail fast when the account identity or the access token is missing.

        Raises:
            ConfigurationError: naming the first missing variable
        """
        if not self.has_username:
            raise ConfigurationError("Add github username in env.GITHUB_USERNAME")
        if not self.is_authenticated:
            raise ConfigurationError("Add github token in env.GITHUB_TOKEN")
