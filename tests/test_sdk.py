"""Tests for BadgeClient SDK class."""

from datetime import date, datetime, timezone
from unittest.mock import AsyncMock, patch

import pytest

from github_badges import BadgeClient
from github_badges.config import Config
from github_badges.exceptions import ConfigurationError, GitHubBadgesError
from github_badges.models.contribution import StreakSummary
from github_badges.models.language import LanguageShare
from github_badges.models.rate_limit import RateLimitResource
from github_badges.models.stats import RankInputs, RankResult, RepoAggregate, StatsSummary

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


def make_stats() -> StatsSummary:
    return StatsSummary(
        login="octocat",
        repos=RepoAggregate(total_stars=5),
        inputs=RankInputs(stars=5),
        rank=RankResult(level="C", percentile=95.0),
    )


class TestBadgeClientContextManager:
    """Tests for async context manager behavior."""

    @pytest.mark.asyncio
    async def test_context_manager_initializes(self, test_config):
        """Test that context manager initializes clients."""
        async with BadgeClient(test_config) as client:
            assert client._initialized is True
            assert client._rest_client is not None
            assert client._graphql_client is not None
            assert client._rest_client.rate_limiter is client._graphql_client.rate_limiter

    @pytest.mark.asyncio
    async def test_context_manager_closes(self, test_config):
        """Test that context manager closes clients on exit."""
        client = BadgeClient(test_config)
        async with client:
            pass
        assert client._initialized is False

    @pytest.mark.asyncio
    async def test_clients_do_not_share_limiter(self, test_config):
        """Test that each client owns its own rate limiter."""
        async with BadgeClient(test_config) as first, BadgeClient(test_config) as second:
            assert first._rate_limiter is not second._rate_limiter

    @pytest.mark.asyncio
    async def test_missing_username_fails_fast(self):
        """Test that a missing username is rejected before any client exists."""
        client = BadgeClient(Config(github_token="t"))
        with pytest.raises(ConfigurationError, match="GITHUB_USERNAME"):
            async with client:
                pass
        assert client._rest_client is None

    @pytest.mark.asyncio
    async def test_missing_token_fails_fast(self):
        """Test that a missing token is rejected."""
        with pytest.raises(ConfigurationError, match="GITHUB_TOKEN"):
            async with BadgeClient(Config(github_username="octocat")):
                pass


class TestBadgeClientNotInitialized:
    """Tests for error handling when not initialized."""

    @pytest.mark.asyncio
    async def test_stats_without_init_raises(self, test_config):
        """Test that calling methods without initialization raises error."""
        client = BadgeClient(test_config)
        with pytest.raises(GitHubBadgesError, match="Client not initialized"):
            await client.stats()

    @pytest.mark.asyncio
    async def test_streak_without_init_raises(self, test_config):
        """Test that streak without initialization raises error."""
        client = BadgeClient(test_config)
        with pytest.raises(GitHubBadgesError, match="Client not initialized"):
            await client.streak()

    @pytest.mark.asyncio
    async def test_top_languages_without_init_raises(self, test_config):
        """Test that top_languages without initialization raises error."""
        client = BadgeClient(test_config)
        with pytest.raises(GitHubBadgesError, match="Client not initialized"):
            await client.top_languages()


class TestBadgeClientSummaries:
    """Tests for the summary methods."""

    @pytest.mark.asyncio
    async def test_top_languages(self, test_config):
        """Test that top languages are computed for the configured login."""
        shares = [LanguageShare(name="Python", color="#3572A5", percent=100)]

        with patch("github_badges.sdk.LanguageCollector") as MockCollector:
            mock_instance = MockCollector.return_value
            mock_instance.collect_top_languages = AsyncMock(return_value=shares)

            async with BadgeClient(test_config) as client:
                result = await client.top_languages()

            assert result == shares
            mock_instance.collect_top_languages.assert_called_once_with("octocat")
            assert MockCollector.call_args.kwargs["top"] == 6

    @pytest.mark.asyncio
    async def test_streak_passes_joining_year(self, test_config):
        """Test that the configured joining year reaches the collector."""
        test_config.joining_year = 2021
        summary = StreakSummary(current_streak=3, longest_streak=10)

        with patch("github_badges.sdk.ContributionCollector") as MockCollector:
            mock_instance = MockCollector.return_value
            mock_instance.collect_streak = AsyncMock(return_value=summary)

            async with BadgeClient(test_config) as client:
                result = await client.streak(now=NOW)

            assert result.longest_streak == 10
            assert MockCollector.call_args.kwargs["joining_year"] == 2021
            mock_instance.collect_streak.assert_called_once_with("octocat", now=NOW)

    @pytest.mark.asyncio
    async def test_stats_passes_all_commits(self, test_config):
        """Test that the commit counting mode reaches the collector."""
        test_config.all_commits = False

        with patch("github_badges.sdk.StatsCollector") as MockCollector:
            mock_instance = MockCollector.return_value
            mock_instance.collect_stats = AsyncMock(return_value=make_stats())

            async with BadgeClient(test_config) as client:
                result = await client.stats(now=NOW)

            assert result.repos.total_stars == 5
            assert MockCollector.call_args.kwargs["all_commits"] is False

    @pytest.mark.asyncio
    async def test_collect_all(self, test_config):
        """Test that all three summaries are returned together."""
        with (
            patch("github_badges.sdk.LanguageCollector") as MockLanguages,
            patch("github_badges.sdk.ContributionCollector") as MockContributions,
            patch("github_badges.sdk.StatsCollector") as MockStats,
        ):
            MockLanguages.return_value.collect_top_languages = AsyncMock(return_value=[])
            MockContributions.return_value.collect_streak = AsyncMock(
                return_value=StreakSummary(first_active_date=date(2020, 1, 1))
            )
            MockStats.return_value.collect_stats = AsyncMock(return_value=make_stats())

            async with BadgeClient(test_config) as client:
                data = await client.collect_all(now=NOW)

        assert data.languages == []
        assert data.streak.first_active_date == date(2020, 1, 1)
        assert data.stats.login == "octocat"

    @pytest.mark.asyncio
    async def test_rate_limits_refresh_local_budgets(self, test_config):
        """Test that fetched rate limits overwrite the local budget estimates."""
        resources = [
            RateLimitResource(
                name="graphql",
                limit=5000,
                remaining=12,
                reset=datetime(2030, 1, 1, tzinfo=timezone.utc),
            )
        ]
        async with BadgeClient(test_config) as client:
            client._rest_client.get_rate_limits = AsyncMock(return_value=resources)
            result = await client.rate_limits()

            assert result == resources
            assert client._rate_limiter.budget("graphql").remaining == 12
            assert client._rate_limiter.budget("core").remaining == 5000
