"""Contribution calendar collector service."""

import logging
from datetime import datetime, timedelta, timezone

from github_badges.models.contribution import (
    ContributionDay,
    StreakSummary,
    normalize_days,
)
from github_badges.services.github_graphql_client import GitHubGraphQLClient

logger = logging.getLogger(__name__)

# contributionsCollection refuses ranges longer than a year
MAX_WINDOW = timedelta(days=365)
# Gap between one window's end and the next window's start
WINDOW_STEP = timedelta(seconds=1)


def split_windows(
    start: datetime,
    end: datetime,
    max_span: timedelta = MAX_WINDOW,
) -> list[tuple[datetime, datetime]]:
    """Split [start, end] into consecutive windows no longer than max_span.

    Each window after the first starts one second past the previous end so
    the boundary instant is not requested twice.
    """
    windows = []
    window_start = start
    while window_start < end:
        window_end = min(end, window_start + max_span)
        windows.append((window_start, window_end))
        window_start = window_end + WINDOW_STEP
    return windows


class ContributionCollector:
    """Collects the contribution calendar since the join date and computes streaks."""

    def __init__(
        self,
        graphql_client: GitHubGraphQLClient,
        joining_year: int | None = None,
    ):
        self.graphql_client = graphql_client
        self.joining_year = joining_year

    async def resolve_join_date(self, login: str) -> datetime:
        """Start of the calendar: Jan 1 of the joining year, else account creation."""
        if self.joining_year is not None:
            return datetime(self.joining_year, 1, 1, tzinfo=timezone.utc)
        return await self.graphql_client.get_account_created_at(login)

    async def collect_days(
        self,
        login: str,
        from_datetime: datetime,
        to_datetime: datetime,
    ) -> tuple[list[ContributionDay], int]:
        """Fetch every window's calendar.

        Args:
            login: GitHub username
            from_datetime: Start of the range
            to_datetime: End of the range

        Returns:
            Tuple of (days unique by date sorted ascending, sum of window totals)
        """
        days: list[ContributionDay] = []
        total = 0

        for window_start, window_end in split_windows(from_datetime, to_datetime):
            logger.debug(
                "Fetching contributions for %s from %s to %s",
                login,
                window_start.isoformat(),
                window_end.isoformat(),
            )
            window = await self.graphql_client.get_contribution_window(
                login, window_start, window_end
            )
            days.extend(window.days)
            total += window.total_contributions

        return normalize_days(days), total

    async def collect_streak(
        self,
        login: str,
        now: datetime | None = None,
    ) -> StreakSummary:
        """Collect contribution streak statistics for a user.

        Args:
            login: GitHub username
            now: End of the range (defaults to the current time)

        Returns:
            StreakSummary with totals, streak lengths and their date ranges
        """
        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        join_date = await self.resolve_join_date(login)

        days, total = await self.collect_days(login, join_date, now)
        summary = StreakSummary.from_days(days, total_contributions=total)

        logger.debug(
            "Found %d contributions over %d days (current=%d, longest=%d)",
            summary.total_contributions,
            len(days),
            summary.current_streak,
            summary.longest_streak,
        )
        return summary
