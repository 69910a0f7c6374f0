"""Contribution calendar and streak models."""

from datetime import date
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field


class ContributionDay(BaseModel):
    """Single day in contribution calendar."""

    model_config = ConfigDict(frozen=True)

    date: date
    count: int = Field(default=0, ge=0)

    @classmethod
    def from_graphql(cls, data: dict[str, Any]) -> "ContributionDay":
        """Create from a GraphQL contributionDays entry."""
        return cls(
            date=date.fromisoformat(data["date"]),
            count=data.get("contributionCount") or 0,
        )


class ContributionWindow(BaseModel):
    """Calendar for one sub-window of at most a year."""

    total_contributions: int = 0
    days: list[ContributionDay] = Field(default_factory=list)

    @classmethod
    def from_graphql(cls, data: dict[str, Any]) -> "ContributionWindow":
        """Create from a GraphQL contributionCalendar object."""
        days = [
            ContributionDay.from_graphql(day)
            for week in data.get("weeks") or []
            for day in week.get("contributionDays") or []
        ]
        return cls(
            total_contributions=data.get("totalContributions") or 0,
            days=days,
        )


def normalize_days(days: Iterable[ContributionDay]) -> list[ContributionDay]:
    """Make a day sequence unique by date and sort it ascending.

    Window seams can report the same date twice; the larger count wins.
    """
    by_date: dict[date, ContributionDay] = {}
    for day in days:
        seen = by_date.get(day.date)
        if seen is None or day.count > seen.count:
            by_date[day.date] = day
    return sorted(by_date.values(), key=lambda d: d.date)


class StreakSummary(BaseModel):
    """Streak statistics derived from a sorted contribution day sequence."""

    current_streak: int = 0
    longest_streak: int = 0
    longest_range_start: date | None = None
    longest_range_end: date | None = None
    current_range_start: date | None = None
    current_range_end: date | None = None
    total_contributions: int = 0
    first_active_date: date | None = None

    @classmethod
    def from_days(
        cls,
        days: list[ContributionDay],
        total_contributions: int = 0,
    ) -> "StreakSummary":
        """Compute streaks over days sorted ascending by date.

        The last day in the sequence is treated as today: if it has no
        contributions the current streak is 0.
        """
        # Longest streak, keeping the first run that reaches the maximum
        longest = 0
        best_start = best_end = -1
        run_start = run_length = 0
        for i, day in enumerate(days):
            if day.count > 0:
                if run_length == 0:
                    run_start = i
                run_length += 1
                if run_length > longest:
                    longest = run_length
                    best_start, best_end = run_start, i
            else:
                run_length = 0

        # Current streak, counted back from the most recent day
        current = 0
        for day in reversed(days):
            if day.count > 0:
                current += 1
            else:
                break

        first_active = next((d.date for d in days if d.count > 0), None)

        summary = cls(
            current_streak=current,
            longest_streak=longest,
            total_contributions=total_contributions,
            first_active_date=first_active,
        )
        if longest > 0:
            summary.longest_range_start = days[best_start].date
            summary.longest_range_end = days[best_end].date
        if current > 0:
            summary.current_range_start = days[len(days) - current].date
            summary.current_range_end = days[-1].date
        return summary
