"""Per-client budget tracking for GitHub's rate limit buckets."""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from rich.console import Console

from github_badges.exceptions import RateLimitExceededError
from github_badges.models.rate_limit import RateLimitResource

logger = logging.getLogger(__name__)

console = Console()

# Warn when fewer requests than this remain in a required bucket
LOW_REMAINING_THRESHOLD = 10

# Buckets the cards draw from: name -> (authenticated limit, window in seconds)
BUCKET_DEFAULTS: dict[str, tuple[int, int]] = {
    "core": (5000, 3600),
    "search": (30, 60),
    "graphql": (5000, 3600),
}

# A card cannot be built once either of these is empty
REQUIRED_BUCKETS = ("core", "graphql")


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'}"


def format_time_remaining(seconds: float) -> str:
    """Human-friendly duration, e.g. '1 min 30 sec' or '2 hours'."""
    if seconds <= 0:
        return "now"

    minutes, secs = divmod(int(seconds), 60)
    hours, minutes = divmod(minutes, 60)

    if hours:
        return f"{hours} hr {minutes} min" if minutes else _plural(hours, "hour")
    if minutes:
        return f"{minutes} min {secs} sec" if secs else _plural(minutes, "minute")
    return _plural(secs, "second")


def format_reset_time(reset_timestamp: float) -> str:
    """Local wall-clock time of a reset timestamp."""
    return time.strftime("%H:%M:%S", time.localtime(reset_timestamp))


@dataclass
class Budget:
    """Requests left in one bucket until its reset time."""

    name: str
    limit: int
    remaining: int
    reset_time: float  # Unix timestamp

    @classmethod
    def fresh(cls, name: str, limit: int, window_seconds: int) -> "Budget":
        return cls(name=name, limit=limit, remaining=limit, reset_time=time.time() + window_seconds)

    @property
    def seconds_until_reset(self) -> float:
        return max(0.0, self.reset_time - time.time())

    def update_from_headers(self, headers: Mapping[str, str]) -> None:
        """Refresh from x-ratelimit-* response headers."""
        if "x-ratelimit-limit" in headers:
            self.limit = int(headers["x-ratelimit-limit"])
        if "x-ratelimit-remaining" in headers:
            self.remaining = int(headers["x-ratelimit-remaining"])
        if "x-ratelimit-reset" in headers:
            self.reset_time = float(headers["x-ratelimit-reset"])

    def update_from_resource(self, resource: RateLimitResource) -> None:
        """Refresh from a /rate_limit resource entry."""
        self.limit = resource.limit
        self.remaining = resource.remaining
        self.reset_time = resource.reset.timestamp()


def _default_budgets() -> dict[str, Budget]:
    return {
        name: Budget.fresh(name, limit, window)
        for name, (limit, window) in BUCKET_DEFAULTS.items()
    }


@dataclass
class RateLimiter:
    """Tracks the core, search and GraphQL budgets of one BadgeClient.

    A request is refused locally, before it is sent, when its bucket is spent
    and the reset time has not passed yet.
    """

    budgets: dict[str, Budget] = field(default_factory=_default_budgets)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    def budget(self, bucket: str) -> Budget:
        return self.budgets[bucket]

    async def acquire(self, bucket: str, cost: int = 1) -> None:
        """Spend `cost` requests from a bucket.

        Raises:
            RateLimitExceededError: If the bucket is spent until a future reset
        """
        async with self._lock:
            budget = self.budgets[bucket]
            if budget.remaining < cost and budget.seconds_until_reset > 0:
                human_time = format_time_remaining(budget.seconds_until_reset)
                reset_at = format_reset_time(budget.reset_time)
                logger.warning(
                    "Rate limit exceeded for %s bucket, resets in %s (at %s)",
                    bucket,
                    human_time,
                    reset_at,
                )
                raise RateLimitExceededError(
                    f"Rate limit exceeded for {bucket} requests. "
                    f"Resets in {human_time} (at {reset_at})"
                )
            budget.remaining -= cost

    def update_from_headers(self, bucket: str, headers: Mapping[str, str]) -> None:
        """Refresh a bucket from response headers.

        GitHub names the bucket it charged in x-ratelimit-resource; that wins
        over the bucket the caller assumed.
        """
        name = headers.get("x-ratelimit-resource") or bucket
        budget = self.budgets.get(name)
        if budget is not None:
            budget.update_from_headers(headers)

    def sync(self, resources: Iterable[RateLimitResource]) -> None:
        """Refresh every tracked bucket from /rate_limit resources."""
        for resource in resources:
            budget = self.budgets.get(resource.name)
            if budget is not None:
                budget.update_from_resource(resource)

    def get_status(self) -> dict[str, dict[str, float]]:
        """Remaining, limit and seconds to reset for every bucket."""
        return {
            name: {
                "remaining": budget.remaining,
                "limit": budget.limit,
                "reset_in": budget.seconds_until_reset,
            }
            for name, budget in self.budgets.items()
        }


def check_and_report_rate_limit(resources: Iterable[RateLimitResource]) -> bool:
    """Report the required buckets to the user.

    Args:
        resources: Rate limit resources as returned by the /rate_limit endpoint

    Returns:
        True if OK to proceed, False if a required bucket is exhausted
    """
    ok = True
    for resource in resources:
        if resource.name not in REQUIRED_BUCKETS:
            continue

        if resource.remaining == 0:
            human_time = format_time_remaining(resource.seconds_until_reset)
            reset_at = format_reset_time(resource.reset.timestamp())
            console.print(
                f"\n[red]Rate limit exhausted[/red] for {resource.name} "
                f"(0/{resource.limit} requests remaining)"
            )
            console.print(f"[yellow]  Resets in: {human_time} (at {reset_at})[/yellow]")
            console.print()
            ok = False
        elif resource.remaining < LOW_REMAINING_THRESHOLD:
            console.print(
                f"[yellow]Warning: Only {resource.remaining}/{resource.limit} "
                f"{resource.name} requests remaining[/yellow]"
            )

    return ok
