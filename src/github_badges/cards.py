"""Card boundary: turns a card request into an SVG response.

Every failure is rendered as an inline error glyph; nothing raised while
computing a card reaches the caller.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional

from github_badges.config import Config
from github_badges.output.svg import (
    render_error,
    render_stats_card,
    render_streak_card,
    render_top_languages_card,
)
from github_badges.output.themes import get_theme
from github_badges.sdk import BadgeClient

logger = logging.getLogger(__name__)

SVG_CONTENT_TYPE = "image/svg+xml"


class CardKind(str, Enum):
    """Card types served by the boundary."""

    STATS = "stats"
    STREAK = "streak"
    TOP_LANGUAGES = "top-lang"


def cache_control(ttl_seconds: int) -> str:
    return f"s-maxage={ttl_seconds}, stale-while-revalidate"


@dataclass
class CardResponse:
    """Rendered card body with its response headers."""

    body: str
    headers: dict[str, str] = field(default_factory=dict)
    status_code: int = 200

    @property
    def cacheable(self) -> bool:
        return "Cache-Control" in self.headers


class ResponseCache:
    """In-process TTL cache of successful card responses.

    Args:
        ttl: Seconds an entry stays fresh; 0 disables caching.
        clock: Monotonic time source.
    """

    def __init__(self, ttl: int, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[tuple[str, str], tuple[float, CardResponse]] = {}
        self._lock = threading.Lock()

    def get(self, kind: CardKind, theme: str) -> Optional[CardResponse]:
        key = (kind.value, theme)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, response = entry
            if self._clock() - stored_at >= self.ttl:
                del self._entries[key]
                return None
            return response

    def put(self, kind: CardKind, theme: str, response: CardResponse) -> None:
        """Store a response; error glyphs are never stored."""
        if self.ttl <= 0 or not response.cacheable:
            return
        with self._lock:
            self._entries[(kind.value, theme)] = (self._clock(), response)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def error_response(message: str) -> CardResponse:
    """Error glyph response; carries no cache headers."""
    return CardResponse(
        body=render_error(message),
        headers={"Content-Type": SVG_CONTENT_TYPE},
    )


async def build_card(
    kind: CardKind,
    theme: str,
    config: Config,
    now: datetime | None = None,
    client_factory: Callable[[Config], BadgeClient] = BadgeClient,
) -> CardResponse:
    """Compute and render one card.

    Args:
        kind: Which card to render
        theme: Theme name ("light" or "dark")
        config: Application configuration
        now: Reference time (defaults to now)
        client_factory: Builds the SDK client from the configuration

    Returns:
        CardResponse with the SVG body, or the error glyph on any failure
    """
    now = now or datetime.now(timezone.utc)
    try:
        colors = get_theme(theme)
        async with client_factory(config) as client:
            if kind is CardKind.STATS:
                body = render_stats_card(await client.stats(now=now), colors)
            elif kind is CardKind.STREAK:
                streak = await client.streak(now=now)
                body = render_streak_card(streak, colors, today=now.date())
            else:
                body = render_top_languages_card(await client.top_languages(), colors)
    except Exception as e:
        logger.exception("Failed to build %s card", kind.value)
        return error_response(str(e))

    return CardResponse(
        body=body,
        headers={
            "Content-Type": SVG_CONTENT_TYPE,
            "Cache-Control": cache_control(config.cache_ttl_seconds),
        },
    )
