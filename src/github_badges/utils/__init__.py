"""Utility modules for GitHub Badges."""

from github_badges.utils.pagination import (
    get_next_page_url,
    has_next_page,
    parse_link_header,
)
from github_badges.utils.rate_limiter import RateLimiter, check_and_report_rate_limit

__all__ = [
    "RateLimiter",
    "check_and_report_rate_limit",
    "parse_link_header",
    "get_next_page_url",
    "has_next_page",
]
