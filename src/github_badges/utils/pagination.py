"""Pagination helpers for REST Link headers and GraphQL connections."""

import re
from typing import Any, Optional

# <https://api.github.com/user/repos?page=3>; rel="next"
LINK_PATTERN = re.compile(r'<(?P<url>[^>]+)>;\s*rel="(?P<rel>[^"]+)"')


def parse_link_header(link_header: Optional[str]) -> dict[str, str]:
    """Map each rel ("next", "last", "prev", "first") of a Link header to its URL."""
    return {
        match["rel"]: match["url"] for match in LINK_PATTERN.finditer(link_header or "")
    }


def get_next_page_url(link_header: Optional[str]) -> Optional[str]:
    return parse_link_header(link_header).get("next")


def has_next_page(page_info: Optional[dict[str, Any]]) -> bool:
    """Whether a GraphQL connection reports another page.

    The cursor is not checked here; a next page without an endCursor cannot be
    resumed and is the caller's error to raise.
    """
    if not page_info:
        return False
    return bool(page_info.get("hasNextPage"))
