"""Output handlers for GitHub Badges."""

from github_badges.output.console import Console
from github_badges.output.json_writer import build_report, write_json_report
from github_badges.output.svg import (
    render_error,
    render_stats_card,
    render_streak_card,
    render_top_languages_card,
)
from github_badges.output.themes import THEMES, CardColors, get_theme

__all__ = [
    "Console",
    "build_report",
    "write_json_report",
    "render_error",
    "render_stats_card",
    "render_streak_card",
    "render_top_languages_card",
    "THEMES",
    "CardColors",
    "get_theme",
]
