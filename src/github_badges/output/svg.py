"""SVG templates for the stats, streak and top-languages cards."""

import math
from datetime import date
from html import escape

from github_badges.models.contribution import StreakSummary
from github_badges.models.language import LanguageShare
from github_badges.models.stats import StatsSummary
from github_badges.output.themes import CardColors

FONT = "'Segoe UI', Ubuntu, sans-serif"


def esc(value) -> str:
    return escape(str(value), quote=True)


def format_day(value: date) -> str:
    """'Jan 5' style label."""
    return f"{value:%b} {value.day}"


def format_range(start: date | None, end: date | None) -> str:
    if start is None or end is None:
        return ""
    return f"{format_day(start)} - {format_day(end)}"


def format_since(value: date | None) -> str:
    """'Jan 5, 2023 - Present' style label."""
    if value is None:
        return ""
    return f"{format_day(value)}, {value.year} - Present"


def rank_circle_offset(progress: float) -> float:
    """Stroke dash offset of the rank ring for a progress value in [0, 100]."""
    return math.pi * 80 * (1 - min(max(progress, 0), 100) / 100)


def render_error(message: str) -> str:
    """Inline error glyph shown instead of a card."""
    return (
        '<svg xmlns="http://www.w3.org/2000/svg" width="450" height="60">'
        f'<text x="10" y="35" fill="red">Error: {esc(message)}</text></svg>'
    )


def _stat_row(index: int, label: str, value: int, testid: str) -> str:
    return f"""
      <g transform="translate(0, {index * 25})">
        <g class="stagger" style="animation-delay: {450 + index * 150}ms" transform="translate(25, 0)">
          <text class="stat bold" y="12.5">{esc(label)}:</text>
          <text class="stat bold" x="199.01" y="12.5" data-testid="{testid}">{value}</text>
        </g>
      </g>"""


def render_stats_card(summary: StatsSummary, theme: CardColors) -> str:
    """Render the stats card with its rank ring."""
    login = esc(summary.login)
    repos = summary.repos
    inputs = summary.inputs
    rank = summary.rank
    width, height = 440, 210

    rows = "".join(
        _stat_row(i, label, value, testid)
        for i, (label, value, testid) in enumerate(
            [
                ("Total Stars", repos.total_stars, "stars"),
                ("Total Forks", repos.total_forks, "forks"),
                ("Total Commits", inputs.total_commits, "commits"),
                ("Total PRs", inputs.prs, "prs"),
                ("Total Issues", inputs.issues, "issues"),
                ("Active Repos (1y)", repos.active_repos_last_year, "active"),
            ]
        )
    )

    return f"""<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" viewBox="0 0 {width} {height}" fill="none" role="img" aria-labelledby="descId">
  <title id="titleId">{login}'s GitHub Stats, Rank: {esc(rank.level)}</title>
  <desc id="descId">Total Stars: {repos.total_stars}, Forks: {repos.total_forks}, Commits: {inputs.total_commits}, PRs: {inputs.prs}, Issues: {inputs.issues}, Active Repos (last year): {repos.active_repos_last_year}</desc>
  <style>
    .header {{ font: 600 18px {FONT}; fill: {theme.primary}; animation: fadeInAnimation 0.8s ease-in-out forwards; }}
    @supports(-moz-appearance: auto) {{ .header {{ font-size: 15.5px; }} }}
    .stat {{ font: 600 14px {FONT}; fill: {theme.secondary}; }}
    @supports(-moz-appearance: auto) {{ .stat {{ font-size: 12px; }} }}
    .stagger {{ opacity: 0; animation: fadeInAnimation 0.3s ease-in-out forwards; }}
    .rank-text {{ font: 800 24px {FONT}; fill: {theme.accent}; animation: scaleInAnimation 0.3s ease-in-out forwards; }}
    .rank-circle-rim {{ stroke: {theme.text_muted}; fill: none; stroke-width: 6; opacity: 0.2; }}
    .rank-circle {{ stroke: {theme.secondary}; stroke-dasharray: 250; fill: none; stroke-width: 6; stroke-linecap: round; opacity: 0.8; transform-origin: -10px 8px; transform: rotate(-90deg); animation: rankAnimation 1s forwards ease-in-out; }}
    .bold {{ font-weight: 700 }}
    @keyframes rankAnimation {{
      from {{ stroke-dashoffset: {rank_circle_offset(0)}; }}
      to {{ stroke-dashoffset: {rank_circle_offset(100 - rank.percentile)}; }}
    }}
    @keyframes scaleInAnimation {{
      from {{ transform: translate(-5px, 5px) scale(0); }}
      to {{ transform: translate(-5px, 5px) scale(1); }}
    }}
    @keyframes fadeInAnimation {{ from {{ opacity: 0; }} to {{ opacity: 1; }} }}
  </style>

  <rect data-testid="card-bg" x="0.5" y="0.5" rx="7" height="99%" width="99%" fill="{theme.bg}" />

  <g data-testid="card-title" transform="translate(25, 35)">
    <text x="0" y="0" class="header" data-testid="header">{login}'s GitHub Stats</text>
  </g>

  <g data-testid="main-card-body" transform="translate(0, 55)">
    <g data-testid="rank-circle" transform="translate(365, 47.5)">
      <circle class="rank-circle-rim" cx="-10" cy="8" r="40"/>
      <circle class="rank-circle" cx="-10" cy="8" r="40"/>
      <g class="rank-text">
        <text x="-5" y="3" alignment-baseline="central" dominant-baseline="central" text-anchor="middle" data-testid="level-rank-icon">{esc(rank.level)}</text>
      </g>
    </g>
    <svg x="0" y="0">{rows}
    </svg>
  </g>
</svg>
"""


def _column(x: float, y: float, text: str, fill: str, weight: int, size: int, style: str) -> str:
    return (
        f'<g transform="translate({x}, {y})"><text x="0" y="32" text-anchor="middle" '
        f'fill="{fill}" font-family="{FONT}" font-weight="{weight}" font-size="{size}px" '
        f'style="{style}">{esc(text)}</text></g>'
    )


def render_streak_card(streak: StreakSummary, theme: CardColors, today: date) -> str:
    """Render the streak card.

    Args:
        streak: Streak statistics
        theme: Card colors
        today: Shown as the current streak range when there is no streak
    """
    if streak.current_streak > 0:
        current_range = format_range(streak.current_range_start, streak.current_range_end)
    else:
        current_range = format_day(today)
    longest_range = format_range(streak.longest_range_start, streak.longest_range_end)
    total_range = format_since(streak.first_active_date)

    def fade(delay: float) -> str:
        return f"opacity:0;animation:fadein 0.5s linear forwards {delay}s"

    total_column = "\n    ".join(
        [
            _column(82.5, 48, str(streak.total_contributions), theme.primary, 700, 28, fade(0.6)),
            _column(82.5, 84, "Total Contributions", theme.primary, 400, 14, fade(0.7)),
            _column(82.5, 114, total_range, theme.secondary, 400, 12, fade(0.8)),
        ]
    )
    current_column = "\n    ".join(
        [
            _column(
                247.5, 48, str(streak.current_streak), theme.accent, 700, 28,
                "animation:currstreak 0.6s linear forwards",
            ),
            _column(247.5, 108, "Current Streak", theme.accent, 700, 14, fade(0.9)),
            _column(247.5, 134, current_range, theme.secondary, 400, 12, fade(0.9)),
        ]
    )
    longest_column = "\n    ".join(
        [
            _column(412.5, 48, str(streak.longest_streak), theme.primary, 700, 28, fade(1.2)),
            _column(412.5, 84, "Longest Streak", theme.primary, 400, 14, fade(1.3)),
            _column(412.5, 114, longest_range, theme.secondary, 400, 12, fade(1.4)),
        ]
    )

    return f"""<svg xmlns="http://www.w3.org/2000/svg" style="isolation: isolate" viewBox="0 0 495 195" width="495px" height="195px" direction="ltr">
  <style>
    @keyframes currstreak {{
      0% {{ font-size: 3px; opacity: 0.2; }}
      80% {{ font-size: 34px; opacity: 1; }}
      100% {{ font-size: 28px; opacity: 1; }}
    }}
    @keyframes fadein {{
      0% {{ opacity: 0; }}
      100% {{ opacity: 1; }}
    }}
  </style>
  <defs>
    <clipPath id="outer_rectangle">
      <rect width="495" height="195" rx="4.5"/>
    </clipPath>
    <mask id="mask_out_ring_behind_fire">
      <rect width="495" height="195" fill="white"/>
      <ellipse cx="247.5" cy="32" rx="13" ry="18" fill="black"/>
    </mask>
  </defs>
  <g clip-path="url(#outer_rectangle)">
    <rect stroke="{theme.border}" stroke-opacity="0" fill="{theme.bg}" rx="10" x="0.5" y="0.5" width="494" height="194"/>
    <line x1="165" y1="28" x2="165" y2="170" vector-effect="non-scaling-stroke" stroke-width="1" stroke="{theme.divider}"/>
    <line x1="330" y1="28" x2="330" y2="170" vector-effect="non-scaling-stroke" stroke-width="1" stroke="{theme.divider}"/>

    <!-- Total Contributions -->
    {total_column}

    <!-- Current Streak -->
    {current_column}
    <g mask="url(#mask_out_ring_behind_fire)">
      <circle cx="247.5" cy="71" r="40" fill="none" stroke="{theme.primary}" stroke-width="5" style="{fade(0.4)}"/>
    </g>
    <g transform="translate(247.5, 19.5)" style="{fade(0.6)}">
      <path d="M 1.5 0.67 C 1.5 0.67 2.24 3.32 2.24 5.47 C 2.24 7.53 0.89 9.2 -1.17 9.2 C -3.23 9.2 -4.79 7.53 -4.79 5.47 L -4.76 5.11 C -6.78 7.51 -8 10.62 -8 13.99 C -8 18.41 -4.42 22 0 22 C 4.42 22 8 18.41 8 13.99 C 8 8.6 5.41 3.79 1.5 0.67 Z M -0.29 19 C -2.07 19 -3.51 17.6 -3.51 15.86 C -3.51 14.24 -2.46 13.1 -0.7 12.74 C 1.07 12.38 2.9 11.53 3.92 10.16 C 4.31 11.45 4.51 12.81 4.51 14.2 C 4.51 16.85 2.36 19 -0.29 19 Z" fill="{theme.primary}"/>
    </g>

    <!-- Longest Streak -->
    {longest_column}
  </g>
</svg>
"""


def render_top_languages_card(shares: list[LanguageShare], theme: CardColors) -> str:
    """Render a stacked bar with a two-column legend."""
    width = 300
    bar_width = 250
    rows = math.ceil(len(shares) / 2)
    height = 90 + rows * 25 if shares else 110

    segments = []
    offset = 0.0
    for share in shares:
        segment = bar_width * share.percent / 100
        segments.append(
            f'<rect x="{offset:.2f}" y="0" width="{segment:.2f}" height="8" fill="{esc(share.color)}"/>'
        )
        offset += segment

    legend = []
    for i, share in enumerate(shares):
        x = 0 if i % 2 == 0 else 130
        y = (i // 2) * 25
        legend.append(
            f'<g transform="translate({x}, {y})">'
            f'<circle cx="5" cy="6" r="5" fill="{esc(share.color)}"/>'
            f'<text x="15" y="10" class="lang-name">{esc(share.name)} {share.percent:.2f}%</text>'
            "</g>"
        )

    segments_svg = "".join(segments)
    legend_svg = "".join(legend)
    if shares:
        body = f"""
    <mask id="bar_mask"><rect x="0" y="0" width="{bar_width}" height="8" fill="white" rx="5"/></mask>
    <g mask="url(#bar_mask)">{segments_svg}</g>
    <g transform="translate(0, 25)">{legend_svg}</g>"""
    else:
        body = '\n    <text x="0" y="20" class="lang-name">No languages detected</text>'

    return f"""<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" viewBox="0 0 {width} {height}" fill="none" role="img">
  <title>Most Used Languages</title>
  <style>
    .header {{ font: 600 18px {FONT}; fill: {theme.primary}; }}
    .lang-name {{ font: 400 11px {FONT}; fill: {theme.text}; }}
  </style>
  <rect x="0.5" y="0.5" rx="7" height="99%" width="99%" fill="{theme.bg}" stroke="{theme.border}"/>
  <g transform="translate(25, 35)">
    <text x="0" y="0" class="header">Most Used Languages</text>
  </g>
  <g transform="translate(25, 55)">{body}
  </g>
</svg>
"""
