"""Rich console output for card summaries."""

from typing import Any

from rich.console import Console as RichConsole
from rich.panel import Panel
from rich.table import Table

from github_badges.models.rate_limit import RateLimitResource


def usage_style(percent: float) -> str:
    """Color for a rate limit bucket by share used."""
    if percent > 80:
        return "red"
    if percent > 50:
        return "yellow"
    if percent > 0:
        return "green"
    return "dim"


class Console:
    """Wrapper for rich console output."""

    def __init__(self, verbose: bool = False, quiet: bool = False):
        self.console = RichConsole()
        self.verbose = verbose
        self.quiet = quiet

    def print(self, *args, **kwargs):
        """Print to console (respects quiet mode)."""
        if not self.quiet:
            self.console.print(*args, **kwargs)

    def print_error(self, message: str):
        """Print error message."""
        self.console.print(f"[red]Error:[/red] {message}")

    def print_warning(self, message: str):
        """Print warning message."""
        self.console.print(f"[yellow]Warning:[/yellow] {message}")

    def print_success(self, message: str):
        """Print success message."""
        if not self.quiet:
            self.console.print(f"[green]{message}[/green]")

    def print_header(self, username: str):
        if self.quiet:
            return

        self.console.print()
        self.console.print(
            Panel(
                f"[bold blue]GitHub Badges[/bold blue]\n[dim]User: {username}[/dim]",
                expand=False,
            )
        )
        self.console.print()

    def print_languages(self, languages: list[dict[str, Any]]):
        """Print the top languages table."""
        if self.quiet:
            return

        if not languages:
            self.console.print("[yellow]No languages detected[/yellow]")
            self.console.print()
            return

        table = Table(title="Top Languages", expand=False)
        table.add_column("Language")
        table.add_column("Share", justify="right")

        for lang in languages:
            table.add_row(
                f"[{lang['color']}]●[/] {lang['name']}",
                f"{lang['percent']:.2f}%",
            )

        self.console.print(table)
        self.console.print()

    def _print_metrics(self, title: str, rows: list[tuple[str, str]]):
        table = Table(title=title, show_header=False, expand=False)
        table.add_column("Metric", style="dim")
        table.add_column("Value")
        for label, value in rows:
            table.add_row(label, value)

        self.console.print(table)
        self.console.print()

    def print_streak(self, streak: dict[str, Any]):
        """Print contribution totals and streaks."""
        if self.quiet:
            return

        rows = [
            ("Total", str(streak.get("total_contributions", 0))),
            ("Since", streak.get("first_active_date") or "-"),
            ("Current Streak", f"{streak.get('current_streak', 0)} days"),
            ("Longest Streak", f"{streak.get('longest_streak', 0)} days"),
        ]
        start = streak.get("longest_range_start")
        end = streak.get("longest_range_end")
        if start and end:
            rows.append(("Longest Range", f"{start} - {end}"))

        self._print_metrics("Contributions", rows)

    def print_stats(self, stats: dict[str, Any]):
        """Print repository totals, rank inputs and the rank."""
        if self.quiet:
            return

        repos = stats.get("repos", {})
        inputs = stats.get("inputs", {})
        rank = stats.get("rank", {})

        counts = [
            ("Total Stars", repos.get("total_stars")),
            ("Total Forks", repos.get("total_forks")),
            ("Repositories", repos.get("repo_count")),
            ("Active Last Year", repos.get("active_repos_last_year")),
            ("Commits", inputs.get("total_commits")),
            ("Pull Requests", inputs.get("prs")),
            ("Issues", inputs.get("issues")),
            ("Reviews", inputs.get("reviews")),
            ("Followers", inputs.get("followers")),
        ]
        rows = [(label, str(value or 0)) for label, value in counts]
        rows.append(
            (
                "Rank",
                f"[bold]{rank.get('level', '-')}[/bold] (top {rank.get('percentile', 0):.1f}%)",
            )
        )

        self._print_metrics("Stats", rows)

    def print_summary(self, report: dict[str, Any]):
        """Print every card summary from a report."""
        if self.quiet:
            return

        self.print_header(report.get("username", ""))
        self.print_languages(report.get("languages", []))
        self.print_streak(report.get("streak", {}))
        self.print_stats(report.get("stats", {}))

        self.console.print(f"[dim]Generated at {report.get('generated_at', '')}[/dim]")

    def print_limits(self, resources: list[RateLimitResource]):
        """Print the rate limit table with usage colored by share used."""
        table = Table(title="GitHub API Rate Limits", expand=False)
        table.add_column("Resource")
        table.add_column("Used", justify="right")
        table.add_column("Limit", justify="right")
        table.add_column("Remaining", justify="right")
        table.add_column("Resets At")

        for resource in resources:
            style = usage_style(resource.usage_percent)
            table.add_row(
                resource.name,
                f"[{style}]{resource.used}[/{style}]",
                str(resource.limit),
                str(resource.remaining),
                resource.reset.strftime("%H:%M:%S UTC"),
            )

        self.console.print(table)

    def print_output_path(self, path: str):
        """Print output file path."""
        if not self.quiet:
            self.console.print(f"\n[green]Saved to:[/green] {path}")
