"""CLI interface for GitHub Badges."""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from github_badges._version import version as __version__
from github_badges.cards import CardKind, build_card
from github_badges.config import THEMES, Config
from github_badges.exceptions import GitHubBadgesError
from github_badges.output.console import Console as OutputConsole
from github_badges.output.json_writer import build_report, write_json_report
from github_badges.sdk import BadgeClient
from github_badges.utils.rate_limiter import check_and_report_rate_limit

app = typer.Typer(
    name="github-badges",
    help="Render GitHub stats, streak and top-language SVG cards",
    add_completion=False,
)

console = Console()


def setup_logging(verbosity: int = 0):
    """Configure logging: WARNING by default, INFO with -v, DEBUG with -vv."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        console.print(f"github-badges version {__version__}")
        raise typer.Exit()


def _load_config() -> Config:
    try:
        return Config.from_env()
    except GitHubBadgesError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Verbose logging (-v for INFO, -vv for DEBUG)",
    ),
):
    """GitHub Badges - SVG cards for a GitHub account."""
    setup_logging(verbose)


@app.command()
def render(
    card: str = typer.Argument(..., help="Card to render: stats, streak or top-lang"),
    theme: Optional[str] = typer.Option(
        None,
        "--theme",
        "-t",
        help="Theme: light or dark (defaults to BADGES_THEME)",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output SVG file path (defaults to <card>.svg)",
    ),
):
    """Render one card to an SVG file.

    Examples:
        github-badges render stats
        github-badges render streak --theme dark -o streak.svg
    """
    valid = [kind.value for kind in CardKind]
    if card not in valid:
        console.print(f"[red]Unknown card: {card}. Use one of {', '.join(valid)}[/red]")
        raise typer.Exit(1)

    config = _load_config()
    theme = theme or config.default_theme
    if theme not in THEMES:
        console.print(f"[red]Unknown theme: {theme}. Use one of {', '.join(THEMES)}[/red]")
        raise typer.Exit(1)

    response = asyncio.run(build_card(CardKind(card), theme, config))

    output = output or Path(f"{card}.svg")
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(response.body, encoding="utf-8")

    if not response.cacheable:
        console.print(f"[red]Error card written to {output}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Card saved to:[/green] {output}")


@app.command()
def summary(
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output JSON file path",
    ),
    summary_only: bool = typer.Option(
        False,
        "--summary-only",
        help="Print summary only, don't save JSON",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Minimal output",
    ),
):
    """Compute the data behind all three cards and print it."""
    config = _load_config()

    try:
        asyncio.run(
            _run_summary(
                config=config,
                output_path=output,
                summary_only=summary_only,
                quiet=quiet,
            )
        )
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled[/yellow]")
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


async def _run_summary(
    config: Config,
    output_path: Optional[Path],
    summary_only: bool,
    quiet: bool,
):
    """Collect every summary asynchronously and report it."""
    output_console = OutputConsole(quiet=quiet)

    async with BadgeClient(config) as client:
        if not check_and_report_rate_limit(await client.rate_limits()):
            raise GitHubBadgesError("GitHub rate limit exhausted")
        data = await client.collect_all()

    report = build_report(
        username=client.login,
        languages=data.languages,
        streak=data.streak,
        stats=data.stats,
    )
    output_console.print_summary(report)

    if not summary_only:
        output_file = write_json_report(report, output_path, client.login)
        output_console.print_output_path(str(output_file))


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind"),
    port: int = typer.Option(5000, "--port", "-p", help="Port to listen on"),
):
    """Serve the cards over HTTP."""
    from github_badges.app import create_app

    create_app(_load_config()).run(host=host, port=port)


@app.command()
def check_token():
    """Check GitHub token and username configuration."""
    config = _load_config()

    if config.has_username:
        console.print(f"[green]GitHub username is configured[/green] ({config.github_username})")
    else:
        console.print("[yellow]No GitHub username configured[/yellow]")
        console.print("  export GITHUB_USERNAME=your_login")

    if config.is_authenticated:
        console.print("[green]GitHub token is configured[/green]")
    else:
        console.print("[yellow]No GitHub token configured[/yellow]")
        console.print("  export GITHUB_TOKEN=your_token_here")
        console.print()
        console.print("Create a token at: https://github.com/settings/tokens")

    if not (config.has_username and config.is_authenticated):
        raise typer.Exit(1)


@app.command()
def limits():
    """Show GitHub API rate limit usage."""
    config = _load_config()

    async def _fetch():
        async with BadgeClient(config) as client:
            return await client.rate_limits()

    try:
        resources = asyncio.run(_fetch())
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    OutputConsole().print_limits(resources)


if __name__ == "__main__":
    app()
