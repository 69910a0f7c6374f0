"""JSON report of the data behind the three cards."""

import json
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel

from github_badges.models.contribution import StreakSummary
from github_badges.models.language import LanguageShare
from github_badges.models.stats import StatsSummary

DEFAULT_OUTPUT_DIR = Path("output")


def serialize_for_json(obj: Any) -> Any:
    """Recursively turn models, dates and tuples into plain JSON values."""
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, dict):
        return {key: serialize_for_json(value) for key, value in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [serialize_for_json(item) for item in obj]
    return obj


def build_report(
    username: str,
    languages: list[LanguageShare],
    streak: StreakSummary,
    stats: StatsSummary,
) -> dict[str, Any]:
    """One dictionary with a section per card, stamped with the generation time."""
    sections = {"languages": languages, "streak": streak, "stats": stats}
    return {
        "username": username,
        "generated_at": datetime.now(timezone.utc).isoformat(),
        **serialize_for_json(sections),
    }


def default_report_path(username: str, when: Optional[datetime] = None) -> Path:
    """output/<username>_<YYYYmmdd_HHMMSS>.json"""
    stamp = (when or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return DEFAULT_OUTPUT_DIR / f"{username}_{stamp}.json"


def write_json_report(
    report: dict[str, Any],
    output_path: Optional[Path] = None,
    username: Optional[str] = None,
) -> Path:
    """Write a report, creating parent directories as needed.

    Without an explicit path the file is named after the user and the
    current time, see `default_report_path`.

    Returns:
        Path to written file
    """
    if output_path is None:
        output_path = default_report_path(username or report.get("username", "unknown"))

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        json.dumps(report, indent=2, ensure_ascii=False, default=str),
        encoding="utf-8",
    )
    return output_path
