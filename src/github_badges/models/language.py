"""Language usage models."""

from typing import Any

from pydantic import BaseModel, Field

# Used when the API reports a language without a display color
DEFAULT_LANGUAGE_COLOR = "#858585"


class LanguageTotal(BaseModel):
    """Running byte total for one language across all repositories."""

    name: str
    color: str = DEFAULT_LANGUAGE_COLOR
    bytes: int = Field(default=0, ge=0)


class LanguageShare(BaseModel):
    """Share of one language in the user's code, as handed to the renderer."""

    name: str
    color: str = DEFAULT_LANGUAGE_COLOR
    percent: float = Field(ge=0, le=100)


class LanguageTally(BaseModel):
    """Accumulates language sizes over repository pages."""

    totals: dict[str, LanguageTotal] = Field(default_factory=dict)

    @property
    def total_bytes(self) -> int:
        return sum(t.bytes for t in self.totals.values())

    def add(self, name: str, size: int, color: str | None = None) -> None:
        """Add a language's size; the first color seen for a name is kept."""
        total = self.totals.get(name)
        if total is None:
            total = LanguageTotal(name=name, color=color or DEFAULT_LANGUAGE_COLOR)
            self.totals[name] = total
        total.bytes += max(size, 0)

    def add_repository(self, repo: dict[str, Any]) -> None:
        """Add the language edges of one GraphQL repository node."""
        languages = repo.get("languages") or {}
        for edge in languages.get("edges") or []:
            node = edge.get("node") or {}
            name = node.get("name")
            if not name:
                continue
            self.add(name, edge.get("size") or 0, node.get("color"))

    def shares(self, limit: int = 6) -> list[LanguageShare]:
        """Percentages of the top languages, largest first.

        Returns an empty list when no bytes were counted.
        """
        total_bytes = self.total_bytes
        if total_bytes == 0:
            return []

        ranked = sorted(self.totals.values(), key=lambda t: t.bytes, reverse=True)
        return [
            LanguageShare(
                name=t.name,
                color=t.color,
                percent=100 * t.bytes / total_bytes,
            )
            for t in ranked[:limit]
        ]
