"""Card color themes."""

from typing import Literal

from pydantic import BaseModel, ConfigDict

from github_badges.exceptions import UnknownThemeError

ThemeMode = Literal["light", "dark"]


class CardColors(BaseModel):
    """Colors used by every card."""

    model_config = ConfigDict(frozen=True)

    bg: str
    border: str
    divider: str
    primary: str
    secondary: str
    accent: str
    text_muted: str
    text: str


THEMES: dict[str, CardColors] = {
    "dark": CardColors(
        bg="#15141B",
        border="#000000",
        divider="#E4E2E2",
        primary="#A277FF",  # purple
        secondary="#61FFCA",  # green
        accent="#FFCA85",  # yellow
        text_muted="#9CA3AF",
        text="#FFFFFF",
    ),
    "light": CardColors(
        bg="#fcfff1",
        border="#E5E7EB",
        divider="#E5E7EB",
        primary="#5A2DFF",
        secondary="#0F766E",
        accent="#D97706",
        text_muted="#6B7280",
        text="#111827",
    ),
}


def get_theme(mode: str) -> CardColors:
    """Look up a theme by name.

    Raises:
        UnknownThemeError: If the theme does not exist
    """
    try:
        return THEMES[mode]
    except KeyError:
        raise UnknownThemeError(mode, tuple(THEMES)) from None
