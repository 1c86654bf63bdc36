"""Built-in display themes."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_THEME_NAME = "Classic"


@dataclass(frozen=True)
class DisplayTheme:
    name: str
    background: str
    text: str
    info_bg: str | None
    status_bg: str | None
    status_text: str
    debug_gaps: tuple[str, str, str, str]


THEMES: dict[str, DisplayTheme] = {
    "Classic": DisplayTheme(
        name="Classic",
        background="#000000",
        text="#E6E6E6",
        info_bg=None,
        status_bg="#1C2A3A",
        status_text="#A9B5D1",
        debug_gaps=("#00AA00", "#00AA00", "#AA00AA", "#AA00AA"),
    ),
    "Debug": DisplayTheme(
        name="Debug",
        background="#000000",
        text="#F4F7FF",
        info_bg="#FF8080",
        status_bg="#8080FF",
        status_text="#0A0F1D",
        debug_gaps=("#00FF00", "#00FF00", "#FF00FF", "#FF00FF"),
    ),
}


def list_themes() -> list[str]:
    return sorted(THEMES.keys())


def get_theme(name: str | None) -> DisplayTheme:
    if not name:
        return THEMES[DEFAULT_THEME_NAME]
    return THEMES.get(name, THEMES[DEFAULT_THEME_NAME])


def hex_rgb(value: str) -> tuple[int, int, int]:
    return tuple(int(value[i : i + 2], 16) for i in (1, 3, 5))  # type: ignore[return-value]
