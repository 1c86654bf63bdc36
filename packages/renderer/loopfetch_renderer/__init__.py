"""Renderer package for loopfetch line sets and region layout."""

from .colors import parse_hex_color, xterm256
from .layout import Composition, compose
from .models import (
    Color,
    Layout,
    Order,
    Rect,
    RenderFrame,
    Span,
    Style,
    StyledLine,
    StyledLineSet,
    line_width,
    max_width,
    plain_lines,
)
from .themes import DEFAULT_THEME_NAME, get_theme, list_themes

try:  # pragma: no cover - optional at import time for test environments
    from .image import ImageDisplay
except Exception:  # pragma: no cover
    ImageDisplay = None  # type: ignore[assignment]

__all__ = [
    "Color",
    "Composition",
    "DEFAULT_THEME_NAME",
    "Layout",
    "Order",
    "Rect",
    "RenderFrame",
    "Span",
    "Style",
    "StyledLine",
    "StyledLineSet",
    "compose",
    "get_theme",
    "line_width",
    "list_themes",
    "max_width",
    "parse_hex_color",
    "plain_lines",
    "xterm256",
]

if ImageDisplay is not None:
    __all__.append("ImageDisplay")
