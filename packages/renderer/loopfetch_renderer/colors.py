"""Hex color parsing and terminal palette mapping."""

from __future__ import annotations

import re

from .models import Color

_HEX_PAIR = re.compile(r"[0-9a-fA-F]{2}")

# Channel used when a pair is not valid hex: red saturates, green and blue go dark.
FALLBACK_CHANNELS = (255, 0, 0)

_CUBE_LEVELS = (0, 95, 135, 175, 215, 255)


def _channel(pair: str, fallback: int) -> int:
    if _HEX_PAIR.fullmatch(pair):
        return int(pair, 16)
    return fallback


def parse_hex_color(value: str) -> Color | None:
    """Parse ``RRGGBB`` with optional leading ``#``.

    Any length other than six yields ``None``; a pair that is not hex is
    replaced by its ``FALLBACK_CHANNELS`` value rather than rejected.
    """
    digits = value.lstrip("#")
    if len(digits) != 6:
        return None
    return Color(
        r=_channel(digits[0:2], FALLBACK_CHANNELS[0]),
        g=_channel(digits[2:4], FALLBACK_CHANNELS[1]),
        b=_channel(digits[4:6], FALLBACK_CHANNELS[2]),
    )


def _cube_index(v: int) -> int:
    return min(range(len(_CUBE_LEVELS)), key=lambda i: abs(_CUBE_LEVELS[i] - v))


def xterm256(color: Color) -> int:
    """Nearest xterm-256 palette entry from the 6x6x6 cube or the grey ramp."""
    ri, gi, bi = _cube_index(color.r), _cube_index(color.g), _cube_index(color.b)
    cube = (_CUBE_LEVELS[ri], _CUBE_LEVELS[gi], _CUBE_LEVELS[bi])
    cube_idx = 16 + 36 * ri + 6 * gi + bi

    avg = (color.r + color.g + color.b) // 3
    grey_step = max(0, min(23, round((avg - 8) / 10)))
    grey = 8 + grey_step * 10
    grey_idx = 232 + grey_step

    def _dist(rgb: tuple[int, int, int]) -> int:
        return sum((a - b) ** 2 for a, b in zip(rgb, color.as_tuple()))

    if _dist((grey, grey, grey)) < _dist(cube):
        return grey_idx
    return cube_idx
