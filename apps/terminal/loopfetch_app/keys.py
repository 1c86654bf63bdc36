"""Key code -> session action mapping."""

from __future__ import annotations

import curses
from enum import Enum

from loopfetch_core.session import Action


class KeyKind(str, Enum):
    PRESS = "press"
    REPEAT = "repeat"
    RELEASE = "release"


KEY_ACTIONS: dict[int, Action] = {
    ord("q"): Action.EXIT,
    ord("d"): Action.TOGGLE_DEBUG,
    ord("r"): Action.RELOAD,
    curses.KEY_UP: Action.LAYOUT,
    curses.KEY_DOWN: Action.LAYOUT,
    curses.KEY_LEFT: Action.ORDER,
    curses.KEY_RIGHT: Action.ORDER,
}


def decode_key(code: int, kind: KeyKind = KeyKind.PRESS) -> Action | None:
    """Only press events are actionable; curses reports every key as a press."""
    if kind is not KeyKind.PRESS:
        return None
    return KEY_ACTIONS.get(code)


def decode_keys(codes: list[int]) -> list[Action]:
    actions = (decode_key(code) for code in codes)
    return [action for action in actions if action is not None]
