"""Curses display for the info and status regions."""

from __future__ import annotations

import curses

from .colors import parse_hex_color, xterm256
from .layout import Composition, compose
from .models import Color, Rect, RenderFrame, StyledLineSet, Style
from .themes import DisplayTheme, get_theme


class TerminalDisplay:
    """Draws frames on a curses window and drains its key queue."""

    def __init__(self, stdscr, theme_name: str | None = None) -> None:
        self.stdscr = stdscr
        self.theme: DisplayTheme = get_theme(theme_name)
        self._pairs: dict[tuple[int, int], int] = {}
        self._colors = False

        try:
            curses.curs_set(0)
        except curses.error:
            pass
        stdscr.nodelay(True)
        stdscr.keypad(True)
        if curses.has_colors():
            curses.start_color()
            try:
                curses.use_default_colors()
            except curses.error:
                pass
            self._colors = curses.COLORS >= 256

    def size(self) -> tuple[int, int]:
        h, w = self.stdscr.getmaxyx()
        return w, h

    def poll_keys(self) -> list[int]:
        keys = []
        while True:
            ch = self.stdscr.getch()
            if ch == -1:
                return keys
            keys.append(ch)

    def render(self, frame: RenderFrame) -> Composition:
        w, h = self.size()
        comp = compose(w, h, frame.info, frame.status, frame.layout, frame.order)
        self.stdscr.erase()

        if frame.debug:
            for rect, color in zip(comp.gaps, self.theme.debug_gaps):
                self._fill(rect, parse_hex_color(color))
        if self.theme.info_bg:
            self._fill(comp.info, parse_hex_color(self.theme.info_bg))
        if self.theme.status_bg:
            self._fill(comp.status, parse_hex_color(self.theme.status_bg))

        self._draw_lines(comp.info, frame.info, self.theme.info_bg)
        self._draw_lines(comp.status, frame.status, self.theme.status_bg)
        self.stdscr.noutrefresh()
        curses.doupdate()
        return comp

    def _pair(self, fg: Color | None, bg: Color | None) -> int:
        if not self._colors or (fg is None and bg is None):
            return 0
        key = (xterm256(fg) if fg else -1, xterm256(bg) if bg else -1)
        if key in self._pairs:
            return curses.color_pair(self._pairs[key])
        pair_id = len(self._pairs) + 1
        if pair_id >= curses.COLOR_PAIRS:
            return 0
        try:
            curses.init_pair(pair_id, key[0], key[1])
        except curses.error:
            return 0
        self._pairs[key] = pair_id
        return curses.color_pair(pair_id)

    def _attr(self, style: Style, region_bg: Color | None) -> int:
        attr = self._pair(style.fg, style.bg or region_bg)
        if style.bold:
            attr |= curses.A_BOLD
        if style.italic:
            attr |= getattr(curses, "A_ITALIC", 0)
        return attr

    def _put(self, y: int, x: int, text: str, attr: int) -> None:
        try:
            self.stdscr.addnstr(y, x, text, len(text), attr)
        except curses.error:
            # Writing the bottom-right cell moves the cursor off screen.
            pass

    def _fill(self, rect: Rect, color: Color | None) -> None:
        if rect.w <= 0 or rect.h <= 0 or color is None:
            return
        attr = self._pair(None, color)
        for row in range(rect.h):
            self._put(rect.y + row, rect.x, " " * rect.w, attr)

    def _draw_lines(self, rect: Rect, lines: StyledLineSet, region_bg: str | None) -> None:
        bg = parse_hex_color(region_bg) if region_bg else None
        for row, line in enumerate(lines[: rect.h]):
            col = 0
            for span in line:
                remaining = rect.w - col
                if remaining <= 0:
                    break
                text = span.text[:remaining]
                self._put(rect.y + row, rect.x + col, text, self._attr(span.style, bg))
                col += len(text)
