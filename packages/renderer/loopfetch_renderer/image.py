"""Pillow display that draws a frame onto a character grid image."""

from __future__ import annotations

from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

from .layout import Composition, compose
from .models import Rect, RenderFrame, StyledLineSet
from .themes import DisplayTheme, get_theme, hex_rgb

_FONT_FILES = {
    (False, False): ("DejaVuSansMono.ttf", "LiberationMono-Regular.ttf"),
    (True, False): ("DejaVuSansMono-Bold.ttf", "LiberationMono-Bold.ttf"),
    (False, True): ("DejaVuSansMono-Oblique.ttf", "LiberationMono-Italic.ttf"),
    (True, True): ("DejaVuSansMono-BoldOblique.ttf", "LiberationMono-BoldItalic.ttf"),
}


class ImageDisplay:
    """Renders a ``RenderFrame`` as a ``cols`` x ``rows`` cell image."""

    def __init__(self, cols: int = 100, rows: int = 30, font_size: int = 16, theme_name: str | None = None) -> None:
        self.cols = cols
        self.rows = rows
        self.font_size = font_size
        self.theme: DisplayTheme = get_theme(theme_name)
        self._fonts: dict[tuple[bool, bool], ImageFont.ImageFont | ImageFont.FreeTypeFont] = {}
        left, top, right, bottom = self._font(False, False).getbbox("M")
        self.cell_w = max(int(right - left) + 1, 1)
        self.cell_h = max(int(bottom - top) + 4, font_size)

    def _font(self, bold: bool, italic: bool):
        key = (bold, italic)
        if key not in self._fonts:
            font = None
            for candidate in _FONT_FILES[key]:
                try:
                    font = ImageFont.truetype(candidate, self.font_size)
                    break
                except Exception:
                    continue
            if font is None:
                font = self._fonts.get((False, False)) or ImageFont.load_default()
            self._fonts[key] = font
        return self._fonts[key]

    def compose(self, frame: RenderFrame) -> Composition:
        return compose(self.cols, self.rows, frame.info, frame.status, frame.layout, frame.order)

    def render_image(self, frame: RenderFrame) -> Image.Image:
        image = Image.new("RGB", (self.cols * self.cell_w, self.rows * self.cell_h), hex_rgb(self.theme.background))
        draw = ImageDraw.Draw(image)
        comp = self.compose(frame)

        if frame.debug:
            for rect, color in zip(comp.gaps, self.theme.debug_gaps):
                self._fill(draw, rect, hex_rgb(color))

        if self.theme.info_bg:
            self._fill(draw, comp.info, hex_rgb(self.theme.info_bg))
        if self.theme.status_bg:
            self._fill(draw, comp.status, hex_rgb(self.theme.status_bg))

        self._draw_lines(draw, comp.info, frame.info, hex_rgb(self.theme.text))
        self._draw_lines(draw, comp.status, frame.status, hex_rgb(self.theme.status_text))
        return image

    def save_png(self, frame: RenderFrame, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        self.render_image(frame).save(path, format="PNG")
        return path

    def _fill(self, draw: ImageDraw.ImageDraw, rect: Rect, color: tuple[int, int, int]) -> None:
        if rect.w <= 0 or rect.h <= 0:
            return
        x0, y0 = rect.x * self.cell_w, rect.y * self.cell_h
        x1, y1 = (rect.x + rect.w) * self.cell_w - 1, (rect.y + rect.h) * self.cell_h - 1
        draw.rectangle((x0, y0, x1, y1), fill=color)

    def _draw_lines(
        self,
        draw: ImageDraw.ImageDraw,
        rect: Rect,
        lines: StyledLineSet,
        default_fg: tuple[int, int, int],
    ) -> None:
        for row, line in enumerate(lines[: rect.h]):
            col = 0
            for span in line:
                remaining = rect.w - col
                if remaining <= 0:
                    break
                text = span.text[:remaining]
                x = (rect.x + col) * self.cell_w
                y = (rect.y + row) * self.cell_h
                if span.style.bg is not None and text:
                    draw.rectangle(
                        (x, y, x + len(text) * self.cell_w - 1, y + self.cell_h - 1),
                        fill=span.style.bg.as_tuple(),
                    )
                fg = span.style.fg.as_tuple() if span.style.fg is not None else default_fg
                draw.text((x, y), text, font=self._font(span.style.bold, span.style.italic), fill=fg)
                col += len(text)
