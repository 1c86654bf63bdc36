"""Typed renderer models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Layout(str, Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"

    def toggle(self) -> "Layout":
        return Layout.VERTICAL if self is Layout.HORIZONTAL else Layout.HORIZONTAL


class Order(str, Enum):
    INFO_FIRST = "info"
    ASCII_FIRST = "ascii"

    def toggle(self) -> "Order":
        return Order.ASCII_FIRST if self is Order.INFO_FIRST else Order.INFO_FIRST

    def names(self) -> tuple[str, str]:
        return ("info", "ascii") if self is Order.INFO_FIRST else ("ascii", "info")


@dataclass(frozen=True)
class Color:
    r: int
    g: int
    b: int

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.r, self.g, self.b)

    def hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"


@dataclass(frozen=True)
class Style:
    fg: Color | None = None
    bg: Color | None = None
    bold: bool = False
    italic: bool = False


@dataclass(frozen=True)
class Span:
    text: str
    style: Style = field(default_factory=Style)


StyledLine = tuple[Span, ...]
StyledLineSet = tuple[StyledLine, ...]


def line_width(line: StyledLine) -> int:
    return sum(len(span.text) for span in line)


def max_width(lines: StyledLineSet) -> int:
    return max((line_width(line) for line in lines), default=0)


def plain_lines(lines: StyledLineSet) -> list[str]:
    return ["".join(span.text for span in line) for line in lines]


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    w: int
    h: int


@dataclass(frozen=True)
class RenderFrame:
    info: StyledLineSet = ()
    status: StyledLineSet = ()
    layout: Layout = Layout.HORIZONTAL
    order: Order = Order.INFO_FIRST
    debug: bool = False
