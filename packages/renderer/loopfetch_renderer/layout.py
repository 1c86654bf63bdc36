"""Region geometry shared by the terminal and image displays."""

from __future__ import annotations

from dataclasses import dataclass

from .models import Layout, Order, Rect, StyledLineSet, max_width


@dataclass(frozen=True)
class Composition:
    width: int
    height: int
    info: Rect
    status: Rect
    gaps: tuple[Rect, ...]


def _clip(rect: Rect, bounds: Rect) -> Rect:
    x = min(max(rect.x, bounds.x), bounds.x + bounds.w)
    y = min(max(rect.y, bounds.y), bounds.y + bounds.h)
    w = max(0, min(rect.w, bounds.x + bounds.w - x))
    h = max(0, min(rect.h, bounds.y + bounds.h - y))
    return Rect(x, y, w, h)


def compose(
    width: int,
    height: int,
    info: StyledLineSet,
    status: StyledLineSet,
    layout: Layout,
    order: Order,
) -> Composition:
    """Centre the info and status regions in a ``width`` x ``height`` area.

    Regions sit side by side for ``Layout.HORIZONTAL`` and stacked for
    ``Layout.VERTICAL``; ``order`` decides which one comes first.
    """
    info_w, info_h = max_width(info), len(info)
    status_w, status_h = max_width(status), len(status)

    if layout is Layout.VERTICAL:
        total_w = max(info_w, status_w)
        total_h = info_h + status_h
    else:
        total_w = info_w + status_w
        total_h = max(info_h, status_h)

    gap_w = max(width - total_w, 0) // 2
    gap_h = max(height - total_h, 0) // 2
    content = Rect(gap_w, gap_h, max(width - 2 * gap_w, 0), max(height - 2 * gap_h, 0))

    gaps = (
        Rect(0, 0, width, gap_h),
        Rect(0, height - gap_h, width, gap_h),
        Rect(0, gap_h, gap_w, content.h),
        Rect(width - gap_w, gap_h, gap_w, content.h),
    )

    first, second = ((info_w, info_h), (status_w, status_h))
    if order is Order.ASCII_FIRST:
        first, second = second, first

    if layout is Layout.VERTICAL:
        a = Rect(content.x, content.y, content.w, first[1])
        b = Rect(content.x, content.y + first[1], content.w, second[1])
    else:
        a = Rect(content.x, content.y, first[0], content.h)
        b = Rect(content.x + first[0], content.y, second[0], content.h)

    a, b = _clip(a, content), _clip(b, content)
    info_rect, status_rect = (a, b) if order is Order.INFO_FIRST else (b, a)
    return Composition(width=width, height=height, info=info_rect, status=status_rect, gaps=gaps)
