"""Script declarations -> native settings and styled lines."""

from __future__ import annotations

from loopfetch_renderer.colors import parse_hex_color
from loopfetch_renderer.models import Layout, Order, Span, Style, StyledLine, StyledLineSet

from .accessors import ScriptValue
from .models import Settings, Vars

_LAYOUT_KEYS = {"h": Layout.HORIZONTAL, "v": Layout.VERTICAL}
_ORDER_KEYS = {"i": Order.INFO_FIRST, "a": Order.ASCII_FIRST}


def parse_layout(text: str, default: Layout = Layout.HORIZONTAL) -> Layout:
    if not text:
        return default
    return _LAYOUT_KEYS.get(text[0].lower(), default)


def parse_order(text: str, default: Order = Order.INFO_FIRST) -> Order:
    if not text:
        return default
    return _ORDER_KEYS.get(text[0].lower(), default)


def parse_settings(table: ScriptValue | None, defaults: Settings | None = None) -> Settings:
    """Read the ``SETTINGS`` table field by field; each bad field falls back alone."""
    defaults = defaults or Settings()
    if table is None or not table.is_table:
        return defaults

    order_table = table.table("order")
    order = defaults.order
    if order_table is not None:
        order = parse_order(order_table.string(1, ""), defaults.order)

    vars_table = table.table("vars")
    comp = defaults.vars.comp
    if vars_table is not None:
        comp = vars_table.string("comp", defaults.vars.comp)

    return Settings(
        fps=table.integer("fps", defaults.fps, minimum=1),
        tps=table.integer("tps", defaults.tps, minimum=1),
        rps=table.integer("rps", defaults.rps, minimum=1),
        layout=parse_layout(table.string("layout", ""), defaults.layout),
        order=order,
        vars=Vars(comp=comp),
    )


def parse_style(table: ScriptValue | None) -> Style:
    if table is None:
        return Style()
    fg = parse_hex_color(table.string("fg", ""))
    bg = parse_hex_color(table.string("bg", ""))
    return Style(
        fg=fg,
        bg=bg,
        bold=table.boolean("bold", False),
        italic=table.boolean("italic", False),
    )


def parse_span(value: ScriptValue) -> Span | None:
    if not value.is_table:
        return None
    return Span(text=value.string("text", ""), style=parse_style(value.table("style")))


def parse_line(value: ScriptValue) -> StyledLine:
    if not value.is_table:
        return ()
    spans = (parse_span(item) for item in value.sequence())
    return tuple(span for span in spans if span is not None)


def parse_lines(table: ScriptValue | None) -> StyledLineSet:
    """Every index up to the highest one yields a line; holes become empty lines."""
    if table is None or not table.is_table:
        return ()
    return tuple(parse_line(item) for item in table.sequence())
