import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "renderer"))

from loopfetch_renderer.layout import compose
from loopfetch_renderer.models import Layout, Order, Rect, Span, line_width, max_width, plain_lines

INFO = ((Span("hello"),), (Span("wor"), Span("ld")))
STATUS = ((Span("abc"),),)


class AxisTests(unittest.TestCase):
    def test_layout_toggle_is_involution(self):
        for layout in Layout:
            self.assertNotEqual(layout.toggle(), layout)
            self.assertEqual(layout.toggle().toggle(), layout)

    def test_order_toggle_is_involution(self):
        for order in Order:
            self.assertNotEqual(order.toggle(), order)
            self.assertEqual(order.toggle().toggle(), order)

    def test_order_names(self):
        self.assertEqual(Order.INFO_FIRST.names(), ("info", "ascii"))
        self.assertEqual(Order.ASCII_FIRST.names(), ("ascii", "info"))


class LineSetTests(unittest.TestCase):
    def test_widths(self):
        self.assertEqual(line_width(INFO[1]), 5)
        self.assertEqual(max_width(INFO), 5)
        self.assertEqual(max_width(()), 0)
        self.assertEqual(plain_lines(INFO), ["hello", "world"])


class ComposeTests(unittest.TestCase):
    def test_horizontal_info_first(self):
        comp = compose(20, 10, INFO, STATUS, Layout.HORIZONTAL, Order.INFO_FIRST)
        self.assertEqual(comp.info, Rect(6, 4, 5, 2))
        self.assertEqual(comp.status, Rect(11, 4, 3, 2))
        self.assertEqual(comp.gaps[0], Rect(0, 0, 20, 4))

    def test_horizontal_ascii_first(self):
        comp = compose(20, 10, INFO, STATUS, Layout.HORIZONTAL, Order.ASCII_FIRST)
        self.assertEqual(comp.status, Rect(6, 4, 3, 2))
        self.assertEqual(comp.info, Rect(9, 4, 5, 2))

    def test_vertical_stacks_regions(self):
        comp = compose(20, 10, INFO, STATUS, Layout.VERTICAL, Order.INFO_FIRST)
        self.assertEqual(comp.info, Rect(7, 3, 6, 2))
        self.assertEqual(comp.status, Rect(7, 5, 6, 1))

    def test_small_area_clips(self):
        comp = compose(4, 1, INFO, STATUS, Layout.HORIZONTAL, Order.INFO_FIRST)
        self.assertEqual(comp.info, Rect(0, 0, 4, 1))
        self.assertEqual(comp.status.w, 0)


if __name__ == "__main__":
    unittest.main()
