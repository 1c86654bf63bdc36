import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "renderer"))

from loopfetch_renderer.colors import parse_hex_color, xterm256
from loopfetch_renderer.models import Color


class ColorParseTests(unittest.TestCase):
    def test_hash_prefixed(self):
        self.assertEqual(parse_hex_color("#ff00aa"), Color(255, 0, 170))

    def test_multiple_hashes_stripped(self):
        self.assertEqual(parse_hex_color("##00ff00"), Color(0, 255, 0))

    def test_invalid_pair_falls_back(self):
        self.assertEqual(parse_hex_color("zz00aa"), Color(255, 0, 170))
        self.assertEqual(parse_hex_color("#00zzaa"), Color(0, 0, 170))
        self.assertEqual(parse_hex_color("#0000zz"), Color(0, 0, 0))

    def test_wrong_length_is_no_color(self):
        self.assertIsNone(parse_hex_color("#ff00a"))
        self.assertIsNone(parse_hex_color(""))
        self.assertIsNone(parse_hex_color("#ff00aa00"))


class PaletteTests(unittest.TestCase):
    def test_primary_colors_map_to_cube(self):
        self.assertEqual(xterm256(Color(255, 0, 0)), 196)
        self.assertEqual(xterm256(Color(0, 255, 0)), 46)
        self.assertEqual(xterm256(Color(0, 0, 0)), 16)

    def test_mid_grey_uses_ramp(self):
        self.assertEqual(xterm256(Color(128, 128, 128)), 244)


if __name__ == "__main__":
    unittest.main()
