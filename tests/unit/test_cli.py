import io
import json
import logging
import logging.handlers
import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "apps" / "terminal"))
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(ROOT / "packages" / "renderer"))
sys.path.insert(0, str(ROOT / "packages" / "script"))
sys.path.insert(0, str(ROOT / "packages" / "telemetry"))

from loopfetch_app.cli import build_parser, main
from loopfetch_app.keys import KeyKind, decode_key, decode_keys
from loopfetch_core.config import AppConfig, save_config
from loopfetch_core.session import Action


class CliTests(unittest.TestCase):
    def test_run_command(self):
        parser = build_parser()
        args = parser.parse_args(["run"])
        self.assertEqual(args.command, "run")

    def test_snapshot_defaults(self):
        parser = build_parser()
        args = parser.parse_args(["snapshot"])
        self.assertEqual(args.command, "snapshot")
        self.assertIsNone(args.png)
        self.assertEqual((args.width, args.height), (100, 30))

    def test_snapshot_png(self):
        parser = build_parser()
        args = parser.parse_args(["snapshot", "--png", "out.png", "--width", "80", "--height", "24"])
        self.assertEqual(args.png, "out.png")
        self.assertEqual((args.width, args.height), (80, 24))

    def test_init_script_force(self):
        parser = build_parser()
        self.assertTrue(parser.parse_args(["init-script", "--force"]).force)
        self.assertFalse(parser.parse_args(["init-script"]).force)

    def test_doctor_command(self):
        parser = build_parser()
        self.assertEqual(parser.parse_args(["doctor"]).command, "doctor")


class CliMainTests(unittest.TestCase):
    def setUp(self):
        self.logger = logging.getLogger("loopfetch")
        self.saved = self.logger.handlers[:]
        self.logger.handlers = []

    def tearDown(self):
        for handler in self.logger.handlers:
            handler.close()
        self.logger.handlers = self.saved

    def test_configured_log_retention_reaches_file_handler(self):
        with tempfile.TemporaryDirectory() as tmp, mock.patch.dict(os.environ, {"XDG_CONFIG_HOME": tmp}):
            with mock.patch("loopfetch_core.config.platform.system", return_value="Linux"):
                cfg = AppConfig()
                cfg.diagnostics.keep_log_files = 11
                save_config(cfg)
                with mock.patch("sys.stdout", new_callable=io.StringIO) as out:
                    self.assertEqual(main(["init-script"]), 0)
                payload = json.loads(out.getvalue())
                self.assertTrue(payload["written"])
                self.assertTrue(Path(payload["script"]).exists())

                handlers = [h for h in self.logger.handlers if isinstance(h, logging.handlers.TimedRotatingFileHandler)]
                self.assertEqual([h.backupCount for h in handlers], [11])
                for handler in self.logger.handlers:
                    handler.close()


class KeyTests(unittest.TestCase):
    def test_letter_keys(self):
        self.assertEqual(decode_key(ord("q")), Action.EXIT)
        self.assertEqual(decode_key(ord("d")), Action.TOGGLE_DEBUG)
        self.assertEqual(decode_key(ord("r")), Action.RELOAD)
        self.assertIsNone(decode_key(ord("x")))

    def test_arrow_keys(self):
        import curses

        self.assertEqual(decode_key(curses.KEY_UP), Action.LAYOUT)
        self.assertEqual(decode_key(curses.KEY_DOWN), Action.LAYOUT)
        self.assertEqual(decode_key(curses.KEY_LEFT), Action.ORDER)
        self.assertEqual(decode_key(curses.KEY_RIGHT), Action.ORDER)

    def test_only_presses_act(self):
        self.assertIsNone(decode_key(ord("q"), KeyKind.RELEASE))
        self.assertIsNone(decode_key(ord("q"), KeyKind.REPEAT))

    def test_decode_keys_drops_unknown(self):
        self.assertEqual(decode_keys([ord("x"), ord("r"), ord("q")]), [Action.RELOAD, Action.EXIT])


if __name__ == "__main__":
    unittest.main()
