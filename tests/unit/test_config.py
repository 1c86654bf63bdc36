import json
import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(ROOT / "packages" / "renderer"))
sys.path.insert(0, str(ROOT / "packages" / "script"))
sys.path.insert(0, str(ROOT / "packages" / "telemetry"))

from loopfetch_core.config import (
    AppConfig,
    config_path,
    ensure_script,
    load_config,
    read_script,
    save_config,
    script_path,
)
from loopfetch_script.template import default_script


class ConfigTests(unittest.TestCase):
    def test_load_default_when_missing(self):
        with tempfile.TemporaryDirectory() as tmp:
            cfg = load_config(Path(tmp) / "missing.json")
            self.assertIsInstance(cfg, AppConfig)
            self.assertIsNone(cfg.script.path)
            self.assertTrue(cfg.script.create_if_missing)
            self.assertIsNone(cfg.loop.auto_reload_multiple)
            self.assertTrue(cfg.telemetry.media)
            self.assertEqual(cfg.ui.theme, "Classic")

    def test_save_and_reload(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            cfg = load_config(path)
            cfg.loop.auto_reload_multiple = 4
            cfg.telemetry.gpu = False
            save_config(cfg, path)
            reloaded = load_config(path)
            self.assertEqual(reloaded.loop.auto_reload_multiple, 4)
            self.assertFalse(reloaded.telemetry.gpu)

    def test_invalid_values_normalized(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            raw = {
                "script": {"path": "", "instruction_budget": "lots", "unknown": 1},
                "loop": {"auto_reload_multiple": 0},
                "ui": {"theme": "Neon"},
                "diagnostics": {"keep_log_files": 0},
                "telemetry": "yes",
            }
            path.write_text(json.dumps(raw), encoding="utf-8")
            cfg = load_config(path)
            self.assertIsNone(cfg.script.path)
            self.assertEqual(cfg.script.instruction_budget, AppConfig().script.instruction_budget)
            self.assertIsNone(cfg.loop.auto_reload_multiple)
            self.assertEqual(cfg.ui.theme, "Classic")
            self.assertEqual(cfg.diagnostics.keep_log_files, 2)
            self.assertTrue(cfg.telemetry.media)

    def test_unreadable_file_is_defaults(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            path.write_text("{not json", encoding="utf-8")
            self.assertEqual(load_config(path), AppConfig())
            path.write_text("[1, 2]", encoding="utf-8")
            self.assertEqual(load_config(path), AppConfig())

    def test_default_paths_follow_xdg(self):
        with tempfile.TemporaryDirectory() as tmp, mock.patch.dict(os.environ, {"XDG_CONFIG_HOME": tmp}):
            with mock.patch("loopfetch_core.config.platform.system", return_value="Linux"):
                self.assertEqual(config_path(), Path(tmp) / "loopfetch" / "config.json")
                self.assertEqual(script_path(AppConfig()), Path(tmp) / "loopfetch" / "init.lua")


class ScriptFileTests(unittest.TestCase):
    def test_ensure_script_writes_template_once(self):
        with tempfile.TemporaryDirectory() as tmp:
            cfg = AppConfig()
            cfg.script.path = str(Path(tmp) / "nested" / "init.lua")
            path, written = ensure_script(cfg)
            self.assertTrue(written)
            self.assertEqual(path.read_text(encoding="utf-8"), default_script())

            path.write_text("-- mine", encoding="utf-8")
            _, written = ensure_script(cfg)
            self.assertFalse(written)
            self.assertEqual(read_script(cfg), "-- mine")

            _, written = ensure_script(cfg, force=True)
            self.assertTrue(written)
            self.assertEqual(read_script(cfg), default_script())

    def test_read_script_creates_when_missing(self):
        with tempfile.TemporaryDirectory() as tmp:
            cfg = AppConfig()
            cfg.script.path = str(Path(tmp) / "init.lua")
            self.assertIn("INFO_LINES", read_script(cfg))

    def test_read_script_missing_without_create(self):
        with tempfile.TemporaryDirectory() as tmp:
            cfg = AppConfig()
            cfg.script.path = str(Path(tmp) / "init.lua")
            cfg.script.create_if_missing = False
            with self.assertRaises(OSError):
                read_script(cfg)


if __name__ == "__main__":
    unittest.main()
