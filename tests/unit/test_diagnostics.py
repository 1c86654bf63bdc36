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
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(ROOT / "packages" / "renderer"))
sys.path.insert(0, str(ROOT / "packages" / "script"))
sys.path.insert(0, str(ROOT / "packages" / "telemetry"))

from loopfetch_core.config import load_config
from loopfetch_core.diagnostics import build_doctor_payload, redact
from loopfetch_core.logging_setup import JsonFormatter, configure_logging
from loopfetch_telemetry.models import TelemetrySnapshot


class DiagnosticsTests(unittest.TestCase):
    def test_doctor_payload_shape(self):
        with tempfile.TemporaryDirectory() as tmp, mock.patch.dict(os.environ, {"XDG_CONFIG_HOME": tmp}):
            with mock.patch("loopfetch_core.config.platform.system", return_value="Linux"):
                cfg = load_config(Path(tmp) / "missing.json")
                payload = build_doctor_payload(cfg, TelemetrySnapshot(host="box"))
                self.assertIn("platform", payload)
                self.assertEqual(payload["snapshot"]["host"], "box")
                self.assertFalse(payload["paths"]["script_exists"])
                self.assertTrue(payload["paths"]["logs"].startswith(tmp))
                json.dumps(payload, default=str)

    def test_redact_nested_secrets(self):
        data = {"script": {"auth_token": "x", "path": "/a"}, "items": [{"password": "p"}]}
        out = redact(data)
        self.assertEqual(out["script"]["auth_token"], "***REDACTED***")
        self.assertEqual(out["script"]["path"], "/a")
        self.assertEqual(out["items"][0]["password"], "***REDACTED***")


class JsonFormatterTests(unittest.TestCase):
    def test_formats_event_and_message(self):
        record = logging.LogRecord("loopfetch.script", logging.ERROR, __file__, 1, "bad %s", ("chunk",), None)
        record.event = "script_load_error"
        payload = json.loads(JsonFormatter().format(record))
        self.assertEqual(payload["msg"], "bad chunk")
        self.assertEqual(payload["event"], "script_load_error")
        self.assertEqual(payload["logger"], "loopfetch.script")
        self.assertNotIn("crash_id", payload)


class ConfigureLoggingTests(unittest.TestCase):
    def setUp(self):
        self.logger = logging.getLogger("loopfetch")
        self.saved = self.logger.handlers[:]
        self.logger.handlers = []

    def tearDown(self):
        self.close_handlers()
        self.logger.handlers = self.saved

    def close_handlers(self):
        for handler in self.logger.handlers:
            handler.close()
        self.logger.handlers = []

    def file_handlers(self):
        return [h for h in self.logger.handlers if isinstance(h, logging.handlers.TimedRotatingFileHandler)]

    def test_retention_follows_latest_call(self):
        with tempfile.TemporaryDirectory() as tmp:
            configure_logging(keep_files=11, console=False, directory=Path(tmp))
            self.assertEqual([h.backupCount for h in self.file_handlers()], [11])

            configure_logging(keep_files=4, console=False, directory=Path(tmp))
            self.assertEqual([h.backupCount for h in self.file_handlers()], [4])
            configure_logging(keep_files=0, console=False, directory=Path(tmp))
            self.assertEqual(len(self.logger.handlers), 1)
            self.assertEqual([h.backupCount for h in self.file_handlers()], [2])
            self.close_handlers()


if __name__ == "__main__":
    unittest.main()
