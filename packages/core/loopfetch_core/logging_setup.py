"""JSON-lines file logging for the dashboard, plus crash hooks."""

from __future__ import annotations

import faulthandler
import json
import logging
import logging.handlers
import sys
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .config import config_root

_LOGGER_NAME = "loopfetch"
_LOG_FILE = "loopfetch.log"
_FAULT_FILE = "fault.log"

# Record attributes copied into the JSON line when a call site passes them via ``extra``.
_EXTRA_KEYS = ("event", "crash_id")


def log_dir() -> Path:
    path = config_root() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts_utc": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key in _EXTRA_KEYS:
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True)


def configure_logging(
    keep_files: int = 7,
    console: bool = True,
    level: int = logging.INFO,
    directory: Path | None = None,
) -> logging.Logger:
    """Attach handlers to the ``loopfetch`` logger once per process.

    ``loopfetch.script`` and ``loopfetch.telemetry`` propagate here. Keep
    ``console`` off while curses owns the terminal. Later calls only update
    the file retention.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    if logger.handlers:
        for handler in logger.handlers:
            if isinstance(handler, logging.handlers.TimedRotatingFileHandler):
                handler.backupCount = max(2, keep_files)
        return logger

    logger.setLevel(level)
    file_handler = logging.handlers.TimedRotatingFileHandler(
        filename=str((directory or log_dir()) / _LOG_FILE),
        when="midnight",
        backupCount=max(2, keep_files),
        encoding="utf-8",
    )
    file_handler.setFormatter(JsonFormatter())
    logger.addHandler(file_handler)

    if console:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        logger.addHandler(stream_handler)

    logger.info("logging configured", extra={"event": "logging_configured"})
    return logger


def get_logger() -> logging.Logger:
    return logging.getLogger(_LOGGER_NAME)


def _crash(logger: logging.Logger, kind: str, exc_info: tuple) -> None:
    crash_id = str(uuid.uuid4())
    logger.critical(
        f"{kind} crash_id={crash_id}",
        exc_info=exc_info,
        extra={"event": kind.replace(" ", "_"), "crash_id": crash_id},
    )


def install_crash_hooks() -> None:
    logger = get_logger()

    def _log_uncaught(exc_type, exc_value, exc_tb) -> None:
        _crash(logger, "uncaught exception", (exc_type, exc_value, exc_tb))

    def _thread_hook(args: threading.ExceptHookArgs) -> None:
        _crash(logger, "thread exception", (args.exc_type, args.exc_value, args.exc_traceback))

    sys.excepthook = _log_uncaught
    threading.excepthook = _thread_hook

    fault_file = (log_dir() / _FAULT_FILE).open("a", encoding="utf-8")
    faulthandler.enable(file=fault_file, all_threads=True)
    logger.info("fault handler enabled", extra={"event": "fault_handler_enabled"})
