"""Doctor payload for local troubleshooting."""

from __future__ import annotations

import platform
import re
import shutil
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any

from loopfetch_telemetry.models import TelemetrySnapshot

from .config import AppConfig, config_path, script_path
from .logging_setup import log_dir

_SECRET_RE = re.compile(r"(token|secret|password|apikey|api_key|auth)", re.IGNORECASE)


def redact(value: Any) -> Any:
    if isinstance(value, dict):
        out: dict[str, Any] = {}
        for k, v in value.items():
            if _SECRET_RE.search(k):
                out[k] = "***REDACTED***"
            else:
                out[k] = redact(v)
        return out
    if isinstance(value, list):
        return [redact(v) for v in value]
    return value


def _lua_version() -> str | None:
    try:
        from lupa import LuaRuntime

        return str(LuaRuntime().eval("_VERSION"))
    except Exception:
        return None


def build_doctor_payload(cfg: AppConfig, snapshot: TelemetrySnapshot | None = None) -> dict[str, Any]:
    script = script_path(cfg)
    return {
        "ts_utc": datetime.now(timezone.utc).isoformat(),
        "platform": platform.platform(),
        "python": platform.python_version(),
        "lua": _lua_version(),
        "config": redact(asdict(cfg)),
        "paths": {
            "config": str(config_path()),
            "script": str(script),
            "script_exists": script.exists(),
            "logs": str(log_dir()),
        },
        "tools": {
            "playerctl": shutil.which("playerctl"),
        },
        "snapshot": redact(asdict(snapshot)) if snapshot is not None else None,
    }
