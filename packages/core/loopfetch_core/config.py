"""Persistent app settings schema, load/save helpers and script file I/O."""

from __future__ import annotations

import json
import logging
import os
import platform
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from loopfetch_renderer.themes import DEFAULT_THEME_NAME, list_themes
from loopfetch_script.bridge import DEFAULT_INSTRUCTION_BUDGET
from loopfetch_script.template import default_script

logger = logging.getLogger("loopfetch")

CONFIG_VERSION = 1
SCRIPT_FILE = "init.lua"


@dataclass
class ScriptConfig:
    path: str | None = None
    create_if_missing: bool = True
    instruction_budget: int = DEFAULT_INSTRUCTION_BUDGET


@dataclass
class LoopConfig:
    auto_reload_multiple: int | None = None


@dataclass
class TelemetryConfig:
    media: bool = True
    gpu: bool = True


@dataclass
class UiConfig:
    theme: str = DEFAULT_THEME_NAME


@dataclass
class DiagnosticsConfig:
    keep_log_files: int = 7


@dataclass
class AppConfig:
    config_version: int = CONFIG_VERSION
    script: ScriptConfig = field(default_factory=ScriptConfig)
    loop: LoopConfig = field(default_factory=LoopConfig)
    telemetry: TelemetryConfig = field(default_factory=TelemetryConfig)
    ui: UiConfig = field(default_factory=UiConfig)
    diagnostics: DiagnosticsConfig = field(default_factory=DiagnosticsConfig)


def config_root() -> Path:
    system = platform.system()
    if system == "Windows":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return base / "loopfetch"
    if system == "Darwin":
        return Path.home() / "Library" / "Application Support" / "loopfetch"
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / "loopfetch"


def config_path() -> Path:
    return config_root() / "config.json"


def _merge(dataclass_type, raw: Any):
    defaults = dataclass_type()  # type: ignore[misc]
    if not isinstance(raw, dict):
        return defaults
    for k, v in raw.items():
        if hasattr(defaults, k):
            setattr(defaults, k, v)
    return defaults


def _as_int(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _normalize_script(cfg: AppConfig) -> None:
    if not isinstance(cfg.script.path, str) or not cfg.script.path.strip():
        cfg.script.path = None
    cfg.script.create_if_missing = bool(cfg.script.create_if_missing)
    cfg.script.instruction_budget = max(0, _as_int(cfg.script.instruction_budget, DEFAULT_INSTRUCTION_BUDGET))


def _normalize_loop(cfg: AppConfig) -> None:
    multiple = cfg.loop.auto_reload_multiple
    if multiple is None:
        return
    multiple = _as_int(multiple, 0)
    cfg.loop.auto_reload_multiple = multiple if multiple >= 1 else None


def _normalize_telemetry(cfg: AppConfig) -> None:
    cfg.telemetry.media = bool(cfg.telemetry.media)
    cfg.telemetry.gpu = bool(cfg.telemetry.gpu)


def _normalize_ui(cfg: AppConfig) -> None:
    if cfg.ui.theme not in list_themes():
        cfg.ui.theme = DEFAULT_THEME_NAME


def _normalize_diagnostics(cfg: AppConfig) -> None:
    cfg.diagnostics.keep_log_files = max(2, _as_int(cfg.diagnostics.keep_log_files, 7))


def load_config(path: Path | None = None) -> AppConfig:
    path = path or config_path()
    if not path.exists():
        return AppConfig()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except Exception:
        return AppConfig()
    if not isinstance(data, dict):
        return AppConfig()

    cfg = AppConfig(
        config_version=_as_int(data.get("config_version", CONFIG_VERSION), CONFIG_VERSION),
        script=_merge(ScriptConfig, data.get("script", {})),
        loop=_merge(LoopConfig, data.get("loop", {})),
        telemetry=_merge(TelemetryConfig, data.get("telemetry", {})),
        ui=_merge(UiConfig, data.get("ui", {})),
        diagnostics=_merge(DiagnosticsConfig, data.get("diagnostics", {})),
    )

    _normalize_script(cfg)
    _normalize_loop(cfg)
    _normalize_telemetry(cfg)
    _normalize_ui(cfg)
    _normalize_diagnostics(cfg)
    return cfg


def save_config(cfg: AppConfig, path: Path | None = None) -> Path:
    cfg.config_version = CONFIG_VERSION
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(cfg), indent=2, sort_keys=True), encoding="utf-8")
    return path


def script_path(cfg: AppConfig) -> Path:
    if cfg.script.path:
        return Path(cfg.script.path).expanduser()
    return config_root() / SCRIPT_FILE


def ensure_script(cfg: AppConfig, force: bool = False) -> tuple[Path, bool]:
    """Write the default script when it is missing (or always, with ``force``).

    Returns the script path and whether a file was written.
    """
    path = script_path(cfg)
    if path.exists() and not force:
        return path, False
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(default_script(), encoding="utf-8")
    logger.info(f"default script written to {path}", extra={"event": "script_created"})
    return path, True


def read_script(cfg: AppConfig) -> str:
    """Full text of the user script; raises ``OSError`` when it cannot be read."""
    path = script_path(cfg)
    if not path.exists() and cfg.script.create_if_missing:
        ensure_script(cfg)
    return path.read_text(encoding="utf-8")
