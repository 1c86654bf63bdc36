"""Core services: settings, scheduling, reload lifecycle, session, config and diagnostics."""

from .config import AppConfig, ensure_script, load_config, read_script, save_config, script_path
from .diagnostics import build_doctor_payload
from .reload import ReloadController, ReloadState
from .scheduler import LogicDecision, LoopStats, Scheduler
from .session import Action, PassReport, Session
from .settings import SettingsStore

__all__ = [
    "Action",
    "AppConfig",
    "LogicDecision",
    "LoopStats",
    "PassReport",
    "ReloadController",
    "ReloadState",
    "Scheduler",
    "Session",
    "SettingsStore",
    "build_doctor_payload",
    "ensure_script",
    "load_config",
    "read_script",
    "save_config",
    "script_path",
]
