"""Lua script bridge: marshalling, defensive parsing and evaluation."""

from .accessors import ScriptValue
from .bridge import ScriptBridge
from .errors import MarshalError, ScriptError, ScriptLoadError, ScriptRuntimeError
from .models import EvaluateResult, PushResult, Settings, Vars
from .parse import parse_layout, parse_lines, parse_order, parse_settings
from .template import default_script

__all__ = [
    "EvaluateResult",
    "MarshalError",
    "PushResult",
    "ScriptBridge",
    "ScriptError",
    "ScriptLoadError",
    "ScriptRuntimeError",
    "ScriptValue",
    "Settings",
    "Vars",
    "default_script",
    "parse_layout",
    "parse_lines",
    "parse_order",
    "parse_settings",
]
