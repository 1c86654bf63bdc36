"""Failures that can happen while talking to the user script."""

from __future__ import annotations


class ScriptError(Exception):
    event = "script_error"


class ScriptLoadError(ScriptError):
    """The script source does not compile."""

    event = "script_load_error"


class ScriptRuntimeError(ScriptError):
    """The script chunk or its entry point raised."""

    event = "script_runtime_error"


class MarshalError(ScriptError):
    """A native value could not be stored in the script environment."""

    event = "marshal_error"

    def __init__(self, path: str, cause: Exception) -> None:
        super().__init__(f"cannot marshal {path}: {cause}")
        self.path = path
        self.cause = cause
