"""Owner of the embedded Lua runtime and everything crossing into and out of it."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from lupa import LuaError, LuaRuntime

from loopfetch_renderer.models import StyledLineSet
from loopfetch_telemetry.models import TelemetrySnapshot

from .accessors import ScriptValue, new_runtime, to_lua
from .errors import ScriptError, ScriptLoadError, ScriptRuntimeError
from .marshal import TableWriter, write_info, write_loop, write_settings
from .models import EvaluateResult, PushResult, Settings
from .parse import parse_lines, parse_settings

logger = logging.getLogger("loopfetch.script")

SETTINGS_GLOBAL = "SETTINGS"
LINES_GLOBAL = "INFO_LINES"
INFO_GLOBAL = "Info"
LOOP_GLOBAL = "Loop"
ENTRY_POINT = "main"

DEFAULT_INSTRUCTION_BUDGET = 10_000_000

# Standard functions are bound as upvalues when the runtime is created; the
# script may reassign or clear the globals.
_LOADER = """
(function(load)
  return function(src, name)
    local fn, err = load(src, name, "t")
    return fn, err
  end
end)(load)
"""

_GUARDED_CALL = """
(function(sethook, traceback, xpcall, tostring, error)
  local function exceeded()
    error("instruction budget exceeded", 2)
  end
  return function(fn, budget)
    if budget > 0 then
      sethook(exceeded, "", budget)
    end
    local ok, err = xpcall(fn, traceback)
    sethook()
    if ok then
      return true, nil
    end
    return false, tostring(err)
  end
end)(debug.sethook, debug.traceback, xpcall, tostring, error)
"""


class ScriptBridge:
    """Push telemetry in, run the script, pull settings and lines out.

    ``reload`` swaps the source text and throws the whole runtime away, so the
    next pass starts from a clean environment. The first ``push`` after a
    reload leaves ``SETTINGS`` alone so the freshly loaded script's own
    declarations take effect.
    """

    def __init__(
        self,
        source: str = "",
        chunk_name: str = "init.lua",
        instruction_budget: int = DEFAULT_INSTRUCTION_BUDGET,
    ) -> None:
        self.chunk_name = chunk_name
        self.instruction_budget = max(0, int(instruction_budget))
        self._source = source
        self._generation = 0
        self._lua: LuaRuntime | None = None
        self._loader: Any = None
        self._guarded_call: Any = None
        self._rawget: Any = None
        self._rawset: Any = None
        self._program: Any = None
        self._fresh = True
        self._last_error: str | None = None

    @property
    def source(self) -> str:
        return self._source

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def fresh(self) -> bool:
        return self._fresh

    def reload(self, new_source: str) -> None:
        self._source = new_source
        self._lua = None
        self._loader = None
        self._guarded_call = None
        self._rawget = None
        self._rawset = None
        self._program = None
        self._fresh = True
        self._last_error = None
        self._generation += 1
        logger.info("script reloaded", extra={"event": "script_reloaded"})

    def _runtime(self) -> LuaRuntime:
        if self._lua is None:
            lua = new_runtime()
            self._loader = lua.eval(_LOADER)
            self._guarded_call = lua.eval(_GUARDED_CALL)
            self._rawget = lua.eval("rawget")
            self._rawset = lua.eval("rawset")
            self._lua = lua
        return self._lua

    def globals(self) -> ScriptValue:
        return ScriptValue(self._runtime().globals(), self._rawget)

    def _writer(self, target: Any, previous: ScriptValue | None, path: str) -> TableWriter:
        return TableWriter(self._runtime(), target, previous, path, rawset=self._rawset)

    def push(
        self,
        snapshot: TelemetrySnapshot,
        settings: Settings,
        loop: Mapping[str, Any] | None = None,
    ) -> PushResult:
        lua = self._runtime()
        root = self.globals()
        # Globals go through rawset as well.
        env = self._writer(root.raw, None, "")

        info = self._writer(lua.table(), root.get(INFO_GLOBAL), INFO_GLOBAL)
        write_info(info, snapshot)
        env.set(INFO_GLOBAL, info.target)
        errors = list(info.errors)

        if loop is not None:
            loop_writer = self._writer(lua.table(), root.get(LOOP_GLOBAL), LOOP_GLOBAL)
            write_loop(loop_writer, loop)
            env.set(LOOP_GLOBAL, loop_writer.target)
            errors.extend(loop_writer.errors)

        settings_pushed = not self._fresh
        if settings_pushed:
            existing = root.table(SETTINGS_GLOBAL)
            target = existing.raw if existing is not None else lua.table()
            settings_writer = self._writer(target, None, SETTINGS_GLOBAL)
            write_settings(settings_writer, settings, existing)
            env.set(SETTINGS_GLOBAL, target)
            errors.extend(settings_writer.errors)
        errors.extend(env.errors)

        for err in errors:
            logger.warning(str(err), extra={"event": err.event})
        return PushResult(skipped=tuple(err.path for err in errors), settings_pushed=settings_pushed)

    def evaluate(self) -> EvaluateResult:
        self._runtime()
        try:
            if self._program is None:
                self._program = self._compile()
            self._run(self._program, "chunk")

            entry = self.globals().get(ENTRY_POINT)
            has_entry = entry.is_function
            if has_entry:
                self._run(entry.raw, ENTRY_POINT)
        except ScriptError as exc:
            self._report(exc)
            return EvaluateResult(ok=False, error=exc)
        finally:
            self._fresh = False

        self._last_error = None
        return EvaluateResult(ok=True, entry_point=has_entry)

    def pull(self, base: Settings | None = None) -> tuple[Settings, StyledLineSet]:
        root = self.globals()
        settings = parse_settings(root.table(SETTINGS_GLOBAL), base)
        lines = parse_lines(root.table(LINES_GLOBAL))
        return settings, lines

    def _compile(self) -> Any:
        try:
            program, message = self._loader(to_lua(self._source), to_lua("=" + self.chunk_name))
        except (LuaError, UnicodeError) as exc:
            raise ScriptLoadError(str(exc)) from exc
        if program is None:
            raise ScriptLoadError(ScriptValue(message).as_string("script failed to load"))
        return program

    def _run(self, fn: Any, label: str) -> None:
        try:
            ok, message = self._guarded_call(fn, self.instruction_budget)
        except LuaError as exc:
            raise ScriptRuntimeError(f"{label}: {exc}") from exc
        if not ok:
            raise ScriptRuntimeError(f"{label}: {ScriptValue(message).as_string('error')}")

    def _report(self, exc: ScriptError) -> None:
        message = str(exc)
        if message == self._last_error:
            return
        self._last_error = message
        logger.error(message, extra={"event": exc.event})
