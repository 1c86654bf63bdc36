"""The logic pass: input, scheduling, telemetry, reload and script evaluation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Protocol

from loopfetch_renderer.models import RenderFrame, Span, StyledLineSet, max_width
from loopfetch_script.bridge import ScriptBridge
from loopfetch_script.models import EvaluateResult, PushResult
from loopfetch_telemetry.models import TelemetrySnapshot

from .reload import ReloadController
from .scheduler import LogicDecision, Scheduler
from .settings import SettingsStore

logger = logging.getLogger("loopfetch")

RELOADED_INDICATOR = "reloaded..."


class Action(str, Enum):
    EXIT = "exit"
    TOGGLE_DEBUG = "toggle_debug"
    RELOAD = "reload"
    LAYOUT = "layout"
    ORDER = "order"


class TelemetryProvider(Protocol):
    def fetch(self, comp: str = ...) -> TelemetrySnapshot: ...

    def refresh(self, comp: str = ...) -> TelemetrySnapshot: ...


@dataclass(frozen=True)
class PassReport:
    decision: LogicDecision
    refreshed: bool = False
    reloaded: bool = False
    push: PushResult | None = None
    evaluate: EvaluateResult | None = None

    @property
    def ok(self) -> bool:
        return self.evaluate is not None and self.evaluate.ok


class Session:
    def __init__(
        self,
        telemetry: TelemetryProvider,
        script_loader: Callable[[], str],
        bridge: ScriptBridge | None = None,
        scheduler: Scheduler | None = None,
        store: SettingsStore | None = None,
    ) -> None:
        self.telemetry = telemetry
        self.script_loader = script_loader
        self.bridge = bridge or ScriptBridge()
        self.scheduler = scheduler or Scheduler()
        self.store = store or SettingsStore()
        self.reloader = ReloadController(script_loader)
        self.snapshot = TelemetrySnapshot()
        self.lines: StyledLineSet = ()
        self.debug = False
        self.exit_requested = False

    def start(self) -> EvaluateResult:
        """Take the first snapshot, load the script and run it once."""
        try:
            self.snapshot = self.telemetry.fetch(self.store.vars.comp)
        except Exception as exc:
            logger.warning(f"initial telemetry fetch failed: {exc}", extra={"event": "telemetry_refresh_failed"})

        try:
            self.bridge.reload(self.script_loader())
        except Exception as exc:
            logger.error(f"script load failed: {exc}", extra={"event": "script_reload_failed"})

        _, result = self._run_script()
        return result

    def handle(self, action: Action) -> None:
        if action is Action.EXIT:
            self.exit_requested = True
        elif action is Action.TOGGLE_DEBUG:
            self.debug = not self.debug
        elif action is Action.RELOAD:
            self.reloader.request()
        elif action is Action.LAYOUT:
            self.store.toggle_layout()
        elif action is Action.ORDER:
            self.store.toggle_order()

    def logic_pass(self, actions: Iterable[Action] = ()) -> PassReport:
        for action in actions:
            self.handle(action)

        decision = self.scheduler.logic_pass(self.store.settings)
        refreshed = decision.refresh_telemetry and self._refresh()
        if decision.request_reload:
            self.reloader.request()
        reloaded = self.reloader.step(self.bridge)

        push, result = self._run_script()
        return PassReport(
            decision=decision,
            refreshed=refreshed,
            reloaded=reloaded,
            push=push,
            evaluate=result,
        )

    def _refresh(self) -> bool:
        try:
            self.snapshot = self.telemetry.refresh(self.store.vars.comp)
        except Exception as exc:
            logger.warning(f"telemetry refresh failed: {exc}", extra={"event": "telemetry_refresh_failed"})
            return False
        return True

    def _run_script(self) -> tuple[PushResult, EvaluateResult]:
        settings = self.store.settings
        loop = self.scheduler.stats(settings).as_mapping()
        push = self.bridge.push(self.snapshot, settings, loop)
        result = self.bridge.evaluate()
        if result.ok:
            parsed, lines = self.bridge.pull()
            self.store.apply(parsed)
            self.lines = lines
        return push, result

    def status_lines(self, width: int, height: int) -> StyledLineSet:
        settings = self.store.settings
        stats = self.scheduler.stats(settings)
        fps_budget = 1000.0 / settings.fps
        tps_budget = 1000.0 / settings.tps
        reloaded = RELOADED_INDICATOR if self.reloader.just_reloaded else ""
        text = (
            f"fps: {stats.fps:06.2f} {settings.fps} [{stats.frame_ms:06.2f}/{fps_budget:06.2f} ms] "
            f"({stats.frame % settings.fps:02d})",
            f"tps: {stats.tps:06.2f} {settings.tps} [{stats.tick_ms:06.2f}/{tps_budget:06.2f} ms] "
            f"({stats.tick % settings.tps:02d})",
            f"rps: {settings.rps:02d} {reloaded}".rstrip(),
            f"area: {width} x {height}  ({max_width(self.lines)})",
        )
        return tuple((Span(line),) for line in text)

    def frame(self, width: int = 0, height: int = 0) -> RenderFrame:
        return RenderFrame(
            info=self.lines,
            status=self.status_lines(width, height),
            layout=self.store.layout,
            order=self.store.order,
            debug=self.debug,
        )
