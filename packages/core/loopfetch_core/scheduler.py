"""Multi-cadence scheduling: render frames, logic ticks and telemetry refreshes."""

from __future__ import annotations

from dataclasses import asdict, dataclass

from loopfetch_script.models import Settings

_COUNTER_MASK = (1 << 64) - 1
MAX_SLEEP_S = 0.05


@dataclass(frozen=True)
class LogicDecision:
    tick: int
    refresh_telemetry: bool
    request_reload: bool


@dataclass(frozen=True)
class LoopStats:
    frame: int = 0
    tick: int = 0
    fps: float = 0.0
    tps: float = 0.0
    target_fps: int = 0
    target_tps: int = 0
    frame_ms: float = 0.0
    tick_ms: float = 0.0

    def as_mapping(self) -> dict[str, int | float]:
        return asdict(self)


def _ewma(current: float, sample: float) -> float:
    return sample if current == 0 else (0.75 * current + 0.25 * sample)


class Scheduler:
    """Counts frames and logic ticks and decides what each tick does.

    ``logic_pass`` is pure counting; the ``*_due`` / ``mark_*`` pair is the
    wall-clock side, fed with ``time.monotonic()`` values by the main loop.
    """

    def __init__(self, auto_reload_multiple: int | None = None) -> None:
        self.auto_reload_multiple = auto_reload_multiple
        self.frame_count = 0
        self.logic_count = 0
        self._last_logic: float | None = None
        self._last_render: float | None = None
        self._tps = 0.0
        self._fps = 0.0
        self._tick_ms = 0.0
        self._frame_ms = 0.0

    def logic_pass(self, settings: Settings) -> LogicDecision:
        tick = self.logic_count
        rps = max(1, settings.rps)
        refresh = tick % rps == 0
        reload = False
        if self.auto_reload_multiple is not None:
            reload = tick % (rps * self.auto_reload_multiple) == 0
        self.logic_count = (tick + 1) & _COUNTER_MASK
        return LogicDecision(tick=tick, refresh_telemetry=refresh, request_reload=reload)

    def render_pass(self) -> int:
        frame = self.frame_count
        self.frame_count = (frame + 1) & _COUNTER_MASK
        return frame

    @staticmethod
    def _period(rate: int) -> float:
        return 1.0 / max(1, rate)

    def logic_due(self, now: float, settings: Settings) -> bool:
        if self._last_logic is None:
            return True
        return now - self._last_logic >= self._period(settings.tps)

    def render_due(self, now: float, settings: Settings) -> bool:
        if self._last_render is None:
            return True
        return now - self._last_render >= self._period(settings.fps)

    def mark_logic(self, now: float, elapsed_s: float = 0.0) -> None:
        if self._last_logic is not None and now > self._last_logic:
            self._tps = _ewma(self._tps, 1.0 / (now - self._last_logic))
        self._tick_ms = max(elapsed_s, 0.0) * 1000.0
        self._last_logic = now

    def mark_render(self, now: float, elapsed_s: float = 0.0) -> None:
        if self._last_render is not None and now > self._last_render:
            self._fps = _ewma(self._fps, 1.0 / (now - self._last_render))
        self._frame_ms = max(elapsed_s, 0.0) * 1000.0
        self._last_render = now

    def sleep_for(self, now: float, settings: Settings) -> float:
        waits = [MAX_SLEEP_S]
        if self._last_logic is not None:
            waits.append(self._last_logic + self._period(settings.tps) - now)
        if self._last_render is not None:
            waits.append(self._last_render + self._period(settings.fps) - now)
        if self._last_logic is None or self._last_render is None:
            return 0.0
        return max(0.0, min(waits))

    def stats(self, settings: Settings) -> LoopStats:
        return LoopStats(
            frame=self.frame_count,
            tick=self.logic_count,
            fps=round(self._fps, 2),
            tps=round(self._tps, 2),
            target_fps=settings.fps,
            target_tps=settings.tps,
            frame_ms=round(self._frame_ms, 3),
            tick_ms=round(self._tick_ms, 3),
        )
