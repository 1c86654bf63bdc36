"""Script-facing settings and bridge result models."""

from __future__ import annotations

from dataclasses import dataclass, field

from loopfetch_renderer.models import Layout, Order

DEFAULT_FPS = 24
DEFAULT_TPS = 12
DEFAULT_RPS = 3
DEFAULT_COMP = "unknown"


@dataclass(frozen=True)
class Vars:
    comp: str = DEFAULT_COMP


@dataclass(frozen=True)
class Settings:
    fps: int = DEFAULT_FPS
    tps: int = DEFAULT_TPS
    rps: int = DEFAULT_RPS
    layout: Layout = Layout.HORIZONTAL
    order: Order = Order.INFO_FIRST
    vars: Vars = field(default_factory=Vars)


@dataclass(frozen=True)
class PushResult:
    skipped: tuple[str, ...] = ()
    settings_pushed: bool = True

    @property
    def ok(self) -> bool:
        return not self.skipped


@dataclass(frozen=True)
class EvaluateResult:
    ok: bool
    entry_point: bool = False
    error: Exception | None = None
