"""Two-state script reload lifecycle."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Protocol

logger = logging.getLogger("loopfetch")


class ReloadState(str, Enum):
    STABLE = "stable"
    RELOADING = "reloading"


class Reloadable(Protocol):
    def reload(self, new_source: str) -> None: ...


class ReloadController:
    """Latches reload requests and performs them at the start of a logic pass.

    A reload always completes within one ``step`` call; ``just_reloaded`` stays
    set until the following ``step`` so one frame can show the indicator.
    """

    def __init__(self, loader: Callable[[], str]) -> None:
        self._loader = loader
        self.state = ReloadState.STABLE
        self._requested = False
        self.just_reloaded = False
        self.reload_count = 0

    @property
    def pending(self) -> bool:
        return self._requested

    def request(self) -> None:
        self._requested = True

    def step(self, bridge: Reloadable) -> bool:
        self.just_reloaded = False
        if not self._requested:
            return False
        self._requested = False

        self.state = ReloadState.RELOADING
        try:
            source = self._loader()
        except Exception as exc:
            self.state = ReloadState.STABLE
            logger.error(f"script reload failed: {exc}", extra={"event": "script_reload_failed"})
            return False

        bridge.reload(source)
        self.state = ReloadState.STABLE
        self.reload_count += 1
        self.just_reloaded = True
        return True
