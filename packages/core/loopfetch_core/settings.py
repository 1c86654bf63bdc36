"""Single owner of the active settings."""

from __future__ import annotations

from dataclasses import replace

from loopfetch_renderer.models import Layout, Order
from loopfetch_script.models import Settings, Vars


class SettingsStore:
    """Holds the current ``Settings``; replaced by script pulls, flipped by keys."""

    def __init__(self, initial: Settings | None = None) -> None:
        self._settings = initial or Settings()

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def layout(self) -> Layout:
        return self._settings.layout

    @property
    def order(self) -> Order:
        return self._settings.order

    @property
    def fps(self) -> int:
        return self._settings.fps

    @property
    def tps(self) -> int:
        return self._settings.tps

    @property
    def rps(self) -> int:
        return self._settings.rps

    @property
    def vars(self) -> Vars:
        return self._settings.vars

    def apply(self, parsed: Settings) -> None:
        self._settings = parsed

    def toggle_layout(self) -> Layout:
        self._settings = replace(self._settings, layout=self._settings.layout.toggle())
        return self._settings.layout

    def toggle_order(self) -> Order:
        self._settings = replace(self._settings, order=self._settings.order.toggle())
        return self._settings.order
