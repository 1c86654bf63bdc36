"""Native telemetry and settings -> Lua tables.

Each field is written on its own. A value the runtime rejects is recorded as a
``MarshalError`` and the field keeps whatever the previous table held.
"""

from __future__ import annotations

from typing import Any, Mapping

from loopfetch_telemetry.models import Disk, MediaPlayer, Memory, TelemetrySnapshot, select_active_media

from .accessors import ScriptValue, to_lua
from .errors import MarshalError
from .models import Settings


class TableWriter:
    """Field-at-a-time writer into one Lua table.

    Writes go through the runtime's ``rawset`` so a script-installed
    ``__newindex`` never runs from Python.
    """

    def __init__(
        self,
        lua: Any,
        target: Any,
        previous: ScriptValue | None = None,
        path: str = "",
        errors: list[MarshalError] | None = None,
        rawset: Any = None,
    ) -> None:
        self.lua = lua
        self.target = target
        self.previous = previous if previous is not None and previous.is_table else None
        self.path = path
        self.errors: list[MarshalError] = errors if errors is not None else []
        self.rawset = rawset if rawset is not None else lua.eval("rawset")

    def _path(self, key: str | int) -> str:
        return f"{self.path}.{key}" if self.path else str(key)

    def set(self, key: str | int, value: Any) -> bool:
        try:
            self.rawset(self.target, to_lua(key), to_lua(value))
            return True
        except Exception as exc:
            self.errors.append(MarshalError(self._path(key), exc))
        fallback = self.previous.get(key).raw if self.previous is not None else None
        try:
            self.rawset(self.target, to_lua(key), fallback)
        except Exception as exc:
            self.errors.append(MarshalError(self._path(key), exc))
        return False

    def child(self, key: str | int, existing: Any = None) -> "TableWriter":
        table = existing if existing is not None else self.lua.table()
        self.set(key, table)
        previous = self.previous.table(key) if self.previous is not None else None
        return TableWriter(self.lua, table, previous, self._path(key), self.errors, self.rawset)


def _write_memory(writer: TableWriter, key: str, mem: Memory) -> None:
    sub = writer.child(key)
    sub.set("avail", mem.avail)
    sub.set("total", mem.total)


def _write_disk(writer: TableWriter, index: int, disk: Disk) -> None:
    sub = writer.child(index)
    sub.set("mnt", disk.mnt)
    sub.set("name", disk.name)
    _write_memory(sub, "mem", disk.mem)


def _write_media(writer: TableWriter, index: int, player: MediaPlayer) -> None:
    sub = writer.child(index)
    sub.set("name", player.name)
    sub.set("song", player.song)
    sub.set("artist", player.artist)
    sub.set("album", player.album)
    sub.set("art_url", player.art_url)
    sub.set("elapsed", player.elapsed)
    sub.set("length", player.length)
    sub.set("paused", player.paused)


def write_info(writer: TableWriter, snapshot: TelemetrySnapshot) -> None:
    s = snapshot
    writer.set("user", s.user)
    writer.set("host", s.host)
    writer.set("device", s.device)
    writer.set("bios", s.bios)
    writer.set("uptime", s.uptime)

    writer.set("os_name", s.os_name)
    writer.set("os_version", s.os_version)
    writer.set("kernel", s.kernel)
    writer.set("login_manager", s.login_manager)
    if s.desktop_env is not None:
        writer.set("desktop_env", s.desktop_env)
    writer.set("window_manager", s.window_manager)
    writer.set("window_protocol", s.window_protocol)
    writer.set("terminal", s.terminal)
    writer.set("shell", s.shell)
    writer.set("editor", s.editor)
    writer.set("comp", s.comp)

    writer.set("cpu_name", s.cpu_name)
    writer.set("cpu_cores", s.cpu_cores)
    writer.set("cpu_usage", s.cpu_usage)
    writer.set("cpu_temp", s.cpu_temp)
    _write_memory(writer, "ram", s.ram)

    writer.set("gpu_name", s.gpu_name)
    writer.set("gpu_freq", s.gpu_freq)
    writer.set("gpu_temp", s.gpu_temp)
    _write_memory(writer, "vram", s.vram)

    disks = writer.child("disks")
    for i, disk in enumerate(s.disks, start=1):
        _write_disk(disks, i, disk)

    media = writer.child("media")
    for i, player in enumerate(s.media, start=1):
        _write_media(media, i, player)

    active = select_active_media(s.media)
    if active is not None:
        writer.set("media_active", active + 1)


def write_loop(writer: TableWriter, loop: Mapping[str, Any]) -> None:
    for key, value in loop.items():
        writer.set(key, value)


def write_settings(writer: TableWriter, settings: Settings, current: ScriptValue | None = None) -> None:
    """Update the script's own ``SETTINGS`` table in place, creating sub-tables as needed."""
    if current is None:
        current = ScriptValue(writer.target)
    writer.set("fps", settings.fps)
    writer.set("tps", settings.tps)
    writer.set("rps", settings.rps)
    writer.set("layout", settings.layout.value)

    order_table = current.table("order")
    order = writer.child("order", order_table.raw if order_table is not None else None)
    first, second = settings.order.names()
    order.set(1, first)
    order.set(2, second)

    vars_table = current.table("vars")
    script_vars = writer.child("vars", vars_table.raw if vars_table is not None else None)
    script_vars.set("comp", settings.vars.comp)
