"""Typed telemetry models."""

from __future__ import annotations

from dataclasses import dataclass, field

UNKNOWN = "unknown"

MEDIA_PRECEDENCE = ("spotify", "vlc", "mpv", "rhythmbox", "firefox", "chrome")


@dataclass(frozen=True)
class Memory:
    avail: int = 0
    total: int = 0


@dataclass(frozen=True)
class Disk:
    mnt: str = UNKNOWN
    name: str = UNKNOWN
    mem: Memory = field(default_factory=Memory)


@dataclass(frozen=True)
class MediaPlayer:
    name: str = UNKNOWN
    song: str = UNKNOWN
    artist: str = UNKNOWN
    album: str = UNKNOWN
    art_url: str = UNKNOWN
    elapsed: int = 0
    length: int = 0
    paused: bool = True


@dataclass(frozen=True)
class TelemetrySnapshot:
    user: str = "user"
    host: str = "host"
    device: str = UNKNOWN
    bios: str = "BIOS"
    uptime: int = 0

    os_name: str = UNKNOWN
    os_version: str = UNKNOWN
    kernel: str = UNKNOWN
    login_manager: str = UNKNOWN
    desktop_env: str | None = None
    window_manager: str = UNKNOWN
    window_protocol: str = UNKNOWN
    terminal: str = UNKNOWN
    shell: str = UNKNOWN
    editor: str = "none"

    cpu_name: str = UNKNOWN
    cpu_cores: int = 0
    cpu_usage: int = 0
    cpu_temp: float = 0.0
    ram: Memory = field(default_factory=Memory)

    gpu_name: str = UNKNOWN
    gpu_freq: float = 0.0
    gpu_temp: float = 0.0
    vram: Memory = field(default_factory=Memory)

    disks: tuple[Disk, ...] = ()
    media: tuple[MediaPlayer, ...] = ()

    comp: str = UNKNOWN

    def active_media(self) -> MediaPlayer | None:
        idx = select_active_media(self.media)
        return None if idx is None else self.media[idx]


def select_active_media(media: tuple[MediaPlayer, ...] | list[MediaPlayer]) -> int | None:
    """Index of the player to feature, ranked by ``MEDIA_PRECEDENCE``.

    The earliest entry matching the best-ranked name wins; with no match at all
    the first entry is used.
    """
    if not media:
        return None

    best_idx = 0
    best_priority = len(MEDIA_PRECEDENCE)
    for idx, player in enumerate(media):
        for priority, name in enumerate(MEDIA_PRECEDENCE):
            if name in player.name and priority < best_priority:
                best_idx = idx
                best_priority = priority
                break
    return best_idx


def or_sentinel(value: str | None, sentinel: str = UNKNOWN) -> str:
    if value is None:
        return sentinel
    value = value.strip()
    return value or sentinel
