"""MPRIS media players read through the ``playerctl`` command line tool."""

from __future__ import annotations

import logging
import shutil
import subprocess

from .models import UNKNOWN, MediaPlayer, or_sentinel

logger = logging.getLogger("loopfetch.telemetry")

_FIELDS = (
    "playerName",
    "status",
    "xesam:title",
    "xesam:artist",
    "xesam:album",
    "mpris:artUrl",
    "position",
    "mpris:length",
)
PLAYERCTL_FORMAT = "\t".join("{{" + name + "}}" for name in _FIELDS)


def _micros_to_seconds(raw: str) -> int:
    try:
        return max(int(float(raw)) // 1_000_000, 0)
    except ValueError:
        return 0


def _join_artists(raw: str) -> str:
    artists = [a.strip() for a in raw.split(",") if a.strip()]
    if not artists:
        return UNKNOWN
    return ", ".join(artists)


def parse_player_line(line: str) -> MediaPlayer | None:
    parts = line.rstrip("\n").split("\t")
    if len(parts) != len(_FIELDS) or not parts[0].strip():
        return None
    name, status, title, artist, album, art_url, position, length = parts
    return MediaPlayer(
        name=name.strip().lower(),
        song=or_sentinel(title),
        artist=_join_artists(artist),
        album=or_sentinel(album),
        art_url=or_sentinel(art_url),
        elapsed=_micros_to_seconds(position),
        length=_micros_to_seconds(length),
        paused=status.strip().lower() in ("paused", ""),
    )


class PlayerctlMediaSource:
    """Lists every player known to ``playerctl``; empty when it is unavailable."""

    def __init__(self, binary: str = "playerctl", timeout_s: float = 1.0) -> None:
        self.binary = shutil.which(binary)
        self.timeout_s = timeout_s

    @property
    def available(self) -> bool:
        return self.binary is not None

    def poll(self) -> tuple[MediaPlayer, ...]:
        if self.binary is None:
            return ()
        try:
            proc = subprocess.run(
                [self.binary, "--all-players", "metadata", "--format", PLAYERCTL_FORMAT],
                capture_output=True,
                text=True,
                timeout=self.timeout_s,
                check=False,
            )
        except (OSError, subprocess.TimeoutExpired) as exc:
            logger.debug("playerctl query failed: %s", exc)
            return ()

        players = []
        for line in proc.stdout.splitlines():
            player = parse_player_line(line)
            if player is not None:
                players.append(player)
        return tuple(players)
