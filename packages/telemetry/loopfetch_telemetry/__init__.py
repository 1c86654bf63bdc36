"""Machine telemetry sources for loopfetch."""

from .media import PlayerctlMediaSource, parse_player_line
from .models import UNKNOWN, Disk, MediaPlayer, Memory, TelemetrySnapshot, select_active_media
try:  # pragma: no cover - optional at import time for minimal test environments
    from .provider import TelemetrySource
except Exception:  # pragma: no cover
    TelemetrySource = None  # type: ignore[assignment]

__all__ = [
    "Disk",
    "MediaPlayer",
    "Memory",
    "PlayerctlMediaSource",
    "TelemetrySnapshot",
    "UNKNOWN",
    "parse_player_line",
    "select_active_media",
]

if TelemetrySource is not None:
    __all__.append("TelemetrySource")
