"""Linux telemetry source with graceful GPU and media fallbacks."""

from __future__ import annotations

import os
import platform
import re
import time
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Iterable

import psutil

from .media import PlayerctlMediaSource
from .models import UNKNOWN, Disk, MediaPlayer, Memory, TelemetrySnapshot, or_sentinel

RESERVED_MOUNT_PREFIXES = ("/run", "/boot", "/dev", "/proc", "/sys", "/tmp", "/var", "/snap")

_CPU_NOISE = ("(R)", "(TM)", "CPU", "Processor", "Intel", "AMD", "Apple")
_GPU_NOISE = (
    "NVIDIA",
    "GeForce",
    "AMD",
    "Radeon",
    "Intel",
    "Graphics",
    "Series",
    "Laptop",
    "GPU",
    "(R)",
    "(TM)",
)
_CPU_SENSORS = ("coretemp", "k10temp", "zenpower", "cpu_thermal", "acpitz")
_SHELLS = {"bash", "zsh", "fish", "sh", "dash", "ksh", "tcsh", "csh", "nu", "xonsh", "sudo", "su", "login", "tmux"}


@dataclass(frozen=True)
class GpuReading:
    name: str = UNKNOWN
    freq: float = 0.0
    temp: float = 0.0
    vram: Memory = field(default_factory=Memory)


class _GpuAdapter:
    def poll(self) -> GpuReading:
        return GpuReading()


class _NvmlGpuAdapter(_GpuAdapter):
    def __init__(self) -> None:
        import pynvml  # type: ignore

        self._nvml = pynvml
        pynvml.nvmlInit()

    def poll(self) -> GpuReading:
        nvml = self._nvml
        if nvml.nvmlDeviceGetCount() < 1:
            return GpuReading()

        h = nvml.nvmlDeviceGetHandleByIndex(0)
        raw_name = nvml.nvmlDeviceGetName(h)
        if isinstance(raw_name, bytes):
            raw_name = raw_name.decode("utf-8", errors="replace")
        try:
            freq = float(nvml.nvmlDeviceGetClockInfo(h, nvml.NVML_CLOCK_GRAPHICS))
        except Exception:
            freq = 0.0
        try:
            temp = float(nvml.nvmlDeviceGetTemperature(h, nvml.NVML_TEMPERATURE_GPU))
        except Exception:
            temp = 0.0
        mem = nvml.nvmlDeviceGetMemoryInfo(h)
        return GpuReading(
            name=clean_gpu_name(raw_name),
            freq=freq,
            temp=temp,
            vram=Memory(avail=int(mem.free), total=int(mem.total)),
        )


def _build_gpu_adapter(enabled: bool) -> _GpuAdapter:
    if not enabled:
        return _GpuAdapter()
    try:
        return _NvmlGpuAdapter()
    except Exception:
        return _GpuAdapter()


def clean_cpu_name(raw: str) -> str:
    s = raw
    for pat in _CPU_NOISE:
        s = s.replace(pat, "")
    s = s.split("@", 1)[0]
    words = [w for w in s.split() if not (w.lower().endswith("-core") or w.lower() == "core")]
    return or_sentinel(" ".join(words).lower())


def clean_gpu_name(raw: str) -> str:
    s = raw
    for pat in _GPU_NOISE:
        s = s.replace(pat, "")
    merged: list[str] = []
    for part in s.split():
        if merged and merged[-1].isdigit() and part.isalpha():
            merged[-1] += part
            continue
        merged.append(part)
    return or_sentinel(" ".join(merged).lower())


def clean_os_name(raw: str) -> str:
    name = raw.lower()
    if "linux" in name:
        name = name.replace("linux", "").strip()
    return or_sentinel(name)


def collect_disks(mounts: Iterable[tuple[str, int, int]]) -> tuple[Disk, ...]:
    """Build the storage list from ``(mount point, available, total)`` rows.

    Mounts under ``RESERVED_MOUNT_PREFIXES`` are dropped and ``/`` is reported as ``root``.
    """
    disks = []
    seen: set[str] = set()
    for mnt, avail, total in mounts:
        if mnt.startswith(RESERVED_MOUNT_PREFIXES) or mnt in seen:
            continue
        seen.add(mnt)
        name = "root" if mnt == "/" else (Path(mnt).name or UNKNOWN)
        disks.append(Disk(mnt=mnt, name=name, mem=Memory(avail=int(avail), total=int(total))))
    return tuple(disks)


def _cpu_temp_c() -> float:
    try:
        temps = psutil.sensors_temperatures()
    except Exception:
        return 0.0
    if not temps:
        return 0.0

    for name in _CPU_SENSORS:
        entries = temps.get(name)
        if entries and entries[0].current is not None:
            return float(entries[0].current)
    return 0.0


def _read_text(path: str) -> str | None:
    try:
        return Path(path).read_text(encoding="utf-8").strip()
    except OSError:
        return None


def _env(name: str, default: str) -> str:
    return os.environ.get(name) or default


def _cpu_model() -> str:
    info = _read_text("/proc/cpuinfo") or ""
    for line in info.splitlines():
        key, _, value = line.partition(":")
        if key.strip() == "model name" and value.strip():
            return value.strip()
    return platform.processor() or UNKNOWN


def _os_release() -> tuple[str, str]:
    try:
        release = platform.freedesktop_os_release()
    except OSError:
        return platform.system() or UNKNOWN, platform.version() or UNKNOWN
    return release.get("NAME", UNKNOWN), release.get("VERSION_ID", release.get("BUILD_ID", UNKNOWN))


def _login_manager() -> str:
    try:
        target = os.readlink("/etc/systemd/system/display-manager.service")
    except OSError:
        return UNKNOWN
    name = Path(target).name
    return or_sentinel(name.removesuffix(".service"))


def _terminal_name() -> str:
    program = os.environ.get("TERM_PROGRAM")
    if program:
        return program.lower()
    try:
        for parent in psutil.Process().parents():
            name = parent.name().lower()
            if name in _SHELLS or name.startswith("python"):
                continue
            return name
    except psutil.Error:
        pass
    return _env("TERM", UNKNOWN).lower()


class TelemetrySource:
    """Samples the machine; ``refresh`` re-reads only the values that change at runtime."""

    def __init__(self, gpu: bool = True, media: bool = True) -> None:
        self._gpu = _build_gpu_adapter(gpu)
        self._media = PlayerctlMediaSource() if media else None
        self._last: TelemetrySnapshot | None = None
        # Prime non-blocking CPU measurement.
        psutil.cpu_percent(interval=None)

    def fetch(self, comp: str = UNKNOWN) -> TelemetrySnapshot:
        os_name, os_version = _os_release()
        window_manager = _env("XDG_SESSION_DESKTOP", _env("DESKTOP_SESSION", UNKNOWN)).lower()
        desktop_env = os.environ.get("XDG_CURRENT_DESKTOP", "").lower() or None
        if desktop_env == window_manager:
            desktop_env = None

        base = TelemetrySnapshot(
            device=or_sentinel(_read_text("/sys/class/dmi/id/product_name")).upper(),
            bios="UEFI" if Path("/sys/firmware/efi").exists() else "BIOS",
            os_name=clean_os_name(os_name),
            os_version=or_sentinel(os_version),
            kernel=or_sentinel(platform.release()),
            login_manager=_login_manager(),
            desktop_env=desktop_env,
            window_manager=window_manager,
            window_protocol=_env("XDG_SESSION_TYPE", UNKNOWN).lower(),
            cpu_name=clean_cpu_name(_cpu_model()),
            cpu_cores=int(psutil.cpu_count() or 0),
        )
        self._last = base
        return self.refresh(comp)

    def refresh(self, comp: str = UNKNOWN) -> TelemetrySnapshot:
        if self._last is None:
            return self.fetch(comp)

        vm = psutil.virtual_memory()
        gpu = self._gpu.poll()
        snapshot = replace(
            self._last,
            user=_env("USER", "user").lower(),
            host=(platform.node() or "host").lower(),
            uptime=max(int(time.time() - psutil.boot_time()), 0),
            terminal=_terminal_name(),
            shell=or_sentinel(Path(_env("SHELL", UNKNOWN)).name.lower()),
            editor=Path(_env("EDITOR", "none")).name.lower() or "none",
            cpu_usage=int(psutil.cpu_percent(interval=None)),
            cpu_temp=_cpu_temp_c(),
            ram=Memory(avail=int(vm.available), total=int(vm.total)),
            gpu_name=gpu.name,
            gpu_freq=gpu.freq,
            gpu_temp=gpu.temp,
            vram=gpu.vram,
            disks=self._disks(),
            media=self._poll_media(),
            comp=comp,
        )
        self._last = snapshot
        return snapshot

    @staticmethod
    def _disks() -> tuple[Disk, ...]:
        rows = []
        for part in psutil.disk_partitions(all=False):
            try:
                usage = psutil.disk_usage(part.mountpoint)
            except OSError:
                continue
            rows.append((part.mountpoint, usage.free, usage.total))
        return collect_disks(rows)

    def _poll_media(self) -> tuple[MediaPlayer, ...]:
        if self._media is None:
            return ()
        return self._media.poll()
