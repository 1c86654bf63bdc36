"""CLI entrypoints for the loopfetch dashboard, snapshots and diagnostics."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from loopfetch_core import build_doctor_payload, ensure_script, load_config
from loopfetch_core.logging_setup import configure_logging, get_logger
from loopfetch_renderer.models import plain_lines


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, sort_keys=True, default=str))


def cmd_run(_args: argparse.Namespace) -> int:
    from .app import run_terminal

    return run_terminal()


def cmd_snapshot(args: argparse.Namespace) -> int:
    from .app import build_session

    cfg = load_config()
    session = build_session(cfg)
    result = session.start()
    if not result.ok:
        get_logger().warning(f"snapshot script failed: {result.error}", extra={"event": "snapshot_script_failed"})

    if args.png:
        from loopfetch_renderer.image import ImageDisplay

        display = ImageDisplay(cols=args.width, rows=args.height, theme_name=cfg.ui.theme)
        path = display.save_png(session.frame(args.width, args.height), Path(args.png).expanduser())
        _print_json({"success": result.ok, "png": str(path)})
        return 0 if result.ok else 2

    for line in plain_lines(session.lines):
        print(line)
    return 0 if result.ok else 2


def cmd_doctor(_args: argparse.Namespace) -> int:
    cfg = load_config()
    snapshot = None
    try:
        from loopfetch_telemetry.provider import TelemetrySource

        snapshot = TelemetrySource(gpu=cfg.telemetry.gpu, media=cfg.telemetry.media).fetch()
    except Exception as exc:
        get_logger().warning(f"doctor telemetry failed: {exc}", extra={"event": "telemetry_refresh_failed"})
    _print_json(build_doctor_payload(cfg, snapshot))
    return 0


def cmd_init_script(args: argparse.Namespace) -> int:
    cfg = load_config()
    path, written = ensure_script(cfg, force=args.force)
    _print_json({"script": str(path), "written": written})
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="loopfetch", description="Live, Lua-scriptable system info dashboard")
    sub = parser.add_subparsers(dest="command", required=True)

    run_cmd = sub.add_parser("run", help="Run the terminal dashboard")
    run_cmd.set_defaults(func=cmd_run)

    snap_cmd = sub.add_parser("snapshot", help="Run one pass and print the info lines")
    snap_cmd.add_argument("--png", default=None, help="Render the frame to a PNG file instead")
    snap_cmd.add_argument("--width", type=int, default=100, help="Frame width in columns")
    snap_cmd.add_argument("--height", type=int, default=30, help="Frame height in rows")
    snap_cmd.set_defaults(func=cmd_snapshot)

    doctor_cmd = sub.add_parser("doctor", help="Print diagnostics, paths and a telemetry snapshot")
    doctor_cmd.set_defaults(func=cmd_doctor)

    init_cmd = sub.add_parser("init-script", help="Write the default init.lua")
    init_cmd.add_argument("--force", action="store_true", help="Overwrite an existing script")
    init_cmd.set_defaults(func=cmd_init_script)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    cfg = load_config()
    configure_logging(keep_files=cfg.diagnostics.keep_log_files, console=False)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
