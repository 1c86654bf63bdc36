"""Terminal runtime: session wiring and the curses main loop."""

from __future__ import annotations

import curses
import time

from loopfetch_core import AppConfig, Scheduler, Session, load_config, read_script, script_path
from loopfetch_core.logging_setup import configure_logging, get_logger, install_crash_hooks
from loopfetch_core.session import TelemetryProvider
from loopfetch_renderer.terminal import TerminalDisplay
from loopfetch_script import ScriptBridge

from .keys import decode_keys


def build_session(cfg: AppConfig, telemetry: TelemetryProvider | None = None) -> Session:
    if telemetry is None:
        from loopfetch_telemetry.provider import TelemetrySource

        telemetry = TelemetrySource(gpu=cfg.telemetry.gpu, media=cfg.telemetry.media)

    bridge = ScriptBridge(
        chunk_name=script_path(cfg).name,
        instruction_budget=cfg.script.instruction_budget,
    )
    scheduler = Scheduler(auto_reload_multiple=cfg.loop.auto_reload_multiple)
    return Session(telemetry, lambda: read_script(cfg), bridge=bridge, scheduler=scheduler)


def run_loop(stdscr, session: Session, theme_name: str | None = None) -> None:
    display = TerminalDisplay(stdscr, theme_name)
    scheduler = session.scheduler
    session.start()
    pending = []

    while not session.exit_requested:
        pending.extend(decode_keys(display.poll_keys()))
        now = time.monotonic()

        if scheduler.logic_due(now, session.store.settings):
            actions, pending = pending, []
            started = time.perf_counter()
            session.logic_pass(actions)
            scheduler.mark_logic(now, time.perf_counter() - started)
            if session.exit_requested:
                break

        if scheduler.render_due(now, session.store.settings):
            started = time.perf_counter()
            width, height = display.size()
            scheduler.render_pass()
            display.render(session.frame(width, height))
            scheduler.mark_render(now, time.perf_counter() - started)

        time.sleep(scheduler.sleep_for(time.monotonic(), session.store.settings))


def run_terminal(cfg: AppConfig | None = None) -> int:
    cfg = cfg or load_config()
    configure_logging(keep_files=cfg.diagnostics.keep_log_files, console=False)
    install_crash_hooks()
    logger = get_logger()

    session = build_session(cfg)
    logger.info(f"starting with script {script_path(cfg)}", extra={"event": "app_start"})
    try:
        curses.wrapper(run_loop, session, cfg.ui.theme)
    except KeyboardInterrupt:
        pass
    logger.info("exiting", extra={"event": "app_exit"})
    return 0
