"""Entry point for python -m pomoterm."""

import logging
import sys
from typing import Optional, Sequence

from .config import AppConfig, load_config
from .log import APP_NAME, configure_logging
from .loop import EventLoop, Outcome
from .notifications import DesktopNotifier, Muted, SoundPlayer
from .scheduler import LifecycleState, SessionMachine
from .ui import run_ui

logger = logging.getLogger(APP_NAME)


def build_machine(config: AppConfig) -> SessionMachine:
    """Create the session machine with the sinks the config asks for."""
    notifier = DesktopNotifier() if config.notify else Muted()
    sound = SoundPlayer(config.sound_file) if config.sound else Muted()
    return SessionMachine(notifier=notifier, sound=sound, defaults=config.defaults)


def summary(machine: SessionMachine, outcome: Optional[Outcome]) -> str:
    """One-line report printed after the UI has closed."""
    if outcome == Outcome.FINISHED or machine.finished:
        return "✓ All sessions completed!"
    if machine.state == LifecycleState.SETUP:
        return "Pomodoro closed before starting."
    return (
        f"Pomodoro stopped during session "
        f"{machine.current_session}/{machine.total_sessions}."
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    config = load_config(argv)
    log_path = configure_logging(config.log_file, config.debug)
    logger.info("Starting, log file %s", log_path)

    machine = build_machine(config)
    loop = EventLoop(machine)

    outcome = None
    try:
        outcome = run_ui(loop)
    except KeyboardInterrupt:
        outcome = Outcome.QUIT

    print(f"\n{summary(machine, outcome)}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
