"""Key dispatch and wall-clock ticking for the Pomodoro session.

The front-end calls :meth:`EventLoop.handle_key` for each key press and
:meth:`EventLoop.poll` every :data:`POLL_INTERVAL` seconds. Ticks follow the
monotonic clock, not the number of polls.
"""

import logging
import time
from enum import Enum, auto
from typing import Callable, Optional

from .form import SetupForm
from .scheduler import LifecycleState, SessionMachine, SessionSnapshot

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.1
TICK_SECONDS = 1.0

QUIT_KEYS = ("q", "ctrl+c")
NEXT_FIELD_KEYS = ("tab", "down")
PREV_FIELD_KEYS = ("shift+tab", "up")


class Outcome(Enum):
    """What the front-end should do after an event."""
    CONTINUE = auto()
    QUIT = auto()
    FINISHED = auto()


def _finished(done: bool) -> Outcome:
    return Outcome.FINISHED if done else Outcome.CONTINUE


class EventLoop:
    """Drives a :class:`SessionMachine` from key presses and elapsed time."""

    def __init__(
        self,
        machine: SessionMachine,
        form: Optional[SetupForm] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.machine = machine
        self.form = form or SetupForm.with_defaults(machine.defaults)
        self.clock = clock
        self._last_tick = clock()

    def snapshot(self) -> SessionSnapshot:
        return self.machine.snapshot()

    def handle_key(self, key: str) -> Outcome:
        """Apply one key press according to the current screen."""
        if key in QUIT_KEYS:
            return Outcome.QUIT

        state = self.machine.state
        if state == LifecycleState.SETUP:
            return self._handle_setup(key)
        elif state == LifecycleState.BREAK_PROMPT:
            return self._handle_break_prompt(key)
        return self._handle_running(key)

    def poll(self, now: Optional[float] = None) -> Outcome:
        """Tick the machine if a full second has passed since the last tick."""
        if now is None:
            now = self.clock()
        if now - self._last_tick < TICK_SECONDS:
            return Outcome.CONTINUE
        self._last_tick = now
        return _finished(self.machine.tick())

    def _handle_setup(self, key: str) -> Outcome:
        if key in NEXT_FIELD_KEYS:
            self.form.focus_next()
        elif key in PREV_FIELD_KEYS:
            self.form.focus_previous()
        elif key == "backspace":
            self.form.backspace()
        elif key == "enter":
            self.machine.configure(self.form.values())
            self._last_tick = self.clock()
        else:
            self.form.type_digit(key)
        return Outcome.CONTINUE

    def _handle_break_prompt(self, key: str) -> Outcome:
        if key == "enter":
            self.machine.start_break()
            self._last_tick = self.clock()
        elif key == "s":
            return _finished(self.machine.skip_break())
        return Outcome.CONTINUE

    def _handle_running(self, key: str) -> Outcome:
        if key == "space":
            self.machine.toggle_pause()
        elif key == "s":
            return _finished(self.machine.manual_advance())
        elif key == "up":
            self.machine.adjust_remaining(1)
        elif key == "down":
            if not self.machine.adjust_remaining(-1):
                logger.debug("Decrease refused with %ds left", self.machine.remaining_seconds)
        return Outcome.CONTINUE
