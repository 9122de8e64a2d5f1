"""Textual-based UI for the Pomodoro timer."""

import logging
from typing import Optional

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.timer import Timer
from textual.widgets import Static

from .loop import POLL_INTERVAL, EventLoop, Outcome
from .notifications import SoundPlayer
from .render import render_frame

logger = logging.getLogger(__name__)


class FrameView(Static):
    """The whole screen for the current lifecycle state."""

    def __init__(self, loop: EventLoop, **kwargs) -> None:
        super().__init__(**kwargs)
        self.session_loop = loop

    def update_display(self, width: int, height: int) -> None:
        snapshot = self.session_loop.snapshot()
        self.update(render_frame(snapshot, self.session_loop.form, width, height))


class PomodoroApp(App[Outcome]):
    """Pomodoro timer application."""

    CSS = """
    Screen {
        align: center middle;
    }

    #frame {
        width: auto;
        height: auto;
        text-align: center;
    }
    """

    BINDINGS = [
        Binding("q", "session_key('q')", "Quit", priority=True),
        Binding("tab", "session_key('tab')", "Next field", show=False, priority=True),
        Binding("shift+tab", "session_key('shift+tab')", "Previous field", show=False, priority=True),
    ]

    def __init__(self, loop: EventLoop) -> None:
        super().__init__()
        self.session_loop = loop
        self._poll_timer: Timer | None = None

    def compose(self) -> ComposeResult:
        yield FrameView(self.session_loop, id="frame")

    def on_mount(self) -> None:
        self._refresh_display()
        self._poll_timer = self.set_interval(POLL_INTERVAL, self._poll)

    def on_key(self, event: events.Key) -> None:
        self._handle(self.session_loop.handle_key(event.key))

    def action_session_key(self, key: str) -> None:
        self._handle(self.session_loop.handle_key(key))

    def _poll(self) -> None:
        """Called every poll interval."""
        self._handle(self.session_loop.poll())

    def _handle(self, outcome: Outcome) -> None:
        if outcome != Outcome.CONTINUE:
            logger.info("Leaving UI: %s", outcome.name)
            if self._poll_timer is not None:
                self._poll_timer.stop()
            self.exit(outcome)
            return
        self._refresh_display()

    def _refresh_display(self) -> None:
        """Redraw using the current terminal size."""
        self.query_one("#frame", FrameView).update_display(
            self.size.width, self.size.height
        )


def run_ui(loop: EventLoop) -> Optional[Outcome]:
    """Run the Pomodoro UI until the user quits or the run finishes.

    Args:
        loop: Event loop wrapping the session machine.

    Returns:
        How the UI ended, or None if it was closed some other way.
    """
    app = PomodoroApp(loop)
    sound = loop.machine.sound
    if isinstance(sound, SoundPlayer) and sound.fallback is None:
        sound.fallback = app.bell
    return app.run()
