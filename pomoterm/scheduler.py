"""Pure logic for the Pomodoro session state machine."""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Sequence

from .notifications import (
    APP_TITLE,
    Muted,
    Notice,
    NotificationSink,
    SoundSink,
)

logger = logging.getLogger(__name__)

LONG_BREAK_EVERY = 4


class Phase(Enum):
    """Kind of countdown."""
    WORK = auto()
    SHORT_BREAK = auto()
    LONG_BREAK = auto()


class LifecycleState(Enum):
    """Which screen is active."""
    SETUP = auto()
    RUNNING = auto()
    BREAK_PROMPT = auto()


@dataclass(frozen=True)
class Durations:
    """Minute counts and number of work sessions for one run."""
    work: int = 25
    short_break: int = 5
    long_break: int = 15
    sessions: int = 4

    def seconds_for(self, phase: Phase) -> int:
        """Configured length of a phase in seconds."""
        if phase == Phase.WORK:
            return self.work * 60
        elif phase == Phase.SHORT_BREAK:
            return self.short_break * 60
        else:
            return self.long_break * 60


DEFAULT_DURATIONS = Durations()


def parse_count(raw: str, default: int) -> int:
    """Parse a non-negative integer, falling back to ``default``."""
    text = raw.strip()
    if text.isascii() and text.isdigit():
        return int(text)
    return default


@dataclass(frozen=True)
class SessionSnapshot:
    """Immutable view of the session handed to the renderer."""
    state: LifecycleState
    phase: Phase
    paused: bool
    remaining_seconds: int
    current_session: int
    total_sessions: int
    pending_break: Optional[Phase]
    finished: bool

    @property
    def phase_label(self) -> str:
        """Header line shown above the countdown."""
        if self.phase == Phase.WORK:
            return f"WORK SESSION {self.current_session}/{self.total_sessions}"
        elif self.phase == Phase.SHORT_BREAK:
            return "SHORT BREAK"
        return "LONG BREAK"

    @property
    def status_label(self) -> str:
        """PAUSED or RUNNING."""
        return "PAUSED" if self.paused else "RUNNING"


class SessionMachine:
    """Pomodoro session state machine.

    Owns the lifecycle (setup, countdown, break prompt), the countdown and
    the session counter. Notifications and sounds are fired through the
    injected sinks and never influence the transitions.
    """

    def __init__(
        self,
        notifier: Optional[NotificationSink] = None,
        sound: Optional[SoundSink] = None,
        defaults: Durations = DEFAULT_DURATIONS,
    ):
        """Initialize the machine in the setup state.

        Args:
            notifier: Sink for desktop notifications.
            sound: Sink for the audio cue.
            defaults: Values substituted for unparsable setup fields.
        """
        self.notifier = notifier or Muted()
        self.sound = sound or Muted()
        self.defaults = defaults

        self._durations = defaults
        self._state = LifecycleState.SETUP
        self._phase = Phase.WORK
        self._paused = False
        self._remaining = defaults.seconds_for(Phase.WORK)
        self._current_session = 1
        self._pending_break: Optional[Phase] = None
        self._finished = False

    @property
    def state(self) -> LifecycleState:
        """Active screen."""
        return self._state

    @property
    def phase(self) -> Phase:
        """Kind of the current or last countdown."""
        return self._phase

    @property
    def paused(self) -> bool:
        """Pause flag; always False outside the running state."""
        return self._paused and self._state == LifecycleState.RUNNING

    @property
    def remaining_seconds(self) -> int:
        """Seconds left in the current countdown."""
        return self._remaining

    @property
    def current_session(self) -> int:
        """1-based number of the current work session."""
        return self._current_session

    @property
    def total_sessions(self) -> int:
        """Number of work sessions in this run."""
        return self._durations.sessions

    @property
    def durations(self) -> Durations:
        """Values frozen when the run started."""
        return self._durations

    @property
    def pending_break(self) -> Optional[Phase]:
        """Break offered by the prompt, if any."""
        return self._pending_break

    @property
    def finished(self) -> bool:
        """True once every work session has been completed."""
        return self._finished

    def snapshot(self) -> SessionSnapshot:
        """Copy of the current state for rendering."""
        return SessionSnapshot(
            state=self._state,
            phase=self._phase,
            paused=self.paused,
            remaining_seconds=self._remaining,
            current_session=self._current_session,
            total_sessions=self._durations.sessions,
            pending_break=self._pending_break,
            finished=self._finished,
        )

    def configure(self, field_values: Sequence[str]) -> None:
        """Freeze the setup values and start the first work session.

        Each raw value falls back to its default independently when it is
        empty or not a non-negative integer.
        """
        work, short_break, long_break, sessions = field_values
        durations = Durations(
            work=parse_count(work, self.defaults.work),
            short_break=parse_count(short_break, self.defaults.short_break),
            long_break=parse_count(long_break, self.defaults.long_break),
            sessions=parse_count(sessions, self.defaults.sessions),
        )
        self.start_timer(durations)

    def start_timer(self, durations: Durations) -> None:
        """Start session 1 of a run with the given durations."""
        self._durations = durations
        self._current_session = 1
        self._finished = False
        self._pending_break = None
        self._enter_work()
        logger.info(
            "Timer started: work=%dm short=%dm long=%dm sessions=%d",
            durations.work,
            durations.short_break,
            durations.long_break,
            durations.sessions,
        )

    def tick(self) -> bool:
        """Count down one second if running.

        Returns:
            True if the whole run finished on this tick, False otherwise.
        """
        if self._finished:
            return True
        if self._state != LifecycleState.RUNNING or self._paused:
            return False

        if self._remaining > 0:
            self._remaining -= 1

        if self._remaining == 0:
            logger.debug(
                "Timer hit zero: phase=%s session=%d",
                self._phase.name,
                self._current_session,
            )
            return self.advance_phase()

        return False

    def advance_phase(self) -> bool:
        """Handle the end of the current countdown.

        Returns:
            True when the run is over and the program should exit.
        """
        if self._finished:
            return True
        if self._phase == Phase.WORK:
            if self._current_session < self._durations.sessions:
                if self._current_session % LONG_BREAK_EVERY == 0:
                    self._pending_break = Phase.LONG_BREAK
                    self._notify(Notice.NEXT_BREAK_LONG)
                else:
                    self._pending_break = Phase.SHORT_BREAK
                    self._notify(Notice.NEXT_BREAK_SHORT)
                self._state = LifecycleState.BREAK_PROMPT
                self._play_sound()
                logger.info(
                    "Work session %d/%d done, next: %s",
                    self._current_session,
                    self._durations.sessions,
                    self._pending_break.name,
                )
                return False
            return self._finish()

        if self._phase == Phase.SHORT_BREAK:
            self._notify(Notice.BREAK_FINISHED_SHORT)
        else:
            self._notify(Notice.BREAK_FINISHED_LONG)

        self._current_session += 1
        if self._current_session > self._durations.sessions:
            return self._finish()

        self._enter_work()
        self._play_sound()
        logger.info(
            "Break over, work session %d/%d",
            self._current_session,
            self._durations.sessions,
        )
        return False

    def start_break(self) -> None:
        """Begin the pending break. No-op without one."""
        if self._pending_break is None or self._finished:
            return
        self._phase = self._pending_break
        self._remaining = self._durations.seconds_for(self._phase)
        self._paused = False
        self._state = LifecycleState.RUNNING
        self._pending_break = None
        logger.info(
            "Break started: %s, duration: %d minutes",
            self._phase.name,
            self._remaining // 60,
        )

    def skip_break(self) -> bool:
        """Drop the pending break and go straight to the next work session.

        Returns:
            True if that was the last session and the run is over.
        """
        if self._finished:
            return True
        if self._pending_break is None:
            return False
        self._current_session += 1
        if self._current_session > self._durations.sessions:
            return self._finish()
        self._pending_break = None
        self._enter_work()
        logger.info(
            "Break skipped, work session %d/%d",
            self._current_session,
            self._durations.sessions,
        )
        return False

    def toggle_pause(self) -> None:
        """Toggle between running and paused."""
        if self._state != LifecycleState.RUNNING:
            return
        self._paused = not self._paused

    def adjust_remaining(self, delta_minutes: int) -> bool:
        """Add or remove whole minutes from the running countdown.

        A decrease is refused when one minute or less is left.

        Returns:
            True if the countdown changed.
        """
        if self._finished:
            return False
        if self._state != LifecycleState.RUNNING or delta_minutes == 0:
            return False
        delta = delta_minutes * 60
        if delta < 0 and self._remaining <= -delta:
            return False
        self._remaining += delta
        return True

    def manual_advance(self) -> bool:
        """End the running countdown now, as if it had reached zero."""
        if self._finished:
            return True
        if self._state != LifecycleState.RUNNING:
            return False
        logger.info("Skipping %s", self._phase.name)
        return self.advance_phase()

    def _enter_work(self) -> None:
        self._phase = Phase.WORK
        self._remaining = self._durations.seconds_for(Phase.WORK)
        self._paused = False
        self._state = LifecycleState.RUNNING

    def _finish(self) -> bool:
        self._notify(Notice.ALL_COMPLETE)
        self._finished = True
        logger.info("All %d sessions completed", self._durations.sessions)
        return True

    def _notify(self, notice: Notice) -> None:
        try:
            self.notifier.notify(APP_TITLE, notice.value)
        except Exception:
            logger.warning("Notification failed: %s", notice.name, exc_info=True)

    def _play_sound(self) -> None:
        try:
            self.sound.play()
        except Exception:
            logger.warning("Sound playback failed", exc_info=True)
