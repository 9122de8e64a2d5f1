"""Unit tests for config.py and the entry point helpers."""

import logging
from pathlib import Path

import pytest

from pomoterm.__main__ import build_machine, summary
from pomoterm.config import SOUND_ENV_VAR, AppConfig, load_config
from pomoterm.log import APP_NAME, configure_logging
from pomoterm.loop import Outcome
from pomoterm.notifications import DesktopNotifier, Muted, SoundPlayer
from pomoterm.scheduler import Durations


@pytest.fixture(autouse=True)
def no_sound_env(monkeypatch):
    monkeypatch.delenv(SOUND_ENV_VAR, raising=False)


class TestLoadConfig:
    """Test command line parsing."""

    def test_defaults(self):
        config = load_config([])
        assert config == AppConfig()
        assert config.defaults == Durations(25, 5, 15, 4)

    def test_numeric_defaults(self):
        config = load_config(["--work", "50", "--short", "10", "--long", "30", "--sessions", "6"])
        assert config.defaults == Durations(50, 10, 30, 6)

    def test_negative_rejected(self):
        with pytest.raises(SystemExit):
            load_config(["--work", "-5"])

    def test_switches(self):
        config = load_config(["--no-sound", "--no-notify", "--debug"])
        assert config.sound is False
        assert config.notify is False
        assert config.debug is True

    def test_sound_file_from_flag(self, tmp_path):
        cue = tmp_path / "cue.mp3"
        config = load_config(["--sound", str(cue)])
        assert config.sound_file == cue

    def test_sound_file_from_env(self, monkeypatch):
        monkeypatch.setenv(SOUND_ENV_VAR, "/srv/cue.ogg")
        assert load_config([]).sound_file == Path("/srv/cue.ogg")

    def test_flag_beats_env(self, monkeypatch):
        monkeypatch.setenv(SOUND_ENV_VAR, "/srv/cue.ogg")
        assert load_config(["--sound", "/tmp/other.wav"]).sound_file == Path("/tmp/other.wav")


class TestBuildMachine:
    """Test sink selection."""

    def test_real_sinks_by_default(self):
        machine = build_machine(AppConfig())
        assert isinstance(machine.notifier, DesktopNotifier)
        assert isinstance(machine.sound, SoundPlayer)

    def test_muted_sinks(self):
        machine = build_machine(AppConfig(notify=False, sound=False))
        assert isinstance(machine.notifier, Muted)
        assert isinstance(machine.sound, Muted)

    def test_defaults_passed_through(self):
        machine = build_machine(AppConfig(defaults=Durations(10, 2, 5, 3)))
        machine.configure(["", "", "", ""])
        assert machine.total_sessions == 3


class TestSummary:
    """Test the exit message."""

    def test_finished(self):
        machine = build_machine(AppConfig(notify=False, sound=False))
        assert "All sessions completed" in summary(machine, Outcome.FINISHED)

    def test_quit_in_setup(self):
        machine = build_machine(AppConfig(notify=False, sound=False))
        assert "before starting" in summary(machine, Outcome.QUIT)

    def test_quit_mid_run(self):
        machine = build_machine(AppConfig(notify=False, sound=False))
        machine.configure(["", "", "", "3"])
        assert summary(machine, Outcome.QUIT) == "Pomodoro stopped during session 1/3."


class TestLogging:
    """Test the diagnostic log file."""

    def test_writes_to_given_file(self, tmp_path):
        path = tmp_path / "logs" / "pomoterm.log"
        assert configure_logging(path, debug=True) == path

        logging.getLogger("pomoterm.scheduler").debug("hello")
        logger = logging.getLogger(APP_NAME)
        for handler in logger.handlers:
            handler.flush()
        assert "hello" in path.read_text(encoding="utf-8")
        assert logger.propagate is False

    def test_reconfigure_replaces_handler(self, tmp_path):
        configure_logging(tmp_path / "a.log")
        configure_logging(tmp_path / "b.log")
        logger = logging.getLogger(APP_NAME)
        assert len(logger.handlers) == 1
        assert logger.level == logging.INFO
