"""Unit tests for notifications.py."""

import subprocess
from pathlib import Path

import pytest

from pomoterm import notifications
from pomoterm.notifications import (
    APP_TITLE,
    LINUX_ALERT_SOUND,
    MACOS_ALERT_SOUND,
    DesktopNotifier,
    Muted,
    Notice,
    SoundPlayer,
)


class FakeProcess:
    def __init__(self):
        self.returncode = None

    def poll(self):
        return self.returncode


@pytest.fixture
def spawned(monkeypatch):
    """Capture Popen calls instead of starting processes."""
    calls = []

    def fake_popen(cmd, **kwargs):
        calls.append((cmd, kwargs))
        return FakeProcess()

    monkeypatch.setattr(notifications.subprocess, "Popen", fake_popen)
    monkeypatch.setattr(notifications, "_children", [])
    return calls


def only(monkeypatch, *available):
    """Pretend only the given executables are on PATH."""
    monkeypatch.setattr(
        notifications.shutil,
        "which",
        lambda name: f"/usr/bin/{name}" if name in available else None,
    )


class TestNotices:
    def test_five_fixed_messages(self):
        assert len(Notice) == 5
        assert APP_TITLE == "Pomodoro"


class TestDesktopNotifier:
    """Test per-platform notification dispatch."""

    def test_linux_uses_notify_send(self, spawned):
        DesktopNotifier(system="Linux").notify("Pomodoro", "Back to work")
        assert spawned[0][0] == ["notify-send", "Pomodoro", "Back to work"]

    def test_does_not_wait_for_process(self, spawned):
        """Output is discarded and the process is left running."""
        DesktopNotifier(system="Linux").notify("t", "m")
        kwargs = spawned[0][1]
        assert kwargs["stdout"] is subprocess.DEVNULL
        assert kwargs["stderr"] is subprocess.DEVNULL

    def test_finished_helpers_are_reaped(self, spawned):
        """Exited helpers are dropped on the next spawn, running ones kept."""
        notifier = DesktopNotifier(system="Linux")
        notifier.notify("t", "first")
        notifier.notify("t", "second")
        first, second = notifications._children

        first.returncode = 0
        notifier.notify("t", "third")
        assert second in notifications._children
        assert first not in notifications._children
        assert len(notifications._children) == 2

        for proc in notifications._children:
            proc.returncode = 0
        assert notifications.reap_children() == 0

    def test_failed_spawn_is_not_tracked(self, monkeypatch):
        def missing(cmd, **kwargs):
            raise FileNotFoundError(cmd[0])

        monkeypatch.setattr(notifications.subprocess, "Popen", missing)
        monkeypatch.setattr(notifications, "_children", [])
        DesktopNotifier(system="Linux").notify("t", "m")
        assert notifications._children == []

    def test_macos_uses_osascript(self, spawned):
        DesktopNotifier(system="Darwin").notify("Pomodoro", 'Say "hi"')
        cmd = spawned[0][0]
        assert cmd[:2] == ["osascript", "-e"]
        assert 'display notification "Say \\"hi\\""' in cmd[2]
        assert 'with title "Pomodoro"' in cmd[2]

    def test_windows_uses_powershell_toast(self, spawned):
        DesktopNotifier(system="Windows").notify("Pomodoro", "It's time")
        cmd = spawned[0][0]
        assert cmd[0] == "powershell"
        assert "ToastNotificationManager" in cmd[-1]
        assert "It''s time" in cmd[-1]

    def test_unknown_platform_does_nothing(self, spawned):
        DesktopNotifier(system="Plan9").notify("t", "m")
        assert spawned == []

    def test_missing_program_is_swallowed(self, monkeypatch):
        def missing(cmd, **kwargs):
            raise FileNotFoundError(cmd[0])

        monkeypatch.setattr(notifications.subprocess, "Popen", missing)
        DesktopNotifier(system="Linux").notify("t", "m")


class TestSoundPlayer:
    """Test audio cue dispatch."""

    def test_configured_file_with_mpv(self, monkeypatch, spawned):
        only(monkeypatch, "mpv", "paplay")
        SoundPlayer(Path("/tmp/cue.mp3"), system="Linux").play()
        assert spawned[0][0] == ["mpv", "--no-video", "--no-terminal", "/tmp/cue.mp3"]

    def test_falls_through_to_next_player(self, monkeypatch, spawned):
        only(monkeypatch, "paplay")
        SoundPlayer(system="Linux").play()
        assert spawned[0][0] == ["paplay", LINUX_ALERT_SOUND]

    def test_macos_alert_sound(self, monkeypatch, spawned):
        only(monkeypatch, "afplay")
        SoundPlayer(system="Darwin").play()
        assert spawned[0][0] == ["afplay", MACOS_ALERT_SOUND]

    def test_windows_needs_a_file(self, monkeypatch, spawned):
        only(monkeypatch, "powershell")
        bells = []
        SoundPlayer(system="Windows", fallback=lambda: bells.append(1)).play()
        assert spawned == []
        assert bells == [1]

    def test_windows_sound_player(self, monkeypatch, spawned):
        only(monkeypatch, "powershell")
        SoundPlayer(Path("C:/cue.wav"), system="Windows").play()
        cmd = spawned[0][0]
        assert cmd[0] == "powershell"
        assert "Media.SoundPlayer" in cmd[-1]

    def test_fallback_when_no_player(self, monkeypatch, spawned):
        """The fallback (terminal bell) rings when nothing can play."""
        only(monkeypatch)
        bells = []
        SoundPlayer(system="Linux", fallback=lambda: bells.append(1)).play()
        assert spawned == []
        assert bells == [1]

    def test_fallback_when_spawn_fails(self, monkeypatch):
        only(monkeypatch, "mpv")

        def broken(cmd, **kwargs):
            raise OSError("exec format error")

        monkeypatch.setattr(notifications.subprocess, "Popen", broken)
        bells = []
        SoundPlayer(system="Linux", fallback=lambda: bells.append(1)).play()
        assert bells == [1]

    def test_no_fallback_is_silent(self, monkeypatch, spawned):
        only(monkeypatch)
        SoundPlayer(system="Linux").play()
        assert spawned == []


class TestMuted:
    def test_muted_does_nothing(self, spawned):
        muted = Muted()
        muted.notify("t", "m")
        muted.play()
        assert spawned == []
