"""Notification and sound support for the Pomodoro timer.

Everything here is fire-and-forget: external programs are spawned and left
running, and failures are logged and otherwise ignored. Finished helpers are
reaped on the next spawn.
"""

import logging
import os
import platform
import shutil
import subprocess
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Protocol

logger = logging.getLogger(__name__)

APP_TITLE = "Pomodoro"

MACOS_ALERT_SOUND = "/System/Library/Sounds/Glass.aiff"
LINUX_ALERT_SOUND = "/usr/share/sounds/freedesktop/stereo/complete.oga"

# Helper processes that may still be running
_children: List[subprocess.Popen] = []


class Notice(Enum):
    """Fixed notification bodies."""
    NEXT_BREAK_SHORT = "Work session finished! Time for a short break."
    NEXT_BREAK_LONG = "Work session finished! Time for a long break."
    ALL_COMPLETE = "All sessions completed! 🎉"
    BREAK_FINISHED_SHORT = "Short break finished! Back to work."
    BREAK_FINISHED_LONG = "Long break finished! Back to work."


class NotificationSink(Protocol):
    def notify(self, title: str, body: str) -> None: ...


class SoundSink(Protocol):
    def play(self) -> None: ...


class Muted:
    """Sink that drops notifications and sounds."""

    def notify(self, title: str, body: str) -> None:
        logger.debug("Notification muted: %s", body)

    def play(self) -> None:
        logger.debug("Sound muted")


def reap_children() -> int:
    """Collect helpers that have exited.

    Returns:
        Number of helpers still running.
    """
    _children[:] = [proc for proc in _children if proc.poll() is None]
    return len(_children)


def _spawn(cmd: List[str]) -> bool:
    """Start a detached helper process without waiting for it.

    Returns:
        True if the process was started, False otherwise.
    """
    reap_children()
    try:
        proc = subprocess.Popen(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=os.name == "posix",
        )
    except (subprocess.SubprocessError, OSError) as exc:
        logger.warning("Could not start %s: %s", cmd[0], exc)
        return False
    _children.append(proc)
    logger.debug("Started %s", cmd[0])
    return True


def _escape_applescript(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def _escape_powershell(value: str) -> str:
    return value.replace("'", "''")


def _macos_notification_cmd(title: str, message: str) -> List[str]:
    script = (
        f'display notification "{_escape_applescript(message)}" '
        f'with title "{_escape_applescript(title)}"'
    )
    return ["osascript", "-e", script]


def _linux_notification_cmd(title: str, message: str) -> List[str]:
    return ["notify-send", title, message]


def _windows_notification_cmd(title: str, message: str) -> List[str]:
    script = (
        "[Windows.UI.Notifications.ToastNotificationManager, "
        "Windows.UI.Notifications, ContentType = WindowsRuntime] | Out-Null;"
        "$Template = [Windows.UI.Notifications.ToastNotificationManager]::"
        "GetTemplateContent([Windows.UI.Notifications.ToastTemplateType]::ToastText02);"
        "$RawXml = [xml] $Template.GetXml();"
        "($RawXml.toast.visual.binding.text|where {$_.id -eq '1'})"
        f".AppendChild($RawXml.CreateTextNode('{_escape_powershell(title)}')) | Out-Null;"
        "($RawXml.toast.visual.binding.text|where {$_.id -eq '2'})"
        f".AppendChild($RawXml.CreateTextNode('{_escape_powershell(message)}')) | Out-Null;"
        "$SerializedXml = New-Object Windows.Data.Xml.Dom.XmlDocument;"
        "$SerializedXml.LoadXml($RawXml.OuterXml);"
        "$Toast = [Windows.UI.Notifications.ToastNotification]::new($SerializedXml);"
        f"[Windows.UI.Notifications.ToastNotificationManager]::"
        f"CreateToastNotifier('{_escape_powershell(APP_TITLE)}').Show($Toast);"
    )
    return ["powershell", "-NoProfile", "-Command", script]


class DesktopNotifier:
    """Native desktop notifications.

    Uses ``osascript`` on macOS, ``notify-send`` on Linux and a PowerShell
    toast on Windows. Other platforms get nothing.
    """

    def __init__(self, system: Optional[str] = None) -> None:
        self.system = system or platform.system()

    def command(self, title: str, message: str) -> Optional[List[str]]:
        """Command line that shows the notification on this platform."""
        if self.system == "Darwin":
            return _macos_notification_cmd(title, message)
        elif self.system == "Linux":
            return _linux_notification_cmd(title, message)
        elif self.system == "Windows":
            return _windows_notification_cmd(title, message)
        return None

    def notify(self, title: str, body: str) -> None:
        cmd = self.command(title, body)
        if cmd is None:
            logger.debug("No notifier for platform %s", self.system)
            return
        _spawn(cmd)


class SoundPlayer:
    """Plays the audio cue with whatever player is installed.

    A configured file goes through the first available of ``mpv``,
    ``paplay``, ``afplay`` or PowerShell's ``Media.SoundPlayer``. Without a
    file the platform alert sound is used. When nothing can be started,
    ``fallback`` (typically the terminal bell) is called instead.
    """

    PLAYERS = (
        ("mpv", ["mpv", "--no-video", "--no-terminal"]),
        ("paplay", ["paplay"]),
        ("afplay", ["afplay"]),
    )

    def __init__(
        self,
        path: Optional[Path] = None,
        fallback: Optional[Callable[[], None]] = None,
        system: Optional[str] = None,
    ) -> None:
        self.path = path
        self.fallback = fallback
        self.system = system or platform.system()

    def sound_file(self) -> Optional[str]:
        if self.path is not None:
            return str(self.path)
        if self.system == "Darwin":
            return MACOS_ALERT_SOUND
        elif self.system == "Linux":
            return LINUX_ALERT_SOUND
        return None

    def command(self) -> Optional[List[str]]:
        """Player command for the cue, or None if no player is available."""
        sound_file = self.sound_file()
        if sound_file is None:
            return None
        if self.system == "Windows":
            if shutil.which("powershell") is None:
                return None
            path = _escape_powershell(sound_file)
            return [
                "powershell",
                "-NoProfile",
                "-c",
                f"(New-Object Media.SoundPlayer '{path}').PlaySync()",
            ]
        for name, cmd in self.PLAYERS:
            if shutil.which(name):
                return [*cmd, sound_file]
        return None

    def play(self) -> None:
        cmd = self.command()
        if cmd is not None:
            logger.debug("Playing sound: %s", cmd[-1])
            if _spawn(cmd):
                return
        if self.fallback is not None:
            self.fallback()
