"""Command line configuration."""

import argparse
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from .scheduler import DEFAULT_DURATIONS, Durations

SOUND_ENV_VAR = "POMOTERM_SOUND"


@dataclass(frozen=True)
class AppConfig:
    """Resolved settings for one run."""
    defaults: Durations = DEFAULT_DURATIONS
    notify: bool = True
    sound: bool = True
    sound_file: Optional[Path] = None
    log_file: Optional[Path] = None
    debug: bool = False


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pomoterm",
        description="Full-screen terminal Pomodoro timer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Controls:
  Setup:    Tab/↓ next field, Shift+Tab/↑ previous, Enter start
  Timer:    Space pause, s skip, ↑/↓ +/- 1 minute
  Break:    Enter start break, s skip break
  Anywhere: q quit

Examples:
  pomoterm                      # Setup form prefilled with 25/5/15/4
  pomoterm --work 50 --short 10 # Different placeholders in the form
  pomoterm --sound ~/bell.mp3   # Custom cue (played with mpv/paplay/afplay)
""",
    )

    parser.add_argument(
        "--work",
        type=int,
        default=DEFAULT_DURATIONS.work,
        metavar="MINS",
        help=f"Default work duration in minutes (default: {DEFAULT_DURATIONS.work})",
    )
    parser.add_argument(
        "--short",
        type=int,
        default=DEFAULT_DURATIONS.short_break,
        metavar="MINS",
        help=f"Default short break in minutes (default: {DEFAULT_DURATIONS.short_break})",
    )
    parser.add_argument(
        "--long",
        type=int,
        default=DEFAULT_DURATIONS.long_break,
        metavar="MINS",
        help=f"Default long break in minutes (default: {DEFAULT_DURATIONS.long_break})",
    )
    parser.add_argument(
        "--sessions",
        type=int,
        default=DEFAULT_DURATIONS.sessions,
        metavar="N",
        help=f"Default number of work sessions (default: {DEFAULT_DURATIONS.sessions})",
    )

    # Side effects
    parser.add_argument(
        "--sound",
        type=Path,
        default=None,
        metavar="FILE",
        help=f"Audio file played at phase changes (default: ${SOUND_ENV_VAR})",
    )
    parser.add_argument(
        "--no-sound",
        action="store_true",
        help="Disable the audio cue",
    )
    parser.add_argument(
        "--no-notify",
        action="store_true",
        help="Disable desktop notifications",
    )

    # Diagnostics
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        metavar="PATH",
        help="Write the diagnostic log here instead of the user log directory",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log at DEBUG level",
    )

    return parser


def _non_negative(parser: argparse.ArgumentParser, name: str, value: int) -> int:
    if value < 0:
        parser.error(f"{name} must not be negative")
    return value


def load_config(argv: Optional[Sequence[str]] = None) -> AppConfig:
    """Parse command line arguments into an :class:`AppConfig`."""
    parser = build_parser()
    args = parser.parse_args(argv)

    defaults = Durations(
        work=_non_negative(parser, "--work", args.work),
        short_break=_non_negative(parser, "--short", args.short),
        long_break=_non_negative(parser, "--long", args.long),
        sessions=_non_negative(parser, "--sessions", args.sessions),
    )

    sound_file = args.sound
    if sound_file is None and os.environ.get(SOUND_ENV_VAR):
        sound_file = Path(os.environ[SOUND_ENV_VAR])
    if sound_file is not None:
        sound_file = sound_file.expanduser()

    return AppConfig(
        defaults=defaults,
        notify=not args.no_notify,
        sound=not args.no_sound,
        sound_file=sound_file,
        log_file=args.log_file,
        debug=args.debug,
    )
