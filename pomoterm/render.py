"""Frame rendering for the three screens.

All functions are pure: they read a :class:`SessionSnapshot` (and the setup
form) and return rich ``Text``. Centering on the terminal is left to the UI.
"""

from typing import List

from rich.cells import cell_len
from rich.text import Text

from .form import SetupForm
from .scheduler import LifecycleState, Phase, SessionSnapshot

# Big digit representations (5 lines tall, 6 chars wide)
BIG_DIGITS = {
    "0": ["██████", "█    █", "█    █", "█    █", "██████"],
    "1": ["  ██  ", "  ██  ", "  ██  ", "  ██  ", "  ██  "],
    "2": ["██████", "     █", "██████", "█     ", "██████"],
    "3": ["██████", "     █", "██████", "     █", "██████"],
    "4": ["█    █", "█    █", "██████", "     █", "     █"],
    "5": ["██████", "█     ", "██████", "     █", "██████"],
    "6": ["██████", "█     ", "██████", "█    █", "██████"],
    "7": ["██████", "     █", "     █", "     █", "     █"],
    "8": ["██████", "█    █", "██████", "█    █", "██████"],
    "9": ["██████", "█    █", "██████", "     █", "██████"],
    ":": ["      ", "  ██  ", "      ", "  ██  ", "      "],
}
GLYPH_HEIGHT = 5
GLYPH_WIDTH = 6

PHASE_COLORS = {
    Phase.WORK: "cyan",
    Phase.SHORT_BREAK: "yellow",
    Phase.LONG_BREAK: "green",
}
MUTED = "bright_black"

BOX_WIDTH = 40

SETUP_HELP = "[TAB] Switch  •  [ENTER] Start  •  [q] Quit"
TIMER_HELP = "[SPACE] Pause  •  [s] Skip  •  [↑/↓] +/- 1m  •  [q] Quit"
BREAK_HELP = "[ENTER] Start Break  •  [s] Skip  •  [q] Quit"

# Rows the timer screen needs with spacing
TIMER_HEIGHT = 11
SETUP_HEIGHT = 24
BREAK_HEIGHT = 7

BREAK_BANNER = "WORK SESSION COMPLETE!"


def format_time(seconds: int) -> str:
    """Format seconds as MM:SS (minutes may exceed two digits)."""
    mins, secs = divmod(max(seconds, 0), 60)
    return f"{mins:02d}:{secs:02d}"


def render_big_time(seconds: int) -> List[str]:
    """Render time as big block digits, one string per row."""
    time_str = format_time(seconds)
    lines = []
    for line_num in range(GLYPH_HEIGHT):
        line_parts = [BIG_DIGITS[char][line_num] for char in time_str]
        lines.append(" ".join(line_parts))
    return lines


def big_time_width(seconds: int) -> int:
    chars = len(format_time(seconds))
    return chars * GLYPH_WIDTH + chars - 1


def render_setup(form: SetupForm, width: int, height: int) -> Text:
    """Draw the four input boxes, or one line per field when they do not fit."""
    compact = height < SETUP_HEIGHT or width < BOX_WIDTH + 2
    pad = min(BOX_WIDTH, max(width - 2, 0))
    text = Text()
    text.append("POMODORO SETUP\n", style="bold cyan")
    if not compact:
        text.append("\n")

    for index, config_field in enumerate(form.fields):
        border = "cyan" if form.is_focused(index) else MUTED
        value_style = MUTED if config_field.is_empty else "white"
        if compact:
            text.append(config_field.label.ljust(pad + 2) + "\n", style=MUTED)
            text.append("› " if form.is_focused(index) else "  ", style=border)
            text.append(config_field.display_text.ljust(pad), style=value_style)
            text.append("\n")
            continue
        text.append(config_field.label.ljust(BOX_WIDTH + 2) + "\n", style=MUTED)
        text.append("╭" + "─" * BOX_WIDTH + "╮\n", style=border)
        text.append("│   ", style=border)
        text.append(config_field.display_text.ljust(BOX_WIDTH - 6), style=value_style)
        text.append("   │\n", style=border)
        text.append("╰" + "─" * BOX_WIDTH + "╯\n", style=border)
        text.append("\n")

    text.append("\n")
    text.append(SETUP_HELP, style=MUTED)
    return text


def render_timer(snapshot: SessionSnapshot, width: int, height: int) -> Text:
    color = PHASE_COLORS[snapshot.phase]
    spacer = "\n" if height >= TIMER_HEIGHT else ""
    text = Text()
    text.append(snapshot.phase_label + "\n", style=f"bold {color}")
    text.append(spacer)

    seconds = snapshot.remaining_seconds
    if big_time_width(seconds) <= width:
        for line in render_big_time(seconds):
            text.append(line + "\n", style=color)
    else:
        text.append(format_time(seconds) + "\n", style=f"bold {color}")

    text.append(spacer)
    text.append(snapshot.status_label + "\n", style=MUTED)
    text.append(spacer)
    text.append(TIMER_HELP, style=MUTED)
    return text


def render_break_prompt(snapshot: SessionSnapshot, width: int, height: int) -> Text:
    """Announce the finished work session and the kind of break on offer."""
    if snapshot.pending_break == Phase.LONG_BREAK:
        color, message = "green", "Time for a Long Break!"
    elif snapshot.pending_break == Phase.SHORT_BREAK:
        color, message = "yellow", "Time for a Short Break!"
    else:
        color, message = "white", "Break Time!"

    banner = f"🎉 {BREAK_BANNER} 🎉"
    if cell_len(banner) > width:
        banner = BREAK_BANNER
    gap = "\n\n" if height >= BREAK_HEIGHT else "\n"

    text = Text()
    text.append(banner + gap, style="bold cyan")
    text.append(message + gap, style=f"bold {color}")
    text.append("Ready to start your break?" + gap, style="white")
    text.append(BREAK_HELP, style=MUTED)
    return text


def render_frame(
    snapshot: SessionSnapshot, form: SetupForm, width: int, height: int
) -> Text:
    """Draw the screen for the current lifecycle state."""
    if snapshot.state == LifecycleState.SETUP:
        return render_setup(form, width, height)
    elif snapshot.state == LifecycleState.BREAK_PROMPT:
        return render_break_prompt(snapshot, width, height)
    return render_timer(snapshot, width, height)
