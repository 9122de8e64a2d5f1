"""Setup form: four numeric fields with a single focus pointer."""

from dataclasses import dataclass, field
from typing import List

from .scheduler import DEFAULT_DURATIONS, Durations

MAX_FIELD_LENGTH = 3

FIELD_LABELS = (
    "Work Duration (minutes):",
    "Short Break (minutes):",
    "Long Break (minutes):",
    "Total Sessions:",
)


@dataclass
class ConfigField:
    """One text buffer of the setup form."""
    label: str
    placeholder: str
    value: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.value

    @property
    def display_text(self) -> str:
        """Typed value, or the placeholder while nothing is typed."""
        return self.value or self.placeholder


def _fields_for(defaults: Durations) -> List[ConfigField]:
    values = (
        defaults.work,
        defaults.short_break,
        defaults.long_break,
        defaults.sessions,
    )
    return [
        ConfigField(label=label, placeholder=str(value))
        for label, value in zip(FIELD_LABELS, values)
    ]


@dataclass
class SetupForm:
    """The four configuration fields; exactly one has focus."""
    fields: List[ConfigField] = field(default_factory=lambda: _fields_for(DEFAULT_DURATIONS))
    focus_index: int = 0

    @classmethod
    def with_defaults(cls, defaults: Durations) -> "SetupForm":
        return cls(fields=_fields_for(defaults))

    @property
    def focused(self) -> ConfigField:
        return self.fields[self.focus_index]

    def is_focused(self, index: int) -> bool:
        return index == self.focus_index

    def focus_next(self) -> None:
        self.focus_index = (self.focus_index + 1) % len(self.fields)

    def focus_previous(self) -> None:
        self.focus_index = (self.focus_index - 1) % len(self.fields)

    def type_digit(self, char: str) -> bool:
        """Append a digit to the focused field.

        Returns:
            True if the character was accepted.
        """
        if len(char) != 1 or not char.isdigit() or not char.isascii():
            return False
        current = self.focused
        if len(current.value) >= MAX_FIELD_LENGTH:
            return False
        current.value += char
        return True

    def backspace(self) -> None:
        self.focused.value = self.focused.value[:-1]

    def values(self) -> List[str]:
        """Raw text of every field, in order."""
        return [f.value for f in self.fields]
