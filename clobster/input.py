"""Key and mouse events, and matching key presses against binding strings."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, auto


class KeyCode(Enum):
    """Codes of keys the terminal can report."""

    CHAR = auto()
    ENTER = auto()
    ESC = auto()
    BACKSPACE = auto()
    DELETE = auto()
    TAB = auto()
    BACK_TAB = auto()
    UP = auto()
    DOWN = auto()
    LEFT = auto()
    RIGHT = auto()
    HOME = auto()
    END = auto()
    PAGE_UP = auto()
    PAGE_DOWN = auto()
    F = auto()
    INSERT = auto()
    NULL = auto()
    CAPS_LOCK = auto()
    SCROLL_LOCK = auto()
    NUM_LOCK = auto()
    PRINT_SCREEN = auto()
    PAUSE = auto()
    MENU = auto()
    KEYPAD_BEGIN = auto()


@dataclass(frozen=True)
class Key:
    """A key: its code, plus the character for CHAR or the number for F."""

    code: KeyCode
    value: str | int | None = None

    def __post_init__(self) -> None:
        if self.code is KeyCode.CHAR:
            if not isinstance(self.value, str) or len(self.value) != 1:
                raise ValueError("a character key needs exactly one character")
        elif self.code is KeyCode.F:
            value = self.value
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 255:
                raise ValueError("a function key needs a number from 0 to 255")
        elif self.value is not None:
            raise ValueError(f"{self.code.name} key takes no value")

    @classmethod
    def char(cls, c: str) -> Key:
        """A character key."""
        return cls(KeyCode.CHAR, c)

    @classmethod
    def function(cls, n: int) -> Key:
        """Function key ``F<n>``."""
        return cls(KeyCode.F, n)


@dataclass(frozen=True)
class Modifiers:
    """Modifier keys held during a key press."""

    ctrl: bool = False
    alt: bool = False
    shift: bool = False


class KeyEventKind(Enum):
    """Whether a key was pressed, repeated or released."""

    PRESS = auto()
    REPEAT = auto()
    RELEASE = auto()


@dataclass(frozen=True)
class KeyEvent:
    """A raw key event from the terminal."""

    key: Key
    modifiers: Modifiers = Modifiers()
    kind: KeyEventKind = KeyEventKind.PRESS


class MouseEventKind(Enum):
    """What the mouse did."""

    DOWN = auto()
    UP = auto()
    DRAG = auto()
    MOVED = auto()
    SCROLL_DOWN = auto()
    SCROLL_UP = auto()
    SCROLL_LEFT = auto()
    SCROLL_RIGHT = auto()


@dataclass(frozen=True)
class MouseEvent:
    """A raw mouse event from the terminal."""

    kind: MouseEventKind
    column: int = 0
    row: int = 0
    modifiers: Modifiers = Modifiers()


_SIMPLE_CODES = frozenset(
    {
        KeyCode.CHAR,
        KeyCode.ENTER,
        KeyCode.ESC,
        KeyCode.BACKSPACE,
        KeyCode.DELETE,
        KeyCode.TAB,
        KeyCode.BACK_TAB,
        KeyCode.UP,
        KeyCode.DOWN,
        KeyCode.LEFT,
        KeyCode.RIGHT,
        KeyCode.HOME,
        KeyCode.END,
        KeyCode.PAGE_UP,
        KeyCode.PAGE_DOWN,
        KeyCode.F,
    }
)

_NAMED_KEYS = {
    "enter": KeyCode.ENTER,
    "esc": KeyCode.ESC,
    "escape": KeyCode.ESC,
    "backspace": KeyCode.BACKSPACE,
    "delete": KeyCode.DELETE,
    "del": KeyCode.DELETE,
    "tab": KeyCode.TAB,
    "up": KeyCode.UP,
    "down": KeyCode.DOWN,
    "left": KeyCode.LEFT,
    "right": KeyCode.RIGHT,
    "home": KeyCode.HOME,
    "end": KeyCode.END,
    "pageup": KeyCode.PAGE_UP,
    "pagedown": KeyCode.PAGE_DOWN,
}

_F_NUMBER = re.compile(r"\+?[0-9]+")
_MODIFIER_NAMES = ("ctrl", "alt", "shift")


@dataclass(frozen=True)
class InputEvent:
    """A key press reduced to a simplified key and its modifiers."""

    key: Key
    modifiers: Modifiers = Modifiers()

    @classmethod
    def from_key_event(cls, event: KeyEvent) -> InputEvent:
        """Simplify ``event``; keys without a simple form become the NUL character."""
        key = event.key if event.key.code in _SIMPLE_CODES else Key.char("\0")
        return cls(key, event.modifiers)

    def is_char(self) -> bool:
        return self.key.code is KeyCode.CHAR

    def character(self) -> str | None:
        """The character typed, if this is a character key."""
        return self.key.value if self.is_char() else None

    def ctrl(self) -> bool:
        return self.modifiers.ctrl

    def alt(self) -> bool:
        return self.modifiers.alt

    def shift(self) -> bool:
        return self.modifiers.shift

    def matches(self, binding: str) -> bool:
        """Whether this event matches a binding such as "Ctrl+q" or "Enter".

        Modifiers must match exactly; letters match either case.
        """
        expected = dict.fromkeys(_MODIFIER_NAMES, False)
        expected_key = ""
        for part in binding.split("+"):
            lowered = part.lower()
            if lowered in expected:
                expected[lowered] = True
            else:
                expected_key = part

        held = (self.modifiers.ctrl, self.modifiers.alt, self.modifiers.shift)
        if held != tuple(expected[name] for name in _MODIFIER_NAMES):
            return False

        name = expected_key.lower()
        named = _NAMED_KEYS.get(name)
        if named is not None:
            return self.key.code is named
        width = len(name.encode("utf-8"))
        if name.startswith("f") and width <= 3:
            digits = name[1:]
            return bool(_F_NUMBER.fullmatch(digits)) and self.key == Key.function(int(digits))
        if width == 1:
            return self.key in (Key.char(name), Key.char(name.upper()))
        return False