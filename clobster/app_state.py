"""Application-level state: views, modes, notifications and the input buffer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class View(Enum):
    """The current screen."""

    MARKETS = "Markets"
    MARKET_DETAIL = "MarketDetail"
    ORDERS = "Orders"
    ORDER_ENTRY = "OrderEntry"
    POSITIONS = "Positions"
    PORTFOLIO = "Portfolio"
    SETTINGS = "Settings"


class InputMode(Enum):
    """How key presses are interpreted."""

    NORMAL = "Normal"
    INSERT = "Insert"
    COMMAND = "Command"
    SEARCH = "Search"


class AppMode(Enum):
    """What the user is allowed to do."""

    BROWSE = "Browse"
    TRADE = "Trade"
    VIEW_ONLY = "ViewOnly"


class NotificationLevel(Enum):
    """Severity of a notification."""

    INFO = "Info"
    SUCCESS = "Success"
    WARNING = "Warning"
    ERROR = "Error"


@dataclass(frozen=True)
class Notification:
    """A message shown to the user for a while."""

    message: str
    level: NotificationLevel
    duration_secs: int

    @classmethod
    def info(cls, message: str) -> Notification:
        return cls(message, NotificationLevel.INFO, 3)

    @classmethod
    def success(cls, message: str) -> Notification:
        return cls(message, NotificationLevel.SUCCESS, 3)

    @classmethod
    def warning(cls, message: str) -> Notification:
        return cls(message, NotificationLevel.WARNING, 5)

    @classmethod
    def error(cls, message: str) -> Notification:
        return cls(message, NotificationLevel.ERROR, 10)


_EDITING_MODES = frozenset({InputMode.INSERT, InputMode.COMMAND, InputMode.SEARCH})


@dataclass
class AppState:
    """Global application state."""

    current_view: View = View.MARKETS
    input_mode: InputMode = InputMode.NORMAL
    mode: AppMode = AppMode.BROWSE
    show_help: bool = False
    notification: Notification | None = None
    error: str | None = None
    loading: bool = False
    connected: bool = False
    should_quit: bool = False
    input_buffer: str = ""
    cursor_position: int = 0

    def is_editing(self) -> bool:
        """Whether an input mode is active."""
        return self.input_mode in _EDITING_MODES

    def clear_input(self) -> None:
        self.input_buffer = ""
        self.cursor_position = 0

    def push_char(self, c: str) -> None:
        """Insert a character at the cursor and advance it."""
        pos = self.cursor_position
        self.input_buffer = self.input_buffer[:pos] + c + self.input_buffer[pos:]
        self.cursor_position += 1

    def pop_char(self) -> None:
        """Delete the character before the cursor."""
        if self.cursor_position > 0:
            self.cursor_position -= 1
            pos = self.cursor_position
            self.input_buffer = self.input_buffer[:pos] + self.input_buffer[pos + 1 :]

    def cursor_left(self) -> None:
        self.cursor_position = max(self.cursor_position - 1, 0)

    def cursor_right(self) -> None:
        if self.cursor_position < len(self.input_buffer):
            self.cursor_position += 1