"""Terminal and application event types, and event loop settings."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import timedelta
from decimal import Decimal
from enum import Enum, auto
from typing import Any


class EventKind(Enum):
    """Kinds of terminal event."""

    TICK = auto()
    KEY = auto()
    MOUSE = auto()
    RESIZE = auto()
    FOCUS_GAINED = auto()
    FOCUS_LOST = auto()
    PASTE = auto()
    APP = auto()


@dataclass(frozen=True)
class Event:
    """A terminal event.

    The payload is a KeyEvent for KEY, a MouseEvent for MOUSE, a
    (width, height) pair for RESIZE, the pasted text for PASTE and an
    AppEvent for APP.
    """

    kind: EventKind
    payload: Any = None


class AppEventKind(Enum):
    """Kinds of application event."""

    DATA_REFRESHED = auto()
    WS_MESSAGE = auto()
    CONNECTION_CHANGED = auto()
    ERROR = auto()
    NOTIFICATION = auto()


@dataclass(frozen=True)
class AppEvent:
    """An application event.

    The payload is a PriceUpdate, OrderUpdate or Trade for WS_MESSAGE, a bool
    for CONNECTION_CHANGED, a message for ERROR and a Notification for
    NOTIFICATION.
    """

    kind: AppEventKind
    payload: Any = None


@dataclass(frozen=True)
class PriceUpdate:
    """Best bid and ask changed for a token."""

    token_id: str
    bid: Decimal
    ask: Decimal


@dataclass(frozen=True)
class OrderUpdate:
    """An order's status changed."""

    order_id: str
    status: str


@dataclass(frozen=True)
class Trade:
    """A trade was executed."""

    token_id: str
    price: Decimal
    size: Decimal


@dataclass(frozen=True)
class EventConfig:
    """Settings for the terminal event loop."""

    tick_rate: timedelta = timedelta(milliseconds=250)
    mouse_capture: bool = True
    paste_capture: bool = True

    def with_tick_rate_ms(self, ms: int) -> EventConfig:
        """A copy with the tick rate set to ``ms`` milliseconds."""
        if ms < 0:
            raise ValueError("tick rate must not be negative")
        return replace(self, tick_rate=timedelta(milliseconds=ms))

    def with_mouse_capture(self, capture: bool) -> EventConfig:
        """A copy with mouse capture switched on or off."""
        return replace(self, mouse_capture=capture)