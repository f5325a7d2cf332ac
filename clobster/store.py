"""Actions and the central store that applies them to application state."""

from __future__ import annotations

import asyncio
import queue
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum, auto
from typing import Any, Protocol

from clobster.app_state import AppState, View
from clobster.errors import ChannelError
from clobster.market_state import MarketState
from clobster.order_state import OrderState
from clobster.orderbook_state import OrderBookState
from clobster.portfolio_state import PortfolioState

_MAX_BOOK_DEPTH = 100
_PAGE_SIZE = 10


class ActionKind(Enum):
    """Every kind of state change the store understands."""

    SET_VIEW = auto()
    SET_INPUT_MODE = auto()
    SET_APP_MODE = auto()

    LOAD_MARKETS = auto()
    MARKETS_LOADED = auto()
    SELECT_MARKET = auto()
    SEARCH_MARKETS = auto()
    FILTER_MARKETS = auto()
    CLEAR_MARKET_FILTER = auto()

    LOAD_ORDERS = auto()
    ORDERS_LOADED = auto()
    SELECT_ORDER = auto()
    PLACE_ORDER = auto()
    CANCEL_ORDER = auto()
    ORDER_PLACED = auto()
    ORDER_CANCELLED = auto()

    LOAD_PORTFOLIO = auto()
    PORTFOLIO_LOADED = auto()
    LOAD_POSITIONS = auto()
    POSITIONS_LOADED = auto()

    LOAD_ORDER_BOOK = auto()
    ORDER_BOOK_LOADED = auto()
    ORDER_BOOK_ERROR = auto()
    SELECT_ORDER_BOOK = auto()
    CLEAR_ORDER_BOOK = auto()
    CLEAR_ALL_ORDER_BOOKS = auto()
    SET_ORDER_BOOK_DEPTH = auto()

    SCROLL_UP = auto()
    SCROLL_DOWN = auto()
    PAGE_UP = auto()
    PAGE_DOWN = auto()
    GO_TO_TOP = auto()
    GO_TO_BOTTOM = auto()
    TOGGLE_HELP = auto()
    SHOW_NOTIFICATION = auto()
    DISMISS_NOTIFICATION = auto()

    REFRESH_ALL = auto()
    REFRESH_MARKETS = auto()
    REFRESH_ORDERS = auto()
    REFRESH_PORTFOLIO = auto()
    REFRESH_ORDER_BOOK = auto()

    SET_ERROR = auto()
    CLEAR_ERROR = auto()

    SET_CONNECTED = auto()
    SET_LOADING = auto()

    QUIT = auto()


@dataclass(frozen=True)
class Action:
    """A state change: its kind and the value it carries, if any."""

    kind: ActionKind
    payload: Any = None


class _ActionSink(Protocol):
    def put_nowait(self, item: Action) -> None: ...


_REFRESH_KINDS = frozenset(
    {
        ActionKind.REFRESH_ALL,
        ActionKind.REFRESH_MARKETS,
        ActionKind.REFRESH_ORDERS,
        ActionKind.REFRESH_PORTFOLIO,
        ActionKind.REFRESH_ORDER_BOOK,
    }
)


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Store:
    """The global state, changed only by reducing actions."""

    actions: _ActionSink | None = None
    app: AppState = field(default_factory=AppState)
    markets: MarketState = field(default_factory=MarketState)
    orders: OrderState = field(default_factory=OrderState)
    orderbooks: OrderBookState = field(default_factory=OrderBookState)
    portfolio: PortfolioState = field(default_factory=PortfolioState)

    def dispatch(self, action: Action) -> None:
        """Queue ``action`` for later handling; raises ChannelError if it cannot."""
        if self.actions is None:
            raise ChannelError("no action channel")
        try:
            self.actions.put_nowait(action)
        except (asyncio.QueueFull, queue.Full) as exc:
            raise ChannelError("action channel is full") from exc

    def reduce(self, action: Action) -> None:
        """Apply ``action`` to the state."""
        kind, value = action.kind, action.payload
        if kind in _REFRESH_KINDS:
            self.app.loading = True
            return

        match kind:
            case ActionKind.SET_VIEW:
                self.app.current_view = value
            case ActionKind.SET_INPUT_MODE:
                self.app.input_mode = value
            case ActionKind.SET_APP_MODE:
                self.app.mode = value

            case ActionKind.LOAD_MARKETS:
                self.markets.loading = True
            case ActionKind.MARKETS_LOADED:
                self.markets.markets = list(value)
                self.markets.loading = False
                self.markets.last_updated = _now()
            case ActionKind.SELECT_MARKET:
                if 0 <= value < len(self.markets.markets):
                    self.markets.selected_index = value
            case ActionKind.SEARCH_MARKETS:
                self.markets.search_query = value
            case ActionKind.FILTER_MARKETS:
                self.markets.status_filter = value
            case ActionKind.CLEAR_MARKET_FILTER:
                self.markets.search_query = None
                self.markets.status_filter = None

            case ActionKind.LOAD_ORDERS:
                self.orders.loading = True
            case ActionKind.ORDERS_LOADED:
                self.orders.orders = list(value)
                self.orders.loading = False
                self.orders.last_updated = _now()
            case ActionKind.SELECT_ORDER:
                if 0 <= value < len(self.orders.orders):
                    self.orders.selected_index = value
            case ActionKind.PLACE_ORDER | ActionKind.CANCEL_ORDER:
                self.orders.loading = True
            case ActionKind.ORDER_PLACED:
                self.orders.orders.append(value)
                self.orders.loading = False
            case ActionKind.ORDER_CANCELLED:
                self.orders.orders = [o for o in self.orders.orders if o.id != value]
                self.orders.loading = False

            case ActionKind.LOAD_PORTFOLIO | ActionKind.LOAD_POSITIONS:
                self.portfolio.loading = True
            case ActionKind.PORTFOLIO_LOADED:
                self.portfolio = value
                self.portfolio.loading = False
            case ActionKind.POSITIONS_LOADED:
                self.portfolio.positions = list(value)
                self.portfolio.loading = False

            case ActionKind.LOAD_ORDER_BOOK:
                self.orderbooks.loading = True
            case ActionKind.ORDER_BOOK_LOADED:
                self.orderbooks.update_book(value)
                self.orderbooks.loading = False
                self.orderbooks.error = None
            case ActionKind.ORDER_BOOK_ERROR:
                self.orderbooks.loading = False
                self.orderbooks.error = value
            case ActionKind.SELECT_ORDER_BOOK:
                self.orderbooks.selected_token_id = value
            case ActionKind.CLEAR_ORDER_BOOK:
                self.orderbooks.remove_book(value)
            case ActionKind.CLEAR_ALL_ORDER_BOOKS:
                self.orderbooks.clear()
            case ActionKind.SET_ORDER_BOOK_DEPTH:
                if 0 < value <= _MAX_BOOK_DEPTH:
                    self.orderbooks.display_depth = value

            case ActionKind.SCROLL_UP:
                self._scroll(-1)
            case ActionKind.SCROLL_DOWN:
                self._scroll(1)
            case ActionKind.PAGE_UP:
                self._scroll(-_PAGE_SIZE)
            case ActionKind.PAGE_DOWN:
                self._scroll(_PAGE_SIZE)
            case ActionKind.GO_TO_TOP:
                self._select(lambda _last: 0)
            case ActionKind.GO_TO_BOTTOM:
                self._select(lambda last: last)
            case ActionKind.TOGGLE_HELP:
                self.app.show_help = not self.app.show_help
            case ActionKind.SHOW_NOTIFICATION:
                self.app.notification = value
            case ActionKind.DISMISS_NOTIFICATION:
                self.app.notification = None

            case ActionKind.SET_ERROR:
                self.app.error = value
                self.app.loading = False
            case ActionKind.CLEAR_ERROR:
                self.app.error = None

            case ActionKind.SET_CONNECTED:
                self.app.connected = value
            case ActionKind.SET_LOADING:
                self.app.loading = value

            case ActionKind.QUIT:
                self.app.should_quit = True

    def _scroll(self, delta: int) -> None:
        def move(last: int, current: int | None) -> int:
            return min(max((current or 0) + delta, 0), last)

        self._select(move, with_current=True)

    def _select(self, choose, with_current: bool = False) -> None:
        """Set the selection of the current list view from ``choose``."""
        view = self.app.current_view
        if view is View.MARKETS:
            last = max(len(self.markets.filtered_markets()) - 1, 0)
            current = self.markets.selected_index
            self.markets.selected_index = choose(last, current) if with_current else choose(last)
        elif view is View.ORDERS:
            last = max(len(self.orders.orders) - 1, 0)
            current = self.orders.selected_index
            self.orders.selected_index = choose(last, current) if with_current else choose(last)
        elif view is View.POSITIONS:
            last = max(len(self.portfolio.positions) - 1, 0)
            current = self.portfolio.selected_position
            self.portfolio.selected_position = (
                choose(last, current) if with_current else choose(last)
            )