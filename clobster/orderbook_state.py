"""Order book depth, derived statistics and the per-token book store."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from itertools import accumulate, islice

_ZERO = Decimal(0)
_TWO = Decimal(2)
_HUNDRED = Decimal(100)


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class PriceLevel:
    """One price level: a price and the total size resting there."""

    price: Decimal
    size: Decimal

    def value(self) -> Decimal:
        """Total value at this level (price times size)."""
        return self.price * self.size


def _vwap(levels: list[PriceLevel], target_size: Decimal) -> Decimal | None:
    """Average fill price walking ``levels`` until ``target_size`` is filled."""
    if not levels or target_size.is_zero():
        return None

    remaining = target_size
    total_value = _ZERO
    total_size = _ZERO
    for level in levels:
        fill_size = min(remaining, level.size)
        total_value += level.price * fill_size
        total_size += fill_size
        remaining -= fill_size
        if remaining.is_zero():
            break

    if total_size.is_zero():
        return None
    return total_value / total_size


def _cumulative(levels: list[PriceLevel]) -> list[tuple[Decimal, Decimal]]:
    running = accumulate((level.size for level in levels), initial=_ZERO)
    next(running)
    return [(level.price, total) for level, total in zip(levels, running)]


@dataclass
class OrderBookDepth:
    """Order book snapshot for one outcome token.

    Bids are sorted by price descending, asks by price ascending, so the best
    level on each side comes first.
    """

    market_id: str
    token_id: str
    hash: str = ""
    timestamp: datetime = field(default_factory=_now)
    bids: list[PriceLevel] = field(default_factory=list)
    asks: list[PriceLevel] = field(default_factory=list)

    def best_bid(self) -> PriceLevel | None:
        return self.bids[0] if self.bids else None

    def best_ask(self) -> PriceLevel | None:
        return self.asks[0] if self.asks else None

    def best_bid_price(self) -> Decimal | None:
        level = self.best_bid()
        return level.price if level else None

    def best_ask_price(self) -> Decimal | None:
        level = self.best_ask()
        return level.price if level else None

    def mid_price(self) -> Decimal | None:
        bid, ask = self.best_bid_price(), self.best_ask_price()
        if bid is None or ask is None:
            return None
        return (bid + ask) / _TWO

    def spread(self) -> Decimal | None:
        bid, ask = self.best_bid_price(), self.best_ask_price()
        if bid is None or ask is None:
            return None
        return ask - bid

    def spread_percent(self) -> Decimal | None:
        """Spread as a percentage of the mid price."""
        spread, mid = self.spread(), self.mid_price()
        if spread is None or mid is None or mid.is_zero():
            return None
        return (spread / mid) * _HUNDRED

    def bid_liquidity(self, depth: int) -> Decimal:
        """Total value of the first ``depth`` bid levels."""
        return sum((level.value() for level in islice(self.bids, depth)), _ZERO)

    def ask_liquidity(self, depth: int) -> Decimal:
        """Total value of the first ``depth`` ask levels."""
        return sum((level.value() for level in islice(self.asks, depth)), _ZERO)

    def bid_volume(self, depth: int) -> Decimal:
        """Total size of the first ``depth`` bid levels."""
        return sum((level.size for level in islice(self.bids, depth)), _ZERO)

    def ask_volume(self, depth: int) -> Decimal:
        """Total size of the first ``depth`` ask levels."""
        return sum((level.size for level in islice(self.asks, depth)), _ZERO)

    def total_liquidity(self, depth: int) -> Decimal:
        return self.bid_liquidity(depth) + self.ask_liquidity(depth)

    def imbalance(self, depth: int) -> Decimal | None:
        """Volume imbalance in [-1, 1]; positive means more buy pressure."""
        bid_vol = self.bid_volume(depth)
        ask_vol = self.ask_volume(depth)
        total = bid_vol + ask_vol
        if total.is_zero():
            return None
        return (bid_vol - ask_vol) / total

    def vwap_buy(self, size: Decimal) -> Decimal | None:
        """Average price to buy ``size``; a partial fill if asks run out."""
        return _vwap(self.asks, size)

    def vwap_sell(self, size: Decimal) -> Decimal | None:
        """Average price to sell ``size``; a partial fill if bids run out."""
        return _vwap(self.bids, size)

    def slippage_buy(self, size: Decimal) -> Decimal | None:
        """Percentage by which a market buy's VWAP exceeds the best ask."""
        vwap, best = self.vwap_buy(size), self.best_ask_price()
        if vwap is None or best is None or best.is_zero():
            return None
        return ((vwap - best) / best) * _HUNDRED

    def slippage_sell(self, size: Decimal) -> Decimal | None:
        """Percentage by which a market sell's VWAP falls below the best bid."""
        vwap, best = self.vwap_sell(size), self.best_bid_price()
        if vwap is None or best is None or best.is_zero():
            return None
        return ((best - vwap) / best) * _HUNDRED

    def bid_depth(self) -> int:
        return len(self.bids)

    def ask_depth(self) -> int:
        return len(self.asks)

    def is_empty(self) -> bool:
        return not self.bids and not self.asks

    def cumulative_bids(self) -> list[tuple[Decimal, Decimal]]:
        """(price, cumulative size) for each bid level."""
        return _cumulative(self.bids)

    def cumulative_asks(self) -> list[tuple[Decimal, Decimal]]:
        """(price, cumulative size) for each ask level."""
        return _cumulative(self.asks)


@dataclass
class OrderBookStats:
    """Summary statistics of an order book."""

    best_bid: Decimal | None = None
    best_ask: Decimal | None = None
    mid_price: Decimal | None = None
    spread: Decimal | None = None
    spread_percent: Decimal | None = None
    bid_liquidity: Decimal = _ZERO
    ask_liquidity: Decimal = _ZERO
    imbalance: Decimal | None = None
    bid_depth: int = 0
    ask_depth: int = 0

    @classmethod
    def from_orderbook(cls, book: OrderBookDepth, depth: int) -> OrderBookStats:
        """Compute stats for ``book`` using the first ``depth`` levels."""
        return cls(
            best_bid=book.best_bid_price(),
            best_ask=book.best_ask_price(),
            mid_price=book.mid_price(),
            spread=book.spread(),
            spread_percent=book.spread_percent(),
            bid_liquidity=book.bid_liquidity(depth),
            ask_liquidity=book.ask_liquidity(depth),
            imbalance=book.imbalance(depth),
            bid_depth=book.bid_depth(),
            ask_depth=book.ask_depth(),
        )


@dataclass
class OrderBookState:
    """Order books keyed by token id, plus selection and load status."""

    books: dict[str, OrderBookDepth] = field(default_factory=dict)
    selected_token_id: str | None = None
    loading: bool = False
    last_updated: datetime | None = None
    display_depth: int = 10
    error: str | None = None

    def get_book(self, token_id: str) -> OrderBookDepth | None:
        return self.books.get(token_id)

    def selected_book(self) -> OrderBookDepth | None:
        if self.selected_token_id is None:
            return None
        return self.books.get(self.selected_token_id)

    def update_book(self, book: OrderBookDepth) -> None:
        """Store ``book`` under its token id and stamp the update time."""
        self.books[book.token_id] = book
        self.last_updated = _now()

    def remove_book(self, token_id: str) -> None:
        self.books.pop(token_id, None)

    def clear(self) -> None:
        """Drop every book, the selection and any error."""
        self.books.clear()
        self.selected_token_id = None
        self.error = None

    def get_stats(self, token_id: str) -> OrderBookStats | None:
        book = self.get_book(token_id)
        if book is None:
            return None
        return OrderBookStats.from_orderbook(book, self.display_depth)

    def token_ids(self) -> list[str]:
        return list(self.books)