"""Markets, their outcomes and the market list state."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

_ZERO = Decimal(0)
_TWO = Decimal(2)
_HUNDRED = Decimal(100)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class MarketStatus(Enum):
    """Lifecycle status of a market."""

    ACTIVE = "Active"
    CLOSED = "Closed"
    RESOLVED = "Resolved"
    PAUSED = "Paused"

    def __str__(self) -> str:
        return self.value


@dataclass
class Outcome:
    """One tradeable outcome of a market."""

    token_id: str
    name: str
    bid: Decimal = _ZERO
    ask: Decimal = _ZERO
    last_price: Decimal = _ZERO
    volume_24h: Decimal = _ZERO
    price_change_24h: Decimal = _ZERO

    def mid_price(self) -> Decimal:
        return (self.bid + self.ask) / _TWO

    def spread(self) -> Decimal:
        return self.ask - self.bid

    def spread_percent(self) -> Decimal:
        """Spread as a percentage of the mid price; zero if the mid is zero."""
        mid = self.mid_price()
        if mid.is_zero():
            return _ZERO
        return (self.spread() / mid) * _HUNDRED


@dataclass
class Market:
    """A prediction market."""

    id: str
    question: str
    description: str = ""
    status: MarketStatus = MarketStatus.ACTIVE
    end_date: datetime | None = None
    tags: list[str] = field(default_factory=list)
    outcomes: list[Outcome] = field(default_factory=list)
    volume: Decimal = _ZERO
    liquidity: Decimal = _ZERO
    image_url: str | None = None
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    def _outcome(self, index: int) -> Outcome | None:
        if 0 <= index < len(self.outcomes):
            return self.outcomes[index]
        return None

    def best_bid(self, outcome_index: int) -> Decimal | None:
        outcome = self._outcome(outcome_index)
        return outcome.bid if outcome else None

    def best_ask(self, outcome_index: int) -> Decimal | None:
        outcome = self._outcome(outcome_index)
        return outcome.ask if outcome else None

    def mid_price(self, outcome_index: int) -> Decimal | None:
        outcome = self._outcome(outcome_index)
        return outcome.mid_price() if outcome else None

    def spread(self, outcome_index: int) -> Decimal | None:
        outcome = self._outcome(outcome_index)
        return outcome.spread() if outcome else None

    def is_tradeable(self) -> bool:
        return self.status is MarketStatus.ACTIVE


@dataclass
class MarketState:
    """Loaded markets plus selection and filters."""

    markets: list[Market] = field(default_factory=list)
    selected_index: int | None = None
    search_query: str | None = None
    status_filter: MarketStatus | None = None
    loading: bool = False
    last_updated: datetime | None = None
    scroll_offset: int = 0

    def _matches(self, market: Market) -> bool:
        if self.status_filter is not None and market.status is not self.status_filter:
            return False
        if self.search_query is not None:
            query = self.search_query.lower()
            texts = [market.question, market.description, *market.tags]
            if not any(query in text.lower() for text in texts):
                return False
        return True

    def filtered_markets(self) -> list[Market]:
        """Markets passing the status filter and the search query."""
        return [m for m in self.markets if self._matches(m)]

    def selected_market(self) -> Market | None:
        """The selected market, indexed into the filtered list."""
        if self.selected_index is None:
            return None
        filtered = self.filtered_markets()
        if 0 <= self.selected_index < len(filtered):
            return filtered[self.selected_index]
        return None

    def filtered_count(self) -> int:
        return len(self.filtered_markets())