"""Orders, order requests and the order list state."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

_ZERO = Decimal(0)
_HUNDRED = Decimal(100)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class OrderSide(Enum):
    """Buy or sell."""

    BUY = "Buy"
    SELL = "Sell"

    def __str__(self) -> str:
        return self.value


class OrderType(Enum):
    """Limit or market order."""

    LIMIT = "Limit"
    MARKET = "Market"

    def __str__(self) -> str:
        return self.value


class OrderStatus(Enum):
    """Lifecycle status of an order; the value is its display label."""

    PENDING = "Pending"
    OPEN = "Open"
    PARTIALLY_FILLED = "Partial"
    FILLED = "Filled"
    CANCELLED = "Cancelled"
    EXPIRED = "Expired"
    FAILED = "Failed"

    def __str__(self) -> str:
        return self.value


_ACTIVE_STATUSES = frozenset({OrderStatus.OPEN, OrderStatus.PARTIALLY_FILLED})
_COMPLETE_STATUSES = frozenset(
    {OrderStatus.FILLED, OrderStatus.CANCELLED, OrderStatus.EXPIRED, OrderStatus.FAILED}
)


@dataclass(frozen=True)
class OrderRequest:
    """A request to place an order; ``price`` is None for market orders."""

    market_id: str
    token_id: str
    side: OrderSide
    price: Decimal | None
    size: Decimal
    order_type: OrderType


@dataclass
class Order:
    """An order on the exchange."""

    id: str
    market_id: str
    market_question: str
    token_id: str
    outcome_name: str
    side: OrderSide
    order_type: OrderType
    price: Decimal
    original_size: Decimal
    remaining_size: Decimal
    filled_size: Decimal
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)
    expires_at: datetime | None = None

    def fill_percent(self) -> Decimal:
        """Filled size as a percentage of the original size."""
        if self.original_size.is_zero():
            return _ZERO
        return (self.filled_size / self.original_size) * _HUNDRED

    def is_active(self) -> bool:
        """Whether the order can still be filled."""
        return self.status in _ACTIVE_STATUSES

    def is_complete(self) -> bool:
        """Whether the order is finished."""
        return self.status in _COMPLETE_STATUSES

    def can_cancel(self) -> bool:
        return self.is_active()

    def total_value(self) -> Decimal:
        return self.price * self.original_size

    def filled_value(self) -> Decimal:
        return self.price * self.filled_size


@dataclass
class OrderState:
    """Loaded orders plus selection and filter."""

    orders: list[Order] = field(default_factory=list)
    selected_index: int | None = None
    status_filter: OrderStatus | None = None
    loading: bool = False
    last_updated: datetime | None = None
    scroll_offset: int = 0

    def selected_order(self) -> Order | None:
        index = self.selected_index
        if index is not None and 0 <= index < len(self.orders):
            return self.orders[index]
        return None

    def open_orders(self) -> list[Order]:
        return [o for o in self.orders if o.is_active()]

    def filled_orders(self) -> list[Order]:
        return [o for o in self.orders if o.status is OrderStatus.FILLED]

    def order_history(self) -> list[Order]:
        """Orders that are no longer active."""
        return [o for o in self.orders if o.is_complete()]

    def filtered_orders(self) -> list[Order]:
        """Orders matching the status filter, or all orders without one."""
        if self.status_filter is None:
            return list(self.orders)
        return [o for o in self.orders if o.status is self.status_filter]

    def open_count(self) -> int:
        return len(self.open_orders())