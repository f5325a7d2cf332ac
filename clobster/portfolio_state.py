"""Balances, positions and portfolio totals."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

_ZERO = Decimal(0)
_HUNDRED = Decimal(100)


@dataclass
class Balance:
    """Balance of one asset; ``locked`` is what is tied up in orders."""

    asset: str
    total: Decimal
    available: Decimal
    locked: Decimal = field(init=False)

    def __post_init__(self) -> None:
        self.locked = self.total - self.available


@dataclass
class Position:
    """A holding in one outcome of a market."""

    market_id: str
    market_question: str
    token_id: str
    outcome_name: str
    size: Decimal
    avg_price: Decimal
    current_price: Decimal
    unrealized_pnl: Decimal = _ZERO
    unrealized_pnl_percent: Decimal = _ZERO
    realized_pnl: Decimal = _ZERO
    cost_basis: Decimal = _ZERO
    market_value: Decimal = _ZERO

    def calculate_pnl(self) -> None:
        """Recompute market value, cost basis and unrealized PnL."""
        self.market_value = self.size * self.current_price
        self.cost_basis = self.size * self.avg_price
        self.unrealized_pnl = self.market_value - self.cost_basis
        if not self.cost_basis.is_zero():
            self.unrealized_pnl_percent = (self.unrealized_pnl / self.cost_basis) * _HUNDRED

    def is_profitable(self) -> bool:
        return self.unrealized_pnl > _ZERO


@dataclass
class PortfolioState:
    """Balances, positions and aggregate values."""

    balances: list[Balance] = field(default_factory=list)
    positions: list[Position] = field(default_factory=list)
    total_value: Decimal = _ZERO
    total_unrealized_pnl: Decimal = _ZERO
    total_realized_pnl: Decimal = _ZERO
    selected_position: int | None = None
    loading: bool = False
    last_updated: datetime | None = None
    scroll_offset: int = 0

    def current_position(self) -> Position | None:
        """The position at ``selected_position``, if any."""
        index = self.selected_position
        if index is not None and 0 <= index < len(self.positions):
            return self.positions[index]
        return None

    def available_usdc(self) -> Decimal:
        """Available USDC balance, zero if there is none."""
        return next((b.available for b in self.balances if b.asset == "USDC"), _ZERO)

    def calculate_totals(self) -> None:
        """Recompute PnL totals and total value from positions and balances."""
        self.total_unrealized_pnl = sum((p.unrealized_pnl for p in self.positions), _ZERO)
        self.total_realized_pnl = sum((p.realized_pnl for p in self.positions), _ZERO)
        positions_value = sum((p.market_value for p in self.positions), _ZERO)
        balances_value = sum((b.total for b in self.balances), _ZERO)
        self.total_value = positions_value + balances_value

    def profitable_positions(self) -> list[Position]:
        return [p for p in self.positions if p.is_profitable()]

    def losing_positions(self) -> list[Position]:
        return [p for p in self.positions if not p.is_profitable()]