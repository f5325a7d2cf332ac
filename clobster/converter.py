"""Conversion of raw API payloads into the application's state types."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

from clobster.errors import SerializationError
from clobster.market_state import Market, MarketStatus, Outcome
from clobster.order_state import Order, OrderSide, OrderStatus, OrderType
from clobster.orderbook_state import OrderBookDepth, PriceLevel

_SIDES = {"BUY": OrderSide.BUY, "SELL": OrderSide.SELL}

_ORDER_TYPES = {
    "GTC": OrderType.LIMIT,
    "FOK": OrderType.MARKET,
    "GTD": OrderType.LIMIT,
}

_ORDER_STATUSES = {
    "LIVE": OrderStatus.OPEN,
    "OPEN": OrderStatus.OPEN,
    "MATCHED": OrderStatus.FILLED,
    "FILLED": OrderStatus.FILLED,
    "CANCELLED": OrderStatus.CANCELLED,
    "CANCELED": OrderStatus.CANCELLED,
    "EXPIRED": OrderStatus.EXPIRED,
}


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise SerializationError(f"{what}: expected an object")
    return data


def _required(data: Mapping[str, Any], key: str, what: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise SerializationError(f"{what}: missing field {key!r}") from None


def _decimal(value: Any, what: str) -> Decimal:
    if isinstance(value, bool):
        raise SerializationError(f"{what}: expected a number, got {value!r}")
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise SerializationError(f"{what}: expected a number, got {value!r}") from None


def _integer(value: Any, what: str) -> int:
    if isinstance(value, bool):
        raise SerializationError(f"{what}: expected an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise SerializationError(f"{what}: expected an integer, got {value!r}") from None


def _from_timestamp(seconds: float) -> datetime | None:
    try:
        return datetime.fromtimestamp(seconds, timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def _iso_datetime(value: Any, what: str) -> datetime | None:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise SerializationError(f"{what}: expected a date string, got {value!r}")
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise SerializationError(f"{what}: invalid date {value!r}") from None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def convert_market_status(active: bool, closed: bool) -> MarketStatus:
    """Closed wins over active; a market that is neither is paused."""
    if closed:
        return MarketStatus.CLOSED
    if active:
        return MarketStatus.ACTIVE
    return MarketStatus.PAUSED


def convert_side(side: str) -> OrderSide:
    """Map an API side ("BUY"/"SELL", any case) to an OrderSide."""
    try:
        return _SIDES[str(side).upper()]
    except KeyError:
        raise SerializationError(f"unknown order side {side!r}") from None


def convert_order_type(order_type: str) -> OrderType:
    """GTC and GTD orders are limit orders; FOK orders are market orders."""
    try:
        return _ORDER_TYPES[str(order_type).upper()]
    except KeyError:
        raise SerializationError(f"unknown order type {order_type!r}") from None


def convert_order_status(status: str) -> OrderStatus:
    """Map an API status string; anything unrecognised is pending."""
    return _ORDER_STATUSES.get(status.upper(), OrderStatus.PENDING)


def convert_market(data: Any) -> Market:
    """Build a Market from an API market object."""
    market = _mapping(data, "market")
    tokens = market.get("tokens") or []
    if not isinstance(tokens, list):
        raise SerializationError("market: 'tokens' must be a list")
    outcomes = [
        Outcome(
            token_id=str(_required(token, "token_id", "token")),
            name=str(_required(token, "outcome", "token")),
        )
        for token in (_mapping(t, "token") for t in tokens)
    ]
    category = market.get("category")
    now = _now()
    return Market(
        id=str(_required(market, "condition_id", "market")),
        question=str(_required(market, "question", "market")),
        description=str(market.get("description") or ""),
        status=convert_market_status(
            bool(market.get("active", False)), bool(market.get("closed", False))
        ),
        end_date=_iso_datetime(market.get("end_date_iso"), "market.end_date_iso"),
        tags=[str(category)] if category else [],
        outcomes=outcomes,
        image_url=str(market.get("icon") or ""),
        created_at=now,
        updated_at=now,
    )


def convert_order(data: Any) -> Order:
    """Build an Order from an API open-order object."""
    order = _mapping(data, "order")
    original_size = _decimal(_required(order, "original_size", "order"), "order.original_size")
    size_matched = _decimal(order.get("size_matched", 0), "order.size_matched")
    created = _integer(order.get("created_at", 0), "order.created_at")
    expiration = _integer(order.get("expiration", 0), "order.expiration")
    return Order(
        id=str(_required(order, "id", "order")),
        market_id=str(_required(order, "market", "order")),
        market_question="",
        token_id=str(_required(order, "asset_id", "order")),
        outcome_name=str(order.get("outcome", "")),
        side=convert_side(_required(order, "side", "order")),
        order_type=convert_order_type(order.get("order_type", "GTC")),
        price=_decimal(_required(order, "price", "order"), "order.price"),
        original_size=original_size,
        remaining_size=original_size - size_matched,
        filled_size=size_matched,
        status=convert_order_status(str(order.get("status", ""))),
        created_at=_from_timestamp(created) or _now(),
        updated_at=_now(),
        expires_at=_from_timestamp(expiration) if expiration > 0 else None,
    )


def _levels(raw: Any, what: str) -> list[PriceLevel]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise SerializationError(f"{what}: expected a list")
    levels = []
    for item in raw:
        level = _mapping(item, what)
        levels.append(
            PriceLevel(
                _decimal(_required(level, "price", what), f"{what}.price"),
                _decimal(_required(level, "size", what), f"{what}.size"),
            )
        )
    return levels


def convert_orderbook(data: Any) -> OrderBookDepth:
    """Build an OrderBookDepth from an API order book summary.

    The summary's timestamp is in milliseconds.
    """
    book = _mapping(data, "order book")
    millis = _integer(book.get("timestamp", 0), "order book.timestamp")
    return OrderBookDepth(
        market_id=str(_required(book, "market", "order book")),
        token_id=str(_required(book, "asset_id", "order book")),
        hash=str(book.get("hash") or ""),
        timestamp=_from_timestamp(millis / 1000) or _now(),
        bids=_levels(book.get("bids"), "bid"),
        asks=_levels(book.get("asks"), "ask"),
    )