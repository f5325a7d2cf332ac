"""High-level asynchronous client for the market API, with rate limiting."""

from __future__ import annotations

import asyncio
import json
import time
import urllib.error
import urllib.parse
import urllib.request
from collections.abc import Awaitable, Callable, Iterable
from typing import Any, Protocol

from clobster.config import ApiConfig
from clobster.converter import convert_market, convert_order, convert_orderbook
from clobster.errors import ApiError, ApplicationError, AuthError, NetworkError, SerializationError
from clobster.market_state import Market
from clobster.order_state import Order, OrderRequest, OrderSide
from clobster.orderbook_state import OrderBookDepth
from clobster.portfolio_state import PortfolioState, Position

_REQUESTS_PER_SECOND = 10


class Transport(Protocol):
    """Sends one request to the API and returns the decoded response."""

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, str] | None = None,
        body: Any = None,
    ) -> Any: ...


class HttpTransport:
    """JSON over HTTP using the standard library, run off the event loop."""

    def __init__(self, base_url: str, timeout: float) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, str] | None = None,
        body: Any = None,
    ) -> Any:
        return await asyncio.to_thread(self._send, method, path, params, body)

    def _send(
        self, method: str, path: str, params: dict[str, str] | None, body: Any
    ) -> Any:
        url = self.base_url + path
        if params:
            url += "?" + urllib.parse.urlencode(params)
        headers = {"Accept": "application/json"}
        data = None
        if body is not None:
            data = json.dumps(body).encode("utf-8")
            headers["Content-Type"] = "application/json"
        request = urllib.request.Request(url, data=data, method=method, headers=headers)
        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as response:
                raw = response.read()
        except urllib.error.HTTPError as exc:
            raise ApiError(f"HTTP {exc.code} {exc.reason} for {method} {path}") from exc
        except (urllib.error.URLError, OSError) as exc:
            raise NetworkError(getattr(exc, "reason", exc)) from exc
        text = raw.decode("utf-8", errors="replace")
        if not text:
            return None
        try:
            return json.loads(text)
        except ValueError:
            return text


class RateLimiter:
    """Token bucket allowing ``requests_per_second`` requests on average."""

    def __init__(
        self,
        requests_per_second: int = _REQUESTS_PER_SECOND,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        if requests_per_second <= 0:
            raise ValueError("requests_per_second must be positive")
        self.requests_per_second = requests_per_second
        self.tokens = float(requests_per_second)
        self._clock = clock
        self._sleep = sleep
        self.last_request = clock()

    async def wait(self) -> None:
        """Take one token, sleeping first if the bucket is empty."""
        rate = float(self.requests_per_second)
        elapsed = self._clock() - self.last_request
        self.tokens = min(self.tokens + elapsed * rate, rate)
        if self.tokens < 1.0:
            await self._sleep((1.0 - self.tokens) / rate)
            self.tokens = 1.0
        self.tokens -= 1.0
        self.last_request = self._clock()


def _wire_side(side: OrderSide) -> str:
    return side.value.upper()


def _data_list(response: Any, what: str) -> list[Any]:
    if not isinstance(response, dict) or not isinstance(response.get("data"), list):
        raise SerializationError(f"{what}: expected an object with a 'data' list")
    return response["data"]


class ApiClient:
    """Market data and trading operations against the API."""

    def __init__(
        self,
        config: ApiConfig | None = None,
        private_key: str | None = None,
        *,
        transport: Transport | None = None,
        rate_limiter: RateLimiter | None = None,
    ) -> None:
        self.config = config if config is not None else ApiConfig()
        self._transport = transport or HttpTransport(
            self.config.base_url, float(self.config.timeout_secs)
        )
        # Trading requires wallet credentials, which are never set up here.
        self._trading: Transport | None = None
        self._rate_limiter = rate_limiter or RateLimiter(_REQUESTS_PER_SECOND)
        self._lock = asyncio.Lock()

    def is_authenticated(self) -> bool:
        """Whether authenticated (trading) operations are available."""
        return self._trading is not None

    async def _rate_limit(self) -> None:
        async with self._lock:
            await self._rate_limiter.wait()

    def _require_trading(self) -> Transport:
        if self._trading is None:
            raise AuthError("Not authenticated")
        return self._trading

    async def test_connection(self) -> bool:
        """Check that the API answers."""
        await self._rate_limit()
        await self._transport.request("GET", "/")
        return True

    async def fetch_markets(self) -> list[Market]:
        """Fetch the first page of markets."""
        await self._rate_limit()
        response = await self._transport.request("GET", "/markets")
        return [convert_market(item) for item in _data_list(response, "markets")]

    async def fetch_market(self, condition_id: str) -> Market:
        """Fetch one market by its condition id."""
        await self._rate_limit()
        path = "/markets/" + urllib.parse.quote(condition_id, safe="")
        return convert_market(await self._transport.request("GET", path))

    async def fetch_orderbook(self, token_id: str) -> OrderBookDepth:
        """Fetch the order book of one token."""
        await self._rate_limit()
        response = await self._transport.request("GET", "/book", params={"token_id": token_id})
        return convert_orderbook(response)

    async def fetch_orderbooks(
        self, params: Iterable[tuple[str, OrderSide]]
    ) -> list[OrderBookDepth]:
        """Fetch several order books; each entry is a (token_id, side) pair."""
        await self._rate_limit()
        body = [{"token_id": token_id, "side": _wire_side(side)} for token_id, side in params]
        response = await self._transport.request("POST", "/books", body=body)
        if not isinstance(response, list):
            raise SerializationError("order books: expected a list")
        return [convert_orderbook(book) for book in response]

    async def fetch_orders(self) -> list[Order]:
        """Fetch open orders; requires authentication."""
        trading = self._require_trading()
        await self._rate_limit()
        response = await trading.request("GET", "/data/orders")
        return [convert_order(item) for item in _data_list(response, "orders")]

    async def fetch_positions(self) -> list[Position]:
        """Fetch positions; requires authentication."""
        self._require_trading()
        await self._rate_limit()
        return []

    async def fetch_portfolio(self) -> PortfolioState:
        """Fetch the portfolio; requires authentication."""
        self._require_trading()
        await self._rate_limit()
        return PortfolioState()

    async def place_order(self, request: OrderRequest) -> Order:
        """Place an order; requires authentication."""
        self._require_trading()
        await self._rate_limit()
        raise ApplicationError(f"order placement is unavailable for {request.token_id}")

    async def cancel_order(self, order_id: str) -> None:
        """Cancel an order; requires authentication."""
        self._require_trading()
        await self._rate_limit()
        raise ApplicationError(f"order cancellation is unavailable for {order_id}")


class ApiClientBuilder:
    """Fluent construction of an ApiClient."""

    def __init__(self) -> None:
        self._config = ApiConfig()
        self._private_key: str | None = None

    def config(self, config: ApiConfig) -> ApiClientBuilder:
        self._config = config
        return self

    def private_key(self, key: str) -> ApiClientBuilder:
        self._private_key = key
        return self

    def build(self) -> ApiClient:
        return ApiClient(self._config, self._private_key)