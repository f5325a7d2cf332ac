# clobster

Building blocks for a terminal interface to Polymarket prediction markets:
configuration, application state, an action-driven store, key-binding
matching, conversion of API responses into typed models and a small
asynchronous API client.

## Installation

```
pip install clobster
```

For running the tests:

```
pip install "clobster[test]"
pytest
```

## Modules

| Module | Contents |
| --- | --- |
| `clobster.errors` | `ClobsterError` and its subclasses |
| `clobster.config` | `Config`, `ApiConfig`, `UiConfig`, `KeyBindings`, `ThemeConfig`, `config_dir()`, `data_dir()`, `log_dir()` |
| `clobster.app_state` | `View`, `InputMode`, `AppMode`, `Notification`, `AppState` |
| `clobster.market_state` | `MarketStatus`, `Outcome`, `Market`, `MarketState` |
| `clobster.order_state` | `OrderSide`, `OrderType`, `OrderStatus`, `OrderRequest`, `Order`, `OrderState` |
| `clobster.orderbook_state` | `PriceLevel`, `OrderBookDepth`, `OrderBookStats`, `OrderBookState` |
| `clobster.portfolio_state` | `Balance`, `Position`, `PortfolioState` |
| `clobster.store` | `ActionKind`, `Action`, `Store` |
| `clobster.input` | `Key`, `KeyCode`, `Modifiers`, `KeyEvent`, `MouseEvent`, `InputEvent` |
| `clobster.events` | `Event`, `AppEvent`, `PriceUpdate`, `OrderUpdate`, `Trade`, `EventConfig` |
| `clobster.handler` | `EventHandler` |
| `clobster.converter` | `convert_market`, `convert_order`, `convert_orderbook` and helpers |
| `clobster.client` | `RateLimiter`, `ApiClient`, `ApiClientBuilder`, `HttpTransport` |

## Configuration

`Config` bundles the API, UI, key-binding and theme settings. `Config.load`
reads a TOML file; with no path it uses `config.toml` in `config_dir()`.
When the file does not exist the defaults are returned.

```python
from clobster.config import Config

config = Config.load_or_default()
print(config.api.base_url)          # https://clob.polymarket.com
print(config.keybindings.quit)      # q
config.save("settings/config.toml") # creates settings/ if needed
```

Missing keys take their default values and unknown keys are ignored. A file
that is not valid TOML, or a value of the wrong type, raises `ConfigError`
from `clobster.errors`. `Config.from_dict` and `Config.to_dict` convert to
and from plain mappings.

## Order books

```python
from decimal import Decimal
from clobster.orderbook_state import OrderBookDepth, PriceLevel, OrderBookStats

book = OrderBookDepth("market_1", "token_1")
book.bids = [PriceLevel(Decimal("0.50"), Decimal("100"))]
book.asks = [PriceLevel(Decimal("0.52"), Decimal("80")),
             PriceLevel(Decimal("0.53"), Decimal("120"))]

book.mid_price()                 # Decimal('0.51')
book.vwap_buy(Decimal("100"))    # Decimal('0.522')
book.imbalance(10)               # (bid volume - ask volume) / total volume
OrderBookStats.from_orderbook(book, 10)
```

Bids are expected best (highest) first and asks best (lowest) first. If a
requested size exceeds the available liquidity, `vwap_buy` and `vwap_sell`
return the average price of the part that can be filled. All prices and
sizes are `decimal.Decimal`.

## The store

`Store` holds the application, market, order, order book and portfolio
state. `Store.reduce(action)` applies an `Action` synchronously:

```python
from clobster.app_state import View
from clobster.store import Action, ActionKind, Store

store = Store()
store.reduce(Action(ActionKind.SET_VIEW, View.ORDERS))
store.reduce(Action(ActionKind.SCROLL_DOWN))
```

`Store.dispatch(action)` puts the action on the queue given as `actions`
(for example an `asyncio.Queue` or `queue.Queue`); it raises `ChannelError`
when there is no queue or the queue is full.

## Key bindings

`InputEvent.matches` understands bindings such as `"q"`, `"Enter"`,
`"Ctrl+q"` or `"F5"`. Modifiers must match exactly; single letters match
either case. `EventHandler` turns `KeyEvent`s and `MouseEvent`s (or `Event`s
wrapping them) into `Action`s according to the key bindings and the view and
input mode recorded by `EventHandler.update_store_snapshot(store)`.

## API client

`ApiClient` fetches markets and order books through a transport (by default
`HttpTransport`, JSON over HTTP with the standard library) and converts the
responses with `clobster.converter`. Every request passes through a
`RateLimiter` token bucket of 10 requests per second.

```python
import asyncio
from clobster.client import ApiClient

async def main():
    client = ApiClient()
    markets = await client.fetch_markets()
    book = await client.fetch_orderbook(markets[0].outcomes[0].token_id)
    print(book.mid_price())

asyncio.run(main())
```

## Errors

Every error raised by the package derives from `ClobsterError`.
`ClobsterError.is_recoverable()` tells whether retrying makes sense
(`NetworkError`, `RateLimitedError` and `ChannelError`).

## What this package does not do

- It draws no terminal screens and has no command to start; it provides the
  state, input handling and data models such an interface is built on.
- It does not read keys from a terminal itself: `EventHandler` works on
  `KeyEvent` and `MouseEvent` values supplied by the caller.
- It cannot trade. `ApiClient.is_authenticated()` is always false, so
  `fetch_orders`, `fetch_positions`, `fetch_portfolio`, `place_order` and
  `cancel_order` raise `AuthError`; a private key given to `ApiClient` or
  `ApiClientBuilder` is not used.