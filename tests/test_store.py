import asyncio
from decimal import Decimal

import pytest

from clobster.app_state import AppMode, InputMode, Notification, View
from clobster.errors import ChannelError
from clobster.market_state import Market, MarketStatus
from clobster.order_state import Order, OrderSide, OrderStatus, OrderType
from clobster.orderbook_state import OrderBookDepth, PriceLevel
from clobster.portfolio_state import PortfolioState, Position
from clobster.store import Action, ActionKind, Store


def make_order(order_id, status=OrderStatus.OPEN):
    return Order(
        id=order_id,
        market_id="m1",
        market_question="q",
        token_id="t1",
        outcome_name="Yes",
        side=OrderSide.BUY,
        order_type=OrderType.LIMIT,
        price=Decimal("0.5"),
        original_size=Decimal("10"),
        remaining_size=Decimal("10"),
        filled_size=Decimal("0"),
        status=status,
    )


def make_position(token_id):
    return Position(
        market_id="m1",
        market_question="q",
        token_id=token_id,
        outcome_name="Yes",
        size=Decimal("1"),
        avg_price=Decimal("0.5"),
        current_price=Decimal("0.6"),
    )


def make_markets():
    return [
        Market(id="a", question="Rain tomorrow?"),
        Market(id="b", question="Snow tomorrow?", status=MarketStatus.CLOSED),
        Market(id="c", question="Sun tomorrow?"),
    ]


def test_dispatch_queues_action():
    actions = asyncio.Queue()
    store = Store(actions)
    action = Action(ActionKind.QUIT)
    store.dispatch(action)
    assert actions.get_nowait() == action


def test_dispatch_without_channel_raises():
    with pytest.raises(ChannelError):
        Store().dispatch(Action(ActionKind.REFRESH_MARKETS))


def test_dispatch_full_channel_raises():
    store = Store(asyncio.Queue(maxsize=1))
    store.dispatch(Action(ActionKind.REFRESH_ALL))
    with pytest.raises(ChannelError):
        store.dispatch(Action(ActionKind.REFRESH_ALL))


def test_navigation_actions():
    store = Store()
    store.reduce(Action(ActionKind.SET_VIEW, View.ORDERS))
    store.reduce(Action(ActionKind.SET_INPUT_MODE, InputMode.SEARCH))
    store.reduce(Action(ActionKind.SET_APP_MODE, AppMode.TRADE))
    assert store.app.current_view is View.ORDERS
    assert store.app.input_mode is InputMode.SEARCH
    assert store.app.mode is AppMode.TRADE


def test_markets_loaded_and_selection():
    store = Store()
    store.reduce(Action(ActionKind.LOAD_MARKETS))
    assert store.markets.loading is True
    markets = make_markets()
    store.reduce(Action(ActionKind.MARKETS_LOADED, markets))
    assert store.markets.markets == markets
    assert store.markets.loading is False
    assert store.markets.last_updated is not None and store.markets.last_updated.tzinfo

    store.reduce(Action(ActionKind.SELECT_MARKET, 1))
    assert store.markets.selected_index == 1
    store.reduce(Action(ActionKind.SELECT_MARKET, len(markets)))
    assert store.markets.selected_index == 1


def test_market_filters():
    store = Store()
    store.reduce(Action(ActionKind.SEARCH_MARKETS, "rain"))
    store.reduce(Action(ActionKind.FILTER_MARKETS, MarketStatus.ACTIVE))
    assert store.markets.search_query == "rain"
    assert store.markets.status_filter is MarketStatus.ACTIVE
    store.reduce(Action(ActionKind.CLEAR_MARKET_FILTER))
    assert store.markets.search_query is None
    assert store.markets.status_filter is None


def test_order_lifecycle():
    store = Store()
    first, second = make_order("a"), make_order("b")
    store.reduce(Action(ActionKind.ORDERS_LOADED, [first]))
    assert store.orders.orders == [first]
    assert store.orders.last_updated is not None and store.orders.last_updated.tzinfo

    store.reduce(Action(ActionKind.CANCEL_ORDER, "a"))
    assert store.orders.loading is True
    store.reduce(Action(ActionKind.ORDER_PLACED, second))
    assert store.orders.orders == [first, second]
    assert store.orders.loading is False

    store.reduce(Action(ActionKind.ORDER_CANCELLED, "a"))
    assert [o.id for o in store.orders.orders] == ["b"]

    store.reduce(Action(ActionKind.SELECT_ORDER, 0))
    assert store.orders.selected_order() is second
    store.reduce(Action(ActionKind.SELECT_ORDER, 3))
    assert store.orders.selected_index == 0


def test_portfolio_actions():
    store = Store()
    loaded = PortfolioState(positions=[make_position("t1")], loading=True)
    store.reduce(Action(ActionKind.PORTFOLIO_LOADED, loaded))
    assert store.portfolio is loaded
    assert store.portfolio.loading is False

    store.reduce(Action(ActionKind.LOAD_POSITIONS))
    assert store.portfolio.loading is True
    positions = [make_position("t2"), make_position("t3")]
    store.reduce(Action(ActionKind.POSITIONS_LOADED, positions))
    assert store.portfolio.positions == positions
    assert store.portfolio.loading is False


def test_orderbook_actions():
    store = Store()
    book = OrderBookDepth("m1", "t1", bids=[PriceLevel(Decimal("0.5"), Decimal("10"))])
    store.reduce(Action(ActionKind.LOAD_ORDER_BOOK, "t1"))
    assert store.orderbooks.loading is True
    store.reduce(Action(ActionKind.ORDER_BOOK_ERROR, "boom"))
    assert store.orderbooks.error == "boom"
    assert store.orderbooks.loading is False

    store.reduce(Action(ActionKind.ORDER_BOOK_LOADED, book))
    assert store.orderbooks.get_book("t1") is book
    assert store.orderbooks.error is None

    store.reduce(Action(ActionKind.SELECT_ORDER_BOOK, "t1"))
    assert store.orderbooks.selected_book() is book
    store.reduce(Action(ActionKind.CLEAR_ORDER_BOOK, "t1"))
    assert store.orderbooks.get_book("t1") is None

    store.reduce(Action(ActionKind.ORDER_BOOK_LOADED, book))
    store.reduce(Action(ActionKind.CLEAR_ALL_ORDER_BOOKS))
    assert store.orderbooks.books == {}
    assert store.orderbooks.selected_token_id is None


@pytest.mark.parametrize("depth, accepted", [(0, False), (1, True), (100, True), (101, False)])
def test_set_order_book_depth_bounds(depth, accepted):
    store = Store()
    before = store.orderbooks.display_depth
    store.reduce(Action(ActionKind.SET_ORDER_BOOK_DEPTH, depth))
    assert store.orderbooks.display_depth == (depth if accepted else before)


def test_scroll_markets_clamps():
    store = Store()
    markets = make_markets()
    store.reduce(Action(ActionKind.MARKETS_LOADED, markets))
    store.reduce(Action(ActionKind.SCROLL_UP))
    assert store.markets.selected_index == 0
    store.reduce(Action(ActionKind.SCROLL_DOWN))
    assert store.markets.selected_index == 1
    store.reduce(Action(ActionKind.PAGE_DOWN))
    assert store.markets.selected_index == len(markets) - 1
    store.reduce(Action(ActionKind.PAGE_UP))
    assert store.markets.selected_index == 0


def test_scroll_uses_filtered_markets():
    store = Store()
    store.reduce(Action(ActionKind.MARKETS_LOADED, make_markets()))
    store.reduce(Action(ActionKind.FILTER_MARKETS, MarketStatus.ACTIVE))
    store.reduce(Action(ActionKind.GO_TO_BOTTOM))
    assert store.markets.selected_index == store.markets.filtered_count() - 1
    store.reduce(Action(ActionKind.GO_TO_TOP))
    assert store.markets.selected_index == 0


def test_scroll_empty_list_selects_zero():
    store = Store()
    store.reduce(Action(ActionKind.SET_VIEW, View.ORDERS))
    store.reduce(Action(ActionKind.SCROLL_DOWN))
    assert store.orders.selected_index == 0


def test_scroll_positions_and_other_views():
    store = Store()
    positions = [make_position("a"), make_position("b")]
    store.reduce(Action(ActionKind.POSITIONS_LOADED, positions))
    store.reduce(Action(ActionKind.SET_VIEW, View.POSITIONS))
    store.reduce(Action(ActionKind.GO_TO_BOTTOM))
    assert store.portfolio.current_position() is positions[-1]

    store.reduce(Action(ActionKind.SET_VIEW, View.SETTINGS))
    store.reduce(Action(ActionKind.GO_TO_TOP))
    assert store.portfolio.selected_position == len(positions) - 1
    assert store.markets.selected_index is None


def test_ui_and_status_actions():
    store = Store()
    store.reduce(Action(ActionKind.TOGGLE_HELP))
    assert store.app.show_help is True
    store.reduce(Action(ActionKind.TOGGLE_HELP))
    assert store.app.show_help is False

    note = Notification.info("hello")
    store.reduce(Action(ActionKind.SHOW_NOTIFICATION, note))
    assert store.app.notification == note
    store.reduce(Action(ActionKind.DISMISS_NOTIFICATION))
    assert store.app.notification is None

    store.reduce(Action(ActionKind.REFRESH_ORDER_BOOK, "t1"))
    assert store.app.loading is True
    store.reduce(Action(ActionKind.SET_ERROR, "failed"))
    assert store.app.error == "failed"
    assert store.app.loading is False
    store.reduce(Action(ActionKind.CLEAR_ERROR))
    assert store.app.error is None

    store.reduce(Action(ActionKind.SET_CONNECTED, True))
    store.reduce(Action(ActionKind.SET_LOADING, True))
    assert store.app.connected is True
    assert store.app.loading is True

    store.reduce(Action(ActionKind.QUIT))
    assert store.app.should_quit is True