from decimal import Decimal

import pytest

from clobster.app_state import InputMode, View
from clobster.config import KeyBindings
from clobster.events import Event, EventKind
from clobster.handler import EventHandler
from clobster.input import Key, KeyCode, KeyEvent, KeyEventKind, Modifiers, MouseEvent, MouseEventKind
from clobster.order_state import Order, OrderSide, OrderStatus, OrderType
from clobster.store import Action, ActionKind, Store


def make_order(order_id, status):
    return Order(
        id=order_id,
        market_id="market_1",
        market_question="Question?",
        token_id="token_1",
        outcome_name="Yes",
        side=OrderSide.BUY,
        order_type=OrderType.LIMIT,
        price=Decimal("0.50"),
        original_size=Decimal("10"),
        remaining_size=Decimal("10"),
        filled_size=Decimal("0"),
        status=status,
    )


def handler_for(store, keybindings=None):
    handler = EventHandler(keybindings)
    handler.update_store_snapshot(store)
    return handler


def char(c, **mods):
    return KeyEvent(Key.char(c), Modifiers(**mods))


@pytest.fixture
def store():
    return Store()


def test_no_snapshot_gives_no_action():
    assert EventHandler().handle_key(char("q")) is None


def test_release_is_ignored(store):
    handler = handler_for(store)
    event = KeyEvent(Key.char("q"), kind=KeyEventKind.RELEASE)
    assert handler.handle_key(event) is None


@pytest.mark.parametrize(
    "c, expected",
    [
        ("q", Action(ActionKind.QUIT)),
        ("?", Action(ActionKind.TOGGLE_HELP)),
        ("r", Action(ActionKind.REFRESH_ALL)),
        ("1", Action(ActionKind.SET_VIEW, View.MARKETS)),
        ("2", Action(ActionKind.SET_VIEW, View.ORDERS)),
        ("3", Action(ActionKind.SET_VIEW, View.POSITIONS)),
        ("4", Action(ActionKind.SET_VIEW, View.PORTFOLIO)),
        ("k", Action(ActionKind.SCROLL_UP)),
        ("j", Action(ActionKind.SCROLL_DOWN)),
        ("/", Action(ActionKind.SET_INPUT_MODE, InputMode.SEARCH)),
    ],
)
def test_global_bindings(store, c, expected):
    assert handler_for(store).handle_key(char(c)) == expected


@pytest.mark.parametrize(
    "code, kind",
    [
        (KeyCode.UP, ActionKind.SCROLL_UP),
        (KeyCode.DOWN, ActionKind.SCROLL_DOWN),
        (KeyCode.PAGE_UP, ActionKind.PAGE_UP),
        (KeyCode.PAGE_DOWN, ActionKind.PAGE_DOWN),
        (KeyCode.HOME, ActionKind.GO_TO_TOP),
        (KeyCode.END, ActionKind.GO_TO_BOTTOM),
    ],
)
def test_navigation_keys(store, code, kind):
    assert handler_for(store).handle_key(KeyEvent(Key(code))) == Action(kind)


def test_markets_view_actions(store):
    handler = handler_for(store)
    assert handler.handle_key(KeyEvent(Key(KeyCode.ENTER))) == Action(
        ActionKind.SET_VIEW, View.MARKET_DETAIL
    )
    assert handler.handle_key(char("o")) == Action(ActionKind.SET_VIEW, View.ORDER_ENTRY)
    assert handler.handle_key(char("x")) is None


def test_positions_view_select(store):
    store.app.current_view = View.POSITIONS
    handler = handler_for(store)
    assert handler.handle_key(KeyEvent(Key(KeyCode.ENTER))) == Action(
        ActionKind.SET_VIEW, View.MARKET_DETAIL
    )
    assert handler.handle_key(char("o")) is None


def test_settings_view_has_no_specific_actions(store):
    store.app.current_view = View.SETTINGS
    assert handler_for(store).handle_key(KeyEvent(Key(KeyCode.ENTER))) is None


def test_cancel_selected_open_order(store):
    store.app.current_view = View.ORDERS
    store.orders.orders = [make_order("o1", OrderStatus.OPEN)]
    store.orders.selected_index = 0
    action = handler_for(store).handle_key(char("x"))
    assert action == Action(ActionKind.CANCEL_ORDER, "o1")


def test_cannot_cancel_filled_order(store):
    store.app.current_view = View.ORDERS
    store.orders.orders = [make_order("o1", OrderStatus.FILLED)]
    store.orders.selected_index = 0
    assert handler_for(store).handle_key(char("x")) is None


def test_cancel_without_selection(store):
    store.app.current_view = View.ORDERS
    store.orders.orders = [make_order("o1", OrderStatus.OPEN)]
    assert handler_for(store).handle_key(char("x")) is None


def test_snapshot_is_taken_at_update_time(store):
    handler = handler_for(store)
    store.app.input_mode = InputMode.SEARCH
    assert handler.handle_key(char("q")) == Action(ActionKind.QUIT)
    handler.update_store_snapshot(store)
    assert handler.handle_key(char("q")) is None


@pytest.mark.parametrize("mode", [InputMode.INSERT, InputMode.COMMAND, InputMode.SEARCH])
def test_editing_modes_leave_on_esc_or_enter(store, mode):
    store.app.input_mode = mode
    handler = handler_for(store)
    to_normal = Action(ActionKind.SET_INPUT_MODE, InputMode.NORMAL)
    assert handler.handle_key(KeyEvent(Key(KeyCode.ESC))) == to_normal
    assert handler.handle_key(KeyEvent(Key(KeyCode.ENTER))) == to_normal
    assert handler.handle_key(char("q")) is None


def test_custom_keybindings(store):
    handler = handler_for(store, KeyBindings(quit="Ctrl+c"))
    assert handler.handle_key(char("c", ctrl=True)) == Action(ActionKind.QUIT)
    assert handler.handle_key(char("q")) is None


def test_mouse_scrolling():
    handler = EventHandler()
    assert handler.handle_mouse(MouseEvent(MouseEventKind.SCROLL_UP)) == Action(ActionKind.SCROLL_UP)
    assert handler.handle_mouse(MouseEvent(MouseEventKind.SCROLL_DOWN)) == Action(
        ActionKind.SCROLL_DOWN
    )
    assert handler.handle_mouse(MouseEvent(MouseEventKind.DOWN)) is None


def test_handle_event_dispatches_by_kind(store):
    handler = handler_for(store)
    assert handler.handle_event(Event(EventKind.KEY, char("q"))) == Action(ActionKind.QUIT)
    assert handler.handle_event(
        Event(EventKind.MOUSE, MouseEvent(MouseEventKind.SCROLL_UP))
    ) == Action(ActionKind.SCROLL_UP)
    assert handler.handle_event(Event(EventKind.RESIZE, (80, 24))) is None
    assert handler.handle_event(Event(EventKind.TICK)) is None