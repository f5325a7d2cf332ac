"""Turns terminal input into store actions, depending on the current state."""

from __future__ import annotations

from dataclasses import dataclass

from clobster.app_state import InputMode, View
from clobster.config import KeyBindings
from clobster.events import Event, EventKind
from clobster.input import InputEvent, KeyCode, KeyEvent, KeyEventKind, MouseEvent, MouseEventKind
from clobster.store import Action, ActionKind, Store


@dataclass(frozen=True)
class _StoreSnapshot:
    input_mode: InputMode
    current_view: View
    selected_order_id: str | None
    selected_order_can_cancel: bool


_MOUSE_ACTIONS = {
    MouseEventKind.SCROLL_UP: ActionKind.SCROLL_UP,
    MouseEventKind.SCROLL_DOWN: ActionKind.SCROLL_DOWN,
}

_RAW_NAVIGATION = {
    KeyCode.PAGE_UP: ActionKind.PAGE_UP,
    KeyCode.PAGE_DOWN: ActionKind.PAGE_DOWN,
    KeyCode.HOME: ActionKind.GO_TO_TOP,
    KeyCode.END: ActionKind.GO_TO_BOTTOM,
}

_TO_NORMAL = Action(ActionKind.SET_INPUT_MODE, InputMode.NORMAL)


class EventHandler:
    """Maps key and mouse events to actions using key bindings and a state snapshot."""

    def __init__(self, keybindings: KeyBindings | None = None) -> None:
        self.keybindings = keybindings if keybindings is not None else KeyBindings()
        self._snapshot: _StoreSnapshot | None = None

    def update_store_snapshot(self, store: Store) -> None:
        """Record the parts of ``store`` that decide how keys are handled."""
        order = store.orders.selected_order()
        self._snapshot = _StoreSnapshot(
            input_mode=store.app.input_mode,
            current_view=store.app.current_view,
            selected_order_id=order.id if order else None,
            selected_order_can_cancel=order.can_cancel() if order else False,
        )

    def handle_event(self, event: Event) -> Action | None:
        """The action for a terminal event, if it produces one."""
        if event.kind is EventKind.KEY:
            return self.handle_key(event.payload)
        if event.kind is EventKind.MOUSE:
            return self.handle_mouse(event.payload)
        return None

    def handle_key(self, key: KeyEvent) -> Action | None:
        """The action for a key press; releases and repeats give none."""
        if key.kind is not KeyEventKind.PRESS or self._snapshot is None:
            return None
        snapshot = self._snapshot
        if snapshot.input_mode is InputMode.NORMAL:
            return self._normal_mode(key, snapshot)
        # Insert, command and search modes all leave on Esc or Enter.
        if key.key.code in (KeyCode.ESC, KeyCode.ENTER):
            return _TO_NORMAL
        return None

    def handle_mouse(self, mouse: MouseEvent) -> Action | None:
        """Scroll actions for the mouse wheel."""
        kind = _MOUSE_ACTIONS.get(mouse.kind)
        return Action(kind) if kind else None

    def _normal_mode(self, key: KeyEvent, snapshot: _StoreSnapshot) -> Action | None:
        event = InputEvent.from_key_event(key)
        kb = self.keybindings
        code = key.key.code

        global_bindings = (
            (kb.quit, Action(ActionKind.QUIT)),
            (kb.help, Action(ActionKind.TOGGLE_HELP)),
            (kb.refresh, Action(ActionKind.REFRESH_ALL)),
            (kb.markets, Action(ActionKind.SET_VIEW, View.MARKETS)),
            (kb.orders, Action(ActionKind.SET_VIEW, View.ORDERS)),
            (kb.positions, Action(ActionKind.SET_VIEW, View.POSITIONS)),
            (kb.portfolio, Action(ActionKind.SET_VIEW, View.PORTFOLIO)),
        )
        for binding, action in global_bindings:
            if event.matches(binding):
                return action

        if event.matches(kb.up) or code is KeyCode.UP:
            return Action(ActionKind.SCROLL_UP)
        if event.matches(kb.down) or code is KeyCode.DOWN:
            return Action(ActionKind.SCROLL_DOWN)
        if code in _RAW_NAVIGATION:
            return Action(_RAW_NAVIGATION[code])

        if event.matches(kb.search):
            return Action(ActionKind.SET_INPUT_MODE, InputMode.SEARCH)

        view = snapshot.current_view
        if view in (View.MARKETS, View.MARKET_DETAIL):
            if event.matches(kb.select):
                return Action(ActionKind.SET_VIEW, View.MARKET_DETAIL)
            if event.matches(kb.place_order):
                return Action(ActionKind.SET_VIEW, View.ORDER_ENTRY)
        elif view in (View.ORDERS, View.ORDER_ENTRY):
            if (
                event.matches(kb.cancel_order)
                and snapshot.selected_order_can_cancel
                and snapshot.selected_order_id is not None
            ):
                return Action(ActionKind.CANCEL_ORDER, snapshot.selected_order_id)
        elif view in (View.POSITIONS, View.PORTFOLIO):
            if event.matches(kb.select):
                return Action(ActionKind.SET_VIEW, View.MARKET_DETAIL)
        return None