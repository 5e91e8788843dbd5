"""Navigation state management: context stack, back-history and cursors.

Every browsing surface owns a context. Contexts form a stack and only the
top one receives movement and navigation requests. Each context keeps an
ordered history of navigation ids, and each navigation id maps to the cursor
state last seen at that location.

State read back from the tables is validated before use. A corrupted entry
is purged from every history it appears in, and contexts left without
history are dropped from the stack.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable

from . import nav_id as nav_id_codec
from . import payloads, topics
from .events import EventBus
from .messenger import report

logger = logging.getLogger(__name__)

COMPONENT = "navigation"


@dataclass
class NavState:
    """Cursor and grid layout for one location."""

    columns: int
    position: int
    total_items: int


def is_valid_state(state: Any) -> bool:
    """Check the structural invariants of a stored navigation state."""
    return (
        isinstance(state, NavState)
        and payloads.is_int(state.columns)
        and payloads.is_int(state.position)
        and payloads.is_int(state.total_items)
        and state.columns >= 1
        and state.position >= 1
        and state.total_items >= 0
        and (state.total_items == 0 or state.position <= state.total_items)
    )


def wrap_position(position: int, delta: int, total_items: int) -> int:
    """Move a 1-based position by ``delta``, wrapping around the list."""
    if total_items == 0:
        return 1
    return ((position - 1 + delta) % total_items) + 1


class Navigator:
    """Navigation state machine driven by ``nav.*`` events."""

    def __init__(self, bus: EventBus, owner: str = COMPONENT) -> None:
        self.bus = bus
        self.owner = owner
        self._table: dict[str, NavState] = {}
        self._histories: dict[str, list[str]] = {}
        self._stack: list[str] = []
        self._handlers: dict[str, Callable[[Any], Any]] = {
            topics.NAV_UP: lambda _: self.up(),
            topics.NAV_DOWN: lambda _: self.down(),
            topics.NAV_LEFT: lambda _: self.left(),
            topics.NAV_RIGHT: lambda _: self.right(),
            topics.NAV_BACK: lambda _: self.back(),
            topics.NAV_SELECT: lambda _: self.select(),
            topics.NAV_MULTISELECT: lambda _: self.multiselect(),
            topics.NAV_NAVIGATE_TO: lambda data: self.navigate_to(
                data["ctx_id"],
                data["nav_id"],
                data["columns"],
                data["position"],
                data["total_items"],
            ),
            topics.NAV_CONTEXT_PUSH: lambda data: self.context_push(data["ctx_id"]),
            topics.NAV_CONTEXT_POP: lambda data: self.context_pop(data["ctx_id"]),
            topics.NAV_CONTEXT_CLEANUP: lambda data: self.context_cleanup(data["ctx_id"]),
            topics.NAV_SET_STATE: lambda data: self.set_state(
                data["ctx_id"], data.get("position")
            ),
        }

    # Bus wiring

    def attach(self) -> None:
        """Subscribe to every navigation request event."""
        for event_name in self._handlers:
            self.bus.subscribe(event_name, self._handle, self.owner)

    def detach(self) -> None:
        """Drop every subscription made by ``attach``."""
        self.bus.cleanup(self.owner)

    def _handle(self, event_name: str, data: Any) -> None:
        handler = self._handlers.get(event_name)
        if handler is None:
            self._report("warn", "Got unhandled event:", event_name)
            return

        if not payloads.validate(event_name, data):
            self._report_invalid(event_name, data)
            return

        try:
            handler(data)
        except Exception as exc:
            logger.debug("Handler for %s failed", event_name, exc_info=True)
            self._report("error", f"Error handling '{event_name}':", repr(exc))

    def _report(self, level: str, *parts: str) -> None:
        report(self.bus, level, COMPONENT, *parts)

    def _report_invalid(self, event_name: str, data: Any) -> None:
        self._report("error", f"Received invalid data to '{event_name}' request:", repr(data))

    # Read access

    @property
    def active_context(self) -> str | None:
        """The context on top of the stack, or None when the stack is empty."""
        return self._stack[-1] if self._stack else None

    @property
    def stack(self) -> tuple[str, ...]:
        """Context ids from bottom to top."""
        return tuple(self._stack)

    def history(self, ctx_id: str) -> tuple[str, ...]:
        """Navigation ids visited in ``ctx_id``, oldest first."""
        return tuple(self._histories.get(ctx_id, ()))

    def state(self, nav_id: str) -> NavState | None:
        """Get a copy of the stored state for ``nav_id``."""
        state = self._table.get(nav_id)
        return replace(state) if isinstance(state, NavState) else None

    def current_nav_id(self) -> str | None:
        """The location on top of the active context's history."""
        ctx_id = self.active_context
        if ctx_id is None:
            return None
        history = self._histories.get(ctx_id)
        return history[-1] if history else None

    # Contexts

    def context_push(self, ctx_id: str) -> bool:
        """Push ``ctx_id`` onto the stack with an empty history.

        Pushing a context that is suspended lower in the stack adds a new
        entry on top and drops the history the suspended entry had.
        """
        if not payloads.is_context({"ctx_id": ctx_id}):
            self._report_invalid(topics.NAV_CONTEXT_PUSH, {"ctx_id": ctx_id})
            return False

        old_ctx = self.active_context or ""
        if old_ctx == ctx_id:
            self._report("debug", f"Context '{ctx_id}' is already active.")
            return False

        if ctx_id in self._stack:
            self._report("debug", f"Context '{ctx_id}' is pushed again, resetting its history.")
            self._discard_history(ctx_id)
        self._histories[ctx_id] = []
        self._stack.append(ctx_id)

        self.bus.publish(topics.NAV_CONTEXT_PUSHED, {"old_ctx": old_ctx, "new_ctx": ctx_id})
        return True

    def context_pop(self, ctx_id: str) -> bool:
        """Remove the active context ``ctx_id`` and everything it owns."""
        return self._drop_context(ctx_id, topics.NAV_CONTEXT_POPPED)

    def context_cleanup(self, ctx_id: str) -> bool:
        """Same as ``context_pop`` but announced as a cleanup."""
        return self._drop_context(ctx_id, topics.NAV_CONTEXT_CLEANED)

    def _drop_context(self, ctx_id: str, announce: str) -> bool:
        if not self._stack:
            self._report("warn", f"Cannot remove context '{ctx_id}' - stack is empty.")
            return False

        if self._stack[-1] != ctx_id:
            self._report(
                "error",
                f"Cannot remove context '{ctx_id}' - it is not the active context:",
                self._stack[-1],
            )
            return False

        self._stack.pop()
        self._discard_history(ctx_id)
        if ctx_id in self._stack:
            # A lower entry of the same context starts over
            self._histories[ctx_id] = []
        new_ctx = self.active_context or ""

        self.bus.publish(announce, {"old_ctx": ctx_id, "new_ctx": new_ctx})

        if not self._stack:
            self._report("debug", "All navigation contexts have been removed - no active context.")
        return True

    def _discard_history(self, ctx_id: str) -> None:
        """Delete a context's history and the states no other history uses."""
        history = self._histories.pop(ctx_id, [])
        still_used = {nav_id for other in self._histories.values() for nav_id in other}
        for nav_id in set(history) - still_used:
            self._table.pop(nav_id, None)

    # History

    def navigate_to(
        self,
        ctx_id: str,
        nav_id: str,
        columns: int,
        position: int,
        total_items: int,
    ) -> bool:
        """Record arrival at ``nav_id`` in the active context.

        Args:
            ctx_id: Context making the request; must be the active one.
            nav_id: Location being entered.
            columns: Grid width of the listing.
            position: 1-based cursor, or 0 to keep the previous cursor when it
                still fits inside ``total_items``.
            total_items: Number of entries in the listing.
        """
        request = {
            "ctx_id": ctx_id,
            "nav_id": nav_id,
            "columns": columns,
            "position": position,
            "total_items": total_items,
        }
        if not payloads.is_navigate_to(request):
            self._report_invalid(topics.NAV_NAVIGATE_TO, request)
            return False

        if ctx_id not in self._histories:
            self._report(
                "error",
                f"Received 'nav.navigate_to' for context '{ctx_id}' which was never pushed.",
            )
            return False

        if self.active_context != ctx_id:
            self._report(
                "error",
                "Received 'nav.navigate_to' request for context different from the current one:",
                ctx_id,
                self.active_context or "",
            )
            return False

        old_state = self._table.get(nav_id)
        if old_state is not None and not is_valid_state(old_state):
            self._purge(nav_id)
            old_state = None
            if self.active_context != ctx_id:
                self._report(
                    "warn",
                    f"Context '{ctx_id}' was removed while recovering '{nav_id}'.",
                )
                return False

        if position == 0:
            if old_state is not None and old_state.position <= total_items:
                position = old_state.position
            else:
                position = 1

        self._table[nav_id] = NavState(columns, position, total_items)

        history = self._histories[ctx_id]
        if history and history[-1] == nav_id:
            self._report("debug", f"Refreshing current location '{nav_id}'.")
        else:
            history.append(nav_id)

        self.bus.publish(
            topics.NAV_NAVIGATED_TO,
            {
                "ctx_id": ctx_id,
                "nav_id": nav_id,
                "columns": columns,
                "position": position,
                "total_items": total_items,
                "trigger": "navigate_to",
            },
        )
        return True

    def back(self) -> bool:
        """Return to the previous location of the active context."""
        ctx_id = self.active_context
        if ctx_id is None:
            self._report("warn", "Got 'nav.back' event, outside any navigation context.")
            return False

        history = self._histories.get(ctx_id, [])
        while len(history) >= 2:
            nav_id = history[-2]
            state = self._table.get(nav_id)

            if is_valid_state(state):
                history.pop()
                self.bus.publish(
                    topics.NAV_NAVIGATED_TO,
                    {
                        "ctx_id": ctx_id,
                        "nav_id": nav_id,
                        "columns": state.columns,
                        "position": state.position,
                        "total_items": state.total_items,
                        "trigger": "back",
                    },
                )
                return True

            self._report(
                "error",
                f"Tried navigating back to '{nav_id}', but state is corrupted:",
                repr(state),
            )
            self._purge(nav_id)

            if self.active_context != ctx_id:
                return False
            history = self._histories.get(ctx_id, [])

        self._report("debug", f"Ignoring 'nav.back' in context '{ctx_id}' - already at root.")
        return False

    # Cursor

    def up(self) -> bool:
        return self._move("up", lambda state: -state.columns)

    def down(self) -> bool:
        return self._move("down", lambda state: state.columns)

    def left(self) -> bool:
        return self._move("left", lambda state: -1, needs_columns=True)

    def right(self) -> bool:
        return self._move("right", lambda state: 1, needs_columns=True)

    def _move(
        self,
        direction: str,
        delta: Callable[[NavState], int],
        needs_columns: bool = False,
    ) -> bool:
        current = self._current()
        if current is None:
            return False
        ctx_id, _, state = current

        if needs_columns and state.columns <= 1:
            self._report("debug", f"Ignoring 'nav.{direction}' - single column context")
            return False

        if state.total_items == 0:
            self._report("debug", "Cannot navigate", direction, "- no items in list")
            return False

        old_position = state.position
        state.position = wrap_position(old_position, delta(state), state.total_items)
        if state.position == old_position:
            return False

        self.bus.publish(
            topics.NAV_POS_CHANGED,
            {"ctx_id": ctx_id, "position": state.position, "old_position": old_position},
        )
        return True

    def set_state(self, ctx_id: str, position: int | None = None) -> bool:
        """Override the cursor of a context's current location.

        The context does not have to be active. Without ``position`` the
        current cursor is announced again unchanged.
        """
        request: dict[str, Any] = {"ctx_id": ctx_id}
        if position is not None:
            request["position"] = position
        if not payloads.is_set_state(request):
            self._report_invalid(topics.NAV_SET_STATE, request)
            return False

        history = self._histories.get(ctx_id)
        if not history:
            self._report("error", f"Cannot set state - context '{ctx_id}' has no history.")
            return False

        nav_id = history[-1]
        state = self._table.get(nav_id)
        if not is_valid_state(state):
            self._purge(nav_id)
            return False

        old_position = state.position
        if position is not None:
            upper = state.total_items or 1
            if not 1 <= position <= upper:
                self._report(
                    "error",
                    f"Cannot set position {position} in '{nav_id}' - expected 1..{upper}.",
                )
                return False
            state.position = position

        self.bus.publish(
            topics.NAV_POS_CHANGED,
            {"ctx_id": ctx_id, "position": state.position, "old_position": old_position},
        )
        return True

    # Selection

    def select(self) -> bool:
        return self._announce_selection(topics.NAV_SELECTED)

    def multiselect(self) -> bool:
        return self._announce_selection(topics.NAV_MULTISELECTED)

    def _announce_selection(self, event_name: str) -> bool:
        current = self._current()
        if current is None:
            return False
        ctx_id, nav_id, state = current

        if state.total_items == 0:
            self._report("debug", f"Ignoring selection in '{nav_id}' - no items in list")
            return False

        self.bus.publish(
            event_name,
            {
                "ctx_id": ctx_id,
                "nav_id": nav_id_codec.location(nav_id),
                "position": state.position,
            },
        )
        return True

    # Internals

    def _current(self) -> tuple[str, str, NavState] | None:
        """Get (ctx_id, nav_id, state) for the active location, if usable."""
        ctx_id = self.active_context
        if ctx_id is None:
            self._report("warn", "Navigation stack is empty")
            return None

        history = self._histories.get(ctx_id)
        if not history:
            self._report("warn", "Navigation context is empty:", ctx_id)
            return None

        nav_id = history[-1]
        state = self._table.get(nav_id)
        if not is_valid_state(state):
            self._purge(nav_id)
            return None
        return ctx_id, nav_id, state

    def _purge(self, nav_id: str) -> None:
        """Remove a corrupted state and every history reference to it."""
        self._report("warn", "Cleaning up corrupted navigation state:", nav_id)

        self._table.pop(nav_id, None)

        emptied: list[str] = []
        for ctx_id, history in self._histories.items():
            if nav_id not in history:
                continue
            history[:] = [entry for entry in history if entry != nav_id]
            if not history:
                emptied.append(ctx_id)

        for ctx_id in emptied:
            del self._histories[ctx_id]
            if ctx_id in self._stack:
                top = len(self._stack) - 1 - self._stack[::-1].index(ctx_id)
                del self._stack[top]
            if ctx_id in self._stack:
                self._histories[ctx_id] = []

        for ctx_id in emptied:
            self.bus.publish(
                topics.NAV_CONTEXT_CLEANED,
                {"old_ctx": ctx_id, "new_ctx": self.active_context or ""},
            )
        self.bus.publish(topics.NAV_STATE_CORRUPTED, {"nav_id": nav_id})
