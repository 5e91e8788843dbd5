"""Browser widget: a list view driven entirely by bus events."""

from __future__ import annotations

from typing import Any

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.message import Message
from textual.widgets import Label, ListItem, ListView, Static

from .. import nav_id, topics
from ..events import EventBus
from ..messenger import report
from ..payloads import ContentItem, validate


class BrowserItem(ListItem):
    """A list item representing one content entry."""

    def __init__(self, item: ContentItem) -> None:
        super().__init__()
        self.item = item

    def compose(self) -> ComposeResult:
        marker = "▸ " if self.item.is_container else "  "
        yield Label(f"{marker}{self.item.title}")


class Browser(Vertical):
    """Lists the content of the current location for one navigation context.

    The widget owns no cursor state: key presses reach the navigator as bus
    events and the highlight follows ``nav.pos_changed``/``nav.navigated_to``.
    """

    DEFAULT_CSS = """
    Browser {
        width: 1fr;
        height: 1fr;
    }

    Browser > #browser-header {
        background: $primary-background;
        color: $accent;
        text-style: bold;
        padding: 0 1;
        height: 1;
    }

    Browser > #browser-list-view {
        height: 1fr;
    }

    Browser ListItem {
        padding: 0 1;
    }

    Browser ListItem.--highlight {
        background: $accent;
    }
    """

    class ItemChosen(Message):
        """Message emitted when a non-container item is selected."""

        def __init__(self, item: ContentItem, multi: bool = False) -> None:
            super().__init__()
            self.item = item
            self.multi = multi

    def __init__(self, bus: EventBus, ctx_id: str = "text", **kwargs) -> None:
        super().__init__(**kwargs)
        self.bus = bus
        self.ctx_id = ctx_id
        self.owner = f"ui.{ctx_id}"
        self._items: list[ContentItem] = []

    def compose(self) -> ComposeResult:
        yield Static("", id="browser-header")
        yield ListView(id="browser-list-view")

    @property
    def list_view(self) -> ListView:
        return self.query_one("#browser-list-view", ListView)

    @property
    def items(self) -> list[ContentItem]:
        return list(self._items)

    def on_mount(self) -> None:
        # Keys go to the app bindings, which publish nav.* events
        self.list_view.can_focus = False

        handlers = {
            topics.CONTENT_LOADED: self._on_content_loaded,
            topics.CONTENT_ERROR: self._on_content_error,
            topics.NAV_NAVIGATED_TO: self._on_navigated_to,
            topics.NAV_POS_CHANGED: self._on_pos_changed,
            topics.NAV_SELECTED: self._on_selected,
            topics.NAV_MULTISELECTED: self._on_selected,
            topics.NAV_CONTEXT_CLEANED: self._on_context_cleaned,
        }
        for event_name, handler in handlers.items():
            self.bus.subscribe(event_name, handler, self.owner)

        self.open()

    def on_unmount(self) -> None:
        self.bus.cleanup(self.owner)
        self.bus.publish(topics.NAV_CONTEXT_POP, {"ctx_id": self.ctx_id})

    def open(self) -> None:
        """Push this widget's context and request the root listing."""
        self.bus.publish(topics.NAV_CONTEXT_PUSH, {"ctx_id": self.ctx_id})
        self.bus.publish(topics.CONTENT_REQUEST, {"ctx_id": self.ctx_id, "nav_id": ""})

    def show_items(self, header: str, items: list[ContentItem]) -> None:
        """Replace the listing."""
        self._items = list(items)
        self.query_one("#browser-header", Static).update(header)

        list_view = self.list_view
        list_view.clear()
        for item in items:
            list_view.append(BrowserItem(item))
        if items:
            list_view.index = 0

    def _accepts(self, event_name: str, data: Any) -> bool:
        """Validate an incoming payload and check it targets this context."""
        if not validate(event_name, data):
            report(self.bus, "error", self.owner, f"Received invalid data for '{event_name}':", repr(data))
            return False
        return data.get("ctx_id", data.get("old_ctx")) == self.ctx_id

    def _set_cursor(self, position: int) -> None:
        if 1 <= position <= len(self._items):
            self.list_view.index = position - 1

    def _on_content_loaded(self, event_name: str, data: Any) -> None:
        if not self._accepts(event_name, data):
            return

        self.show_items(nav_id.location(data["nav_id"]) or data["title"], data["items"])
        self.bus.publish(
            topics.NAV_NAVIGATE_TO,
            {
                "ctx_id": self.ctx_id,
                "nav_id": data["nav_id"],
                "columns": 1,
                "position": 0,
                "total_items": len(data["items"]),
            },
        )

    def _on_content_error(self, event_name: str, data: Any) -> None:
        if not self._accepts(event_name, data):
            return
        self.app.notify(data["msg"], severity="error")

    def _on_navigated_to(self, event_name: str, data: Any) -> None:
        if not self._accepts(event_name, data):
            return

        if data["trigger"] == "back":
            # Reload the listing for the restored location
            self.bus.publish(
                topics.CONTENT_REQUEST, {"ctx_id": self.ctx_id, "nav_id": data["nav_id"]}
            )
        self._set_cursor(data["position"])

    def _on_pos_changed(self, event_name: str, data: Any) -> None:
        if not self._accepts(event_name, data):
            return
        self._set_cursor(data["position"])

    def _on_selected(self, event_name: str, data: Any) -> None:
        if not self._accepts(event_name, data):
            return

        position = data["position"]
        if not 1 <= position <= len(self._items):
            return
        item = self._items[position - 1]

        if item.is_container and event_name == topics.NAV_SELECTED:
            self.bus.publish(
                topics.CONTENT_REQUEST, {"ctx_id": self.ctx_id, "nav_id": item.nav_id}
            )
        else:
            self.post_message(self.ItemChosen(item, multi=event_name == topics.NAV_MULTISELECTED))

    def _on_context_cleaned(self, event_name: str, data: Any) -> None:
        if not self._accepts(event_name, data):
            return
        # Context dropped underneath us, start over from the root
        report(self.bus, "warn", self.owner, f"Context '{self.ctx_id}' was cleaned up, reopening.")
        self.show_items("", [])
        self.open()

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        """Handle mouse selection by moving the cursor and selecting."""
        index = self.list_view.index
        if index is None:
            return
        self.bus.publish(topics.NAV_SET_STATE, {"ctx_id": self.ctx_id, "position": index + 1})
        self.bus.publish(topics.NAV_SELECT)
