"""Payload shapes for bus events and the checks applied at the boundary.

Each request event has a validator registered in ``SCHEMAS``. Components
call ``validate()`` before acting on incoming data and reject anything that
does not match.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Literal, NotRequired, TypedDict

from . import topics


@dataclass(frozen=True)
class ContentItem:
    """One entry in a content listing."""

    nav_id: str
    title: str
    is_container: bool = False


class NavigateToData(TypedDict):
    ctx_id: str
    nav_id: str
    columns: int
    position: int
    total_items: int


class NavigatedToData(NavigateToData):
    trigger: Literal["navigate_to", "back"]


class ContextData(TypedDict):
    ctx_id: str


class ContextChangedData(TypedDict):
    old_ctx: str
    new_ctx: str


class PosChangedData(TypedDict):
    ctx_id: str
    position: int
    old_position: int


class SelectedData(TypedDict):
    ctx_id: str
    nav_id: str
    position: int


class SetStateData(TypedDict):
    ctx_id: str
    position: NotRequired[int]


class StateCorruptedData(TypedDict):
    nav_id: str


class ContentRequestData(TypedDict):
    ctx_id: str
    nav_id: str


class ContentLoadedData(TypedDict):
    ctx_id: str
    nav_id: str
    title: str
    items: list[ContentItem]


class ContentErrorData(TypedDict):
    ctx_id: str
    nav_id: str
    msg: str


class MessageData(TypedDict):
    msg: str | list[str]
    separator: NotRequired[str]


def is_int(value: Any) -> bool:
    """Check for a real integer (bools are rejected)."""
    return isinstance(value, int) and not isinstance(value, bool)


def _is_name(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def is_navigate_to(data: Any) -> bool:
    if not isinstance(data, dict):
        return False
    columns = data.get("columns")
    position = data.get("position")
    total_items = data.get("total_items")
    if not (is_int(columns) and is_int(position) and is_int(total_items)):
        return False
    if columns < 1 or position < 0 or total_items < 0:
        return False
    # 0 means "no preference"; otherwise it must point inside the list
    if total_items == 0:
        in_range = position <= 1
    else:
        in_range = position <= total_items
    return _is_name(data.get("ctx_id")) and _is_name(data.get("nav_id")) and in_range


def is_context(data: Any) -> bool:
    return isinstance(data, dict) and _is_name(data.get("ctx_id"))


def is_set_state(data: Any) -> bool:
    if not is_context(data):
        return False
    return "position" not in data or is_int(data["position"])


def is_content_request(data: Any) -> bool:
    return (
        isinstance(data, dict)
        and _is_name(data.get("ctx_id"))
        and isinstance(data.get("nav_id"), str)
    )


def is_content_loaded(data: Any) -> bool:
    if not is_content_request(data):
        return False
    items = data.get("items")
    return (
        isinstance(data.get("title"), str)
        and isinstance(items, list)
        and all(isinstance(item, ContentItem) for item in items)
    )


def is_content_error(data: Any) -> bool:
    return is_content_request(data) and isinstance(data.get("msg"), str)


def is_navigated_to(data: Any) -> bool:
    return is_navigate_to(data) and data.get("trigger") in ("navigate_to", "back")


def is_pos_changed(data: Any) -> bool:
    return (
        isinstance(data, dict)
        and _is_name(data.get("ctx_id"))
        and is_int(data.get("position"))
        and is_int(data.get("old_position"))
    )


def is_selected(data: Any) -> bool:
    return (
        isinstance(data, dict)
        and _is_name(data.get("ctx_id"))
        and isinstance(data.get("nav_id"), str)
        and is_int(data.get("position"))
    )


def is_context_changed(data: Any) -> bool:
    return (
        isinstance(data, dict)
        and isinstance(data.get("old_ctx"), str)
        and isinstance(data.get("new_ctx"), str)
    )


def is_message(data: Any) -> bool:
    if not isinstance(data, dict):
        return False
    msg = data.get("msg")
    if isinstance(msg, list):
        msg_ok = all(isinstance(part, str) for part in msg)
    else:
        msg_ok = isinstance(msg, str)
    return msg_ok and isinstance(data.get("separator", " "), str)


SCHEMAS: dict[str, Callable[[Any], bool]] = {
    topics.NAV_NAVIGATE_TO: is_navigate_to,
    topics.NAV_CONTEXT_PUSH: is_context,
    topics.NAV_CONTEXT_POP: is_context,
    topics.NAV_CONTEXT_CLEANUP: is_context,
    topics.NAV_SET_STATE: is_set_state,
    topics.NAV_NAVIGATED_TO: is_navigated_to,
    topics.NAV_POS_CHANGED: is_pos_changed,
    topics.NAV_SELECTED: is_selected,
    topics.NAV_MULTISELECTED: is_selected,
    topics.NAV_CONTEXT_PUSHED: is_context_changed,
    topics.NAV_CONTEXT_POPPED: is_context_changed,
    topics.NAV_CONTEXT_CLEANED: is_context_changed,
    topics.CONTENT_REQUEST: is_content_request,
    topics.CONTENT_LOADED: is_content_loaded,
    topics.CONTENT_ERROR: is_content_error,
}


def validate(event_name: str, data: Any) -> bool:
    """Check ``data`` against the schema registered for ``event_name``.

    Events without a registered schema carry no payload and always pass.
    """
    check = SCHEMAS.get(event_name)
    if check is None:
        return True
    return check(data)
