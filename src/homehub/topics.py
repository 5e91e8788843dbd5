"""Event names shared between components."""

# Navigation requests
NAV_UP = "nav.up"
NAV_DOWN = "nav.down"
NAV_LEFT = "nav.left"
NAV_RIGHT = "nav.right"
NAV_BACK = "nav.back"
NAV_NAVIGATE_TO = "nav.navigate_to"
NAV_SELECT = "nav.select"
NAV_MULTISELECT = "nav.multiselect"
NAV_SET_STATE = "nav.set_state"
NAV_CONTEXT_PUSH = "nav.context_push"
NAV_CONTEXT_POP = "nav.context_pop"
NAV_CONTEXT_CLEANUP = "nav.context_cleanup"

# Navigation notifications
NAV_POS_CHANGED = "nav.pos_changed"
NAV_NAVIGATED_TO = "nav.navigated_to"
NAV_SELECTED = "nav.selected"
NAV_MULTISELECTED = "nav.multiselected"
NAV_CONTEXT_PUSHED = "nav.context_pushed"
NAV_CONTEXT_POPPED = "nav.context_popped"
NAV_CONTEXT_CLEANED = "nav.context_cleaned"
NAV_STATE_CORRUPTED = "nav.state_corrupted"

# Content
CONTENT_REQUEST = "content.request"
CONTENT_LOADED = "content.loaded"
CONTENT_ERROR = "content.error"

# Diagnostics: msg.<level>.<component>
MSG_NAMESPACE = "msg"
MSG_ALL = "msg.*"


def msg_topic(level: str, component: str) -> str:
    """Build the diagnostic event name for a level and component."""
    return f"{MSG_NAMESPACE}.{level}.{component}"


__all__ = [
    "NAV_UP",
    "NAV_DOWN",
    "NAV_LEFT",
    "NAV_RIGHT",
    "NAV_BACK",
    "NAV_NAVIGATE_TO",
    "NAV_SELECT",
    "NAV_MULTISELECT",
    "NAV_SET_STATE",
    "NAV_CONTEXT_PUSH",
    "NAV_CONTEXT_POP",
    "NAV_CONTEXT_CLEANUP",
    "NAV_POS_CHANGED",
    "NAV_NAVIGATED_TO",
    "NAV_SELECTED",
    "NAV_MULTISELECTED",
    "NAV_CONTEXT_PUSHED",
    "NAV_CONTEXT_POPPED",
    "NAV_CONTEXT_CLEANED",
    "NAV_STATE_CORRUPTED",
    "CONTENT_REQUEST",
    "CONTENT_LOADED",
    "CONTENT_ERROR",
    "MSG_NAMESPACE",
    "MSG_ALL",
    "msg_topic",
]
