"""Diagnostic messages carried over the event bus.

Components report problems by publishing ``msg.<level>.<component>`` events
instead of logging directly. ``Messenger`` listens on ``msg.*`` and hands
each message to the stdlib logger for that component.
"""

from __future__ import annotations

import logging
from typing import Any

from . import topics
from .events import EventBus
from .payloads import is_message

logger = logging.getLogger(__name__)

LEVELS = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "verbose": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
}


def report(bus: EventBus, level: str, component: str, *parts: str) -> None:
    """Publish a diagnostic message for ``component``."""
    bus.publish(topics.msg_topic(level, component), {"msg": list(parts)})


def parse_topic(event_name: str) -> tuple[str, str]:
    """Split ``msg.<level>.<component>`` into (level, component)."""
    _, _, rest = event_name.partition(".")
    level, _, component = rest.partition(".")
    return level, component or "unknown"


def format_message(msg: str | list[str], separator: str = " ") -> str:
    if isinstance(msg, str):
        return msg
    return separator.join(msg)


class Messenger:
    """Forwards bus diagnostics to ``logging``."""

    def __init__(self, bus: EventBus, owner: str = "messenger") -> None:
        self.bus = bus
        self.owner = owner

    def attach(self) -> None:
        self.bus.subscribe(topics.MSG_ALL, self.log, self.owner)

    def detach(self) -> None:
        self.bus.cleanup(self.owner)

    def log(self, event_name: str, data: Any) -> None:
        level, component = parse_topic(event_name)

        levelno = LEVELS.get(level)
        if levelno is None:
            logger.error("Got invalid message level %r in %s", level, event_name)
            return

        if not is_message(data):
            logger.error("Got invalid message data for %s: %r", event_name, data)
            return

        text = format_message(data["msg"], data.get("separator", " "))
        logging.getLogger(f"homehub.{component}").log(levelno, "[%s] %s", component, text)
