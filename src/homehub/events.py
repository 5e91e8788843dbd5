"""In-process publish/subscribe event bus.

Components never call each other directly. They publish dot-namespaced
events (``nav.navigate_to``) and subscribe to exact names or to whole
namespaces (``nav.*``). Every registration is tracked under an owner name so
a component can drop all of its listeners with a single ``cleanup()`` call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from itertools import count
from typing import Any, Callable, TypedDict

logger = logging.getLogger(__name__)

Callback = Callable[[str, Any], None]

ANONYMOUS = "anonymous"
WILDCARD_SUFFIX = ".*"


class InvalidCallback(TypeError):
    """Raised when subscribing something that cannot be called."""


@dataclass(eq=False)
class Listener:
    """A registered callback and the component that owns it."""

    callback: Callback
    owner: str
    seq: int
    active: bool = True


@dataclass(frozen=True, eq=False)
class Registration:
    """Owner-side record of one subscription, used for bulk teardown."""

    wildcard: bool
    key: str
    listener: Listener


class BusStats(TypedDict):
    """Snapshot of the registry sizes."""

    total_events: int
    total_listeners: int
    total_wildcards: int
    components: dict[str, int]


def split_pattern(pattern: str) -> tuple[bool, str]:
    """Split a subscription pattern into (is_wildcard, key).

    ``"nav.*"`` becomes ``(True, "nav")``; anything else is an exact name.
    """
    if pattern.endswith(WILDCARD_SUFFIX):
        return True, pattern[: -len(WILDCARD_SUFFIX)]
    return False, pattern


def namespaces_of(event_name: str) -> list[str]:
    """Return every namespace a wildcard could be registered under to match.

    ``"a.b.c"`` yields ``["a", "a.b"]``: each prefix that is followed by a
    literal dot in the event name.
    """
    return [event_name[:i] for i, ch in enumerate(event_name) if ch == "."]


class EventBus:
    """Synchronous publish/subscribe registry.

    Dispatch order is fixed: exact listeners first, then wildcard listeners,
    each group in registration order.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}
        self._wildcards: dict[str, list[Listener]] = {}
        self._components: dict[str, list[Registration]] = {}
        self._seq = count()

    def register(self, owner: str) -> None:
        """Start tracking ``owner`` if it is not tracked yet."""
        if owner not in self._components:
            self._components[owner] = []
            logger.debug("Registered component: %s", owner)

    def subscribe(self, pattern: str, callback: Callback, owner: str = ANONYMOUS) -> None:
        """Add a listener for an exact event name or a ``namespace.*`` pattern."""
        if not callable(callback):
            raise InvalidCallback(
                f"Event callback must be callable, got {type(callback).__name__}"
            )

        self.register(owner)

        wildcard, key = split_pattern(pattern)
        listener = Listener(callback=callback, owner=owner, seq=next(self._seq))
        table = self._wildcards if wildcard else self._listeners
        table.setdefault(key, []).append(listener)
        self._components[owner].append(Registration(wildcard, key, listener))

        logger.debug("Added listener for %s from component %s", pattern, owner)

    def unsubscribe(
        self,
        event_name: str,
        callback: Callback | None = None,
        owner: str | None = None,
    ) -> int:
        """Remove listeners for ``event_name`` matching the given filter.

        Args:
            event_name: Exact event name, or a ``namespace.*`` pattern.
            callback: Only remove listeners with this callback.
            owner: Only remove listeners registered by this owner.

        With neither filter, every listener for the name is removed.

        Returns:
            Number of listeners removed.
        """
        wildcard, key = split_pattern(event_name)
        table = self._wildcards if wildcard else self._listeners
        listeners = table.get(key)
        if not listeners:
            return 0

        removed = [
            listener
            for listener in listeners
            if (callback is None or listener.callback == callback)
            and (owner is None or listener.owner == owner)
        ]
        for listener in removed:
            self._detach(table, key, listener)
            self._forget(listener)

        if removed:
            logger.debug("Removed %d listener(s) for %s", len(removed), event_name)
        return len(removed)

    def publish(self, event_name: str, data: Any = None) -> int:
        """Invoke every listener matching ``event_name``.

        Exceptions raised by a listener are logged and swallowed so the
        remaining listeners still run.

        Returns:
            Number of listener invocations attempted.
        """
        snapshot = list(self._listeners.get(event_name, ()))
        snapshot.extend(self._matching_wildcards(event_name))

        called = 0
        for listener in snapshot:
            # Removed by an earlier listener during this dispatch
            if not listener.active:
                continue
            called += 1
            try:
                listener.callback(event_name, data)
            except Exception:
                logger.exception(
                    "Error in listener for %s from component %s",
                    event_name,
                    listener.owner,
                )

        logger.debug("Called %d listeners for %s", called, event_name)
        return called

    def cleanup(self, owner: str) -> int:
        """Remove every listener registered by ``owner`` and stop tracking it.

        Returns:
            Number of listeners removed.
        """
        registrations = self._components.pop(owner, None)
        if registrations is None:
            logger.debug("No listeners found for component %s", owner)
            return 0

        for registration in registrations:
            table = self._wildcards if registration.wildcard else self._listeners
            self._detach(table, registration.key, registration.listener)

        logger.debug(
            "Cleaned up %d listeners for component %s", len(registrations), owner
        )
        return len(registrations)

    def has_subscribers(self, event_name: str) -> bool:
        """Check if anyone is listening to ``event_name``."""
        if self._listeners.get(event_name):
            return True
        return any(self._wildcards.get(ns) for ns in namespaces_of(event_name))

    def stats(self) -> BusStats:
        """Get registry sizes, for debugging."""
        return {
            "total_events": len(self._listeners),
            "total_listeners": sum(len(ls) for ls in self._listeners.values()),
            "total_wildcards": sum(len(ls) for ls in self._wildcards.values()),
            "components": {
                owner: len(registrations)
                for owner, registrations in self._components.items()
            },
        }

    def _matching_wildcards(self, event_name: str) -> list[Listener]:
        """Collect wildcard listeners for ``event_name`` in registration order."""
        matched: list[Listener] = []
        for namespace in namespaces_of(event_name):
            matched.extend(self._wildcards.get(namespace, ()))
        matched.sort(key=lambda listener: listener.seq)
        return matched

    def _detach(self, table: dict[str, list[Listener]], key: str, listener: Listener) -> None:
        listener.active = False
        listeners = table.get(key)
        if listeners is None:
            return
        try:
            listeners.remove(listener)
        except ValueError:
            return
        if not listeners:
            del table[key]

    def _forget(self, listener: Listener) -> None:
        registrations = self._components.get(listener.owner)
        if registrations is None:
            return
        registrations[:] = [r for r in registrations if r.listener is not listener]
