"""Shared fixtures for homehub tests."""

import pytest

from homehub.events import EventBus
from homehub.navigation import Navigator


class Recorder:
    """Bus listener that remembers every event it receives."""

    def __init__(self) -> None:
        self.events: list[tuple[str, object]] = []

    def __call__(self, event_name, data) -> None:
        self.events.append((event_name, data))

    def of(self, event_name: str) -> list:
        """Payloads received for ``event_name``, oldest first."""
        return [data for name, data in self.events if name == event_name]

    def names(self) -> list[str]:
        return [name for name, _ in self.events]

    def clear(self) -> None:
        self.events.clear()


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def recorder(bus):
    """Record all navigation notifications and diagnostics."""
    rec = Recorder()
    bus.subscribe("nav.*", rec, "recorder")
    bus.subscribe("msg.*", rec, "recorder")
    return rec


@pytest.fixture
def navigator(bus):
    nav = Navigator(bus)
    nav.attach()
    yield nav
    nav.detach()


@pytest.fixture
def browse_dir(tmp_path):
    """Create a small directory tree to browse."""
    root = tmp_path / "media"
    root.mkdir()

    (root / "movies").mkdir()
    (root / "movies" / "alien.mkv").write_text("")
    (root / "movies" / "brazil.mkv").write_text("")
    (root / "shows").mkdir()
    (root / "notes.txt").write_text("hello\n")
    (root / "Zebra.mp3").write_text("")
    (root / ".hidden").write_text("")

    return root
