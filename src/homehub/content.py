"""Local directory content source (``file://`` navigation ids)."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from . import nav_id, topics
from .events import EventBus
from .messenger import report
from .payloads import ContentItem, is_content_request

PREFIX = "file"


def list_directory(directory: Path, show_hidden: bool = False) -> list[ContentItem]:
    """List a directory as content items, folders first, then by name."""
    entries = []
    for path in directory.iterdir():
        if not show_hidden and path.name.startswith("."):
            continue
        try:
            is_dir = path.is_dir()
        except PermissionError:
            continue
        entries.append((path, is_dir))

    entries.sort(key=lambda e: (not e[1], e[0].name.lower()))
    return [
        ContentItem(nav_id=nav_id.encode(PREFIX, str(path)), title=path.name, is_container=is_dir)
        for path, is_dir in entries
    ]


class DirectoryAdapter:
    """Answers ``content.request`` for ``file://`` ids and the root request."""

    def __init__(
        self,
        bus: EventBus,
        root: Path,
        show_hidden: bool = False,
        owner: str = "content.file",
    ) -> None:
        self.bus = bus
        self.root = root
        self.show_hidden = show_hidden
        self.owner = owner

    def attach(self) -> None:
        self.bus.subscribe(topics.CONTENT_REQUEST, self.on_request, self.owner)

    def detach(self) -> None:
        self.bus.cleanup(self.owner)

    def resolve(self, requested: str) -> Path | None:
        """Map a requested navigation id to a directory, or None if not ours."""
        if requested == "":
            return self.root
        prefix, location = nav_id.decode(requested)
        if prefix != PREFIX or not location:
            return None
        return Path(location)

    def on_request(self, event_name: str, data: Any) -> None:
        if not is_content_request(data):
            report(self.bus, "error", "content", f"Received invalid data to '{event_name}' request:", repr(data))
            return

        directory = self.resolve(data["nav_id"])
        if directory is None:
            return

        ctx_id = data["ctx_id"]
        resolved_id = nav_id.encode(PREFIX, str(directory))
        try:
            items = list_directory(directory, self.show_hidden)
        except OSError as exc:
            report(self.bus, "warn", "content", f"Cannot list {directory}:", str(exc))
            self.bus.publish(
                topics.CONTENT_ERROR,
                {"ctx_id": ctx_id, "nav_id": resolved_id, "msg": str(exc)},
            )
            return

        self.bus.publish(
            topics.CONTENT_LOADED,
            {
                "ctx_id": ctx_id,
                "nav_id": resolved_id,
                "title": directory.name or str(directory),
                "items": items,
            },
        )
