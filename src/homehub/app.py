"""Main Textual application for HomeHub."""

from dataclasses import fields

from textual.app import App, ComposeResult
from textual.widgets import Footer

from . import topics
from .config import Config
from .content import DirectoryAdapter
from .events import EventBus
from .messenger import Messenger
from .navigation import Navigator
from .widgets import Banner, Browser

# Keybind action -> (event published, footer label, shown in footer)
KEY_ACTIONS = {
    "up": (topics.NAV_UP, "Up", False),
    "down": (topics.NAV_DOWN, "Down", False),
    "left": (topics.NAV_LEFT, "Left", False),
    "right": (topics.NAV_RIGHT, "Right", False),
    "back": (topics.NAV_BACK, "Back", True),
    "select": (topics.NAV_SELECT, "Open", True),
    "multiselect": (topics.NAV_MULTISELECT, "Mark", True),
}


class HomeHubApp(App):
    """HomeHub - Content Browser TUI."""

    TITLE = "HomeHub"
    SUB_TITLE = "Content Browser"

    CSS = """
    #browser {
        height: 1fr;
        border: solid $accent;
    }
    """

    def __init__(self, config: Config, bus: EventBus | None = None) -> None:
        super().__init__()
        self.config = config
        self.bus = bus if bus is not None else EventBus()
        self.messenger = Messenger(self.bus)
        self.navigator = Navigator(self.bus)
        self.adapter = DirectoryAdapter(
            self.bus, config.root_directory, show_hidden=config.show_hidden
        )

        # Wired before any widget mounts so the first requests are answered
        self.messenger.attach()
        self.navigator.attach()
        self.adapter.attach()

        self._bind_keys()

    def _bind_keys(self) -> None:
        """Bind configured keys to bus publications."""
        for f in fields(self.config.keybinds):
            keys = getattr(self.config.keybinds, f.name)
            if not keys:
                continue
            if f.name == "quit":
                self.bind(",".join(keys), "quit", description="Quit")
                continue
            event_name, label, show = KEY_ACTIONS[f.name]
            self.bind(
                ",".join(keys),
                f"publish('{event_name}')",
                description=label,
                show=show,
            )

    def compose(self) -> ComposeResult:
        yield Banner()
        yield Browser(self.bus, id="browser")
        yield Footer()

    def action_publish(self, event_name: str) -> None:
        """Forward a key press to the bus."""
        self.bus.publish(event_name)

    def on_browser_item_chosen(self, event: Browser.ItemChosen) -> None:
        """Handle selection of a leaf item."""
        verb = "Marked" if event.multi else "Selected"
        self.notify(f"{verb}: {event.item.title}")

    async def on_unmount(self) -> None:
        """Detach components when app closes."""
        self.adapter.detach()
        self.navigator.detach()
        self.messenger.detach()


def run_app(config: Config) -> None:
    """Run the HomeHub application."""
    app = HomeHubApp(config)
    app.run()
