"""Configuration loading and defaults for HomeHub."""

import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Literal


def get_config_dir() -> Path:
    """Get the homehub config directory (XDG-style)."""
    return Path.home() / ".config" / "homehub"


def get_config_path() -> Path:
    """Get the config file path."""
    return get_config_dir() / "config.toml"


def get_default_data_dir() -> Path:
    """Get the default data directory for the log file."""
    return Path.home() / ".local" / "share" / "homehub"


LogLevel = Literal["debug", "info", "warn", "error"]


@dataclass
class KeybindConfig:
    """Keys bound to each navigation request (textual key names)."""

    up: list[str] = field(default_factory=lambda: ["up", "k"])
    down: list[str] = field(default_factory=lambda: ["down", "j"])
    left: list[str] = field(default_factory=lambda: ["h"])
    right: list[str] = field(default_factory=lambda: ["l"])
    back: list[str] = field(default_factory=lambda: ["left", "backspace", "escape"])
    select: list[str] = field(default_factory=lambda: ["right", "enter"])
    multiselect: list[str] = field(default_factory=lambda: ["space"])
    quit: list[str] = field(default_factory=lambda: ["q"])


@dataclass
class Config:
    """Application configuration."""

    root_directory: Path = field(default_factory=Path.home)
    data_directory: Path = field(default_factory=lambda: get_default_data_dir())
    log_level: LogLevel = "info"
    show_hidden: bool = False
    keybinds: KeybindConfig = field(default_factory=KeybindConfig)

    def get_log_path(self) -> Path:
        """Get the log file path based on configured data directory."""
        return self.data_directory / "homehub.log"

    @classmethod
    def load(cls) -> "Config":
        """Load configuration from file or create defaults."""
        config_path = get_config_path()

        # Ensure config directory exists
        config_dir = get_config_dir()
        config_dir.mkdir(parents=True, exist_ok=True)

        if not config_path.exists():
            default_config = cls()
            default_config.data_directory.mkdir(parents=True, exist_ok=True)
            default_config.save()
            return default_config

        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        root_dir = data.get("root_directory", "~")
        root_directory = Path(root_dir).expanduser()

        data_dir = data.get("data_directory", str(get_default_data_dir()))
        data_directory = Path(data_dir).expanduser()

        log_level = data.get("log_level", "info")
        show_hidden = data.get("show_hidden", False)

        # Unknown actions are ignored, missing ones keep their defaults
        keys_data = data.get("keybinds", {})
        defaults = KeybindConfig()
        keybinds = KeybindConfig(
            **{
                f.name: list(keys_data.get(f.name, getattr(defaults, f.name)))
                for f in fields(KeybindConfig)
            }
        )

        config = cls(
            root_directory=root_directory,
            data_directory=data_directory,
            log_level=log_level,
            show_hidden=show_hidden,
            keybinds=keybinds,
        )

        config.data_directory.mkdir(parents=True, exist_ok=True)

        return config

    def save(self) -> None:
        """Save configuration to file."""
        config_path = get_config_path()
        config_path.parent.mkdir(parents=True, exist_ok=True)

        # Build TOML content manually (tomllib is read-only)
        lines = [
            '# HomeHub Configuration',
            '',
            '# Directory browsed by the file:// source',
            f'root_directory = "{self.root_directory}"',
            '',
            '# Directory for the log file',
            '# Default: ~/.local/share/homehub',
            f'data_directory = "{self.data_directory}"',
            '',
            '# One of "debug", "info", "warn", "error"',
            f'log_level = "{self.log_level}"',
            '',
            '# List dotfiles',
            f'show_hidden = {str(self.show_hidden).lower()}',
            '',
            '# Keys for each navigation action',
            '[keybinds]',
        ]

        for f in fields(KeybindConfig):
            keys = ", ".join(f'"{k}"' for k in getattr(self.keybinds, f.name))
            lines.append(f'{f.name} = [{keys}]')

        config_path.write_text("\n".join(lines) + "\n")
