"""Entry point for HomeHub."""

import logging
import sys

from .app import run_app
from .config import Config
from .messenger import LEVELS


def main() -> int:
    """Main entry point for HomeHub."""
    try:
        config = Config.load()

        # The terminal belongs to the TUI, so log to a file
        logging.basicConfig(
            filename=config.get_log_path(),
            level=LEVELS.get(config.log_level, logging.INFO),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

        run_app(config)

        return 0
    except KeyboardInterrupt:
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
