"""Optional user configuration from ~/.config/postfeed/config.toml."""

import logging
import tomllib
from pathlib import Path

logger = logging.getLogger(__name__)

CONFIG_PATH = Path.home() / ".config" / "postfeed" / "config.toml"

DEFAULTS = {
    "limit": 20,
    "show_subtitle": True,
}


def load() -> dict:
    """Load user config, falling back to defaults for missing keys."""
    config = dict(DEFAULTS)
    if CONFIG_PATH.exists():
        try:
            user_config = tomllib.loads(CONFIG_PATH.read_text(encoding="utf-8"))
            config.update(user_config)
        except (tomllib.TOMLDecodeError, UnicodeDecodeError, OSError) as exc:
            logger.warning("ignoring config %s: %s", CONFIG_PATH, exc)
    return config
