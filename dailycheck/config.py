"""User configuration for DailyCheck.

Configuration lives in ``~/.config/dailycheck/config.toml``. The ``[rules]``
table holds default thresholds; settings loaded from the backend or edited
with ``dailycheck rules set`` are kept in the local store and take
precedence.
"""

import logging
from pathlib import Path
from typing import Optional

import toml
from pydantic import ValidationError

from dailycheck.models import RuleSettings

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "dailycheck"
CONFIG_PATH = CONFIG_DIR / "config.toml"
DB_PATH = CONFIG_DIR / "dailycheck.db"

DEFAULT_TRADER = "trader_01"
DEFAULT_ACCOUNT_NUMBER = 5440722
DEFAULT_BASE_URL = "https://ftmo-api-dev.buso.asia"


def load_config(config_path: Path = CONFIG_PATH) -> Optional[dict]:
    """Load the configuration file.

    Args:
        config_path: Path to the TOML file.

    Returns:
        Config dict, or None if the file is missing or unreadable.
    """
    if not config_path.exists():
        return None

    try:
        return toml.load(config_path)
    except (toml.TomlDecodeError, OSError) as e:
        logger.warning("Could not read %s: %s", config_path, e)
        return None


def create_template_config(config_path: Path = CONFIG_PATH) -> Path:
    """Write a template configuration file.

    Returns:
        Path of the written file.
    """
    config_path.parent.mkdir(parents=True, exist_ok=True)

    defaults = RuleSettings().model_dump(exclude={"allowed_sessions"})
    template = {
        "account": {
            "trader": DEFAULT_TRADER,
            "account_number": DEFAULT_ACCOUNT_NUMBER,
        },
        "backend": {
            "base_url": DEFAULT_BASE_URL,
            "timeout": 10.0,
        },
        "rules": defaults,
    }

    with open(config_path, "w") as f:
        toml.dump(template, f)

    return config_path


def get_trader(config: dict) -> str:
    """Get the configured trader id."""
    return str(config.get("account", {}).get("trader", DEFAULT_TRADER))


def get_account_number(config: dict) -> int:
    """Get the configured backend account number."""
    return int(config.get("account", {}).get("account_number", DEFAULT_ACCOUNT_NUMBER))


def settings_from_config(config: dict) -> RuleSettings:
    """Build settings from the ``[rules]`` table over the built-in defaults.

    Args:
        config: Configuration dictionary.

    Returns:
        RuleSettings; invalid ``[rules]`` tables fall back to the defaults.
    """
    rules = config.get("rules", {})
    try:
        return RuleSettings.model_validate({**RuleSettings().model_dump(), **rules})
    except ValidationError as e:
        logger.warning("Ignoring invalid [rules] table: %s", e)
        return RuleSettings()
