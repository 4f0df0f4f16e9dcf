"""Configuration loading for PropJournal.

Settings live in ``~/.config/propjournal/config.toml``::

    [journal]
    user_id = "trader-1"
    db_path = "~/.config/propjournal/propjournal.db"
    mirror_dir = "~/.config/propjournal/offline"

    [consistency]
    account_size = 100000
    consistency_percentage = 30
    profit_target = 1000
"""

import copy
from pathlib import Path
from typing import Optional

import toml

from propjournal.errors import ConfigError

CONFIG_DIR = Path.home() / ".config" / "propjournal"
CONFIG_PATH = CONFIG_DIR / "config.toml"

DEFAULT_CONFIG: dict = {
    "journal": {
        "user_id": None,
        "db_path": str(CONFIG_DIR / "propjournal.db"),
        "mirror_dir": str(CONFIG_DIR / "offline"),
    },
    "consistency": {
        "account_size": 100000.0,
        "consistency_percentage": 30.0,
        "profit_target": 1000.0,
    },
}


def _merge(base: dict, override: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Optional[Path] = None) -> dict:
    """Load configuration merged over the defaults.

    Args:
        config_path: Config file to read; defaults to CONFIG_PATH.

    Returns:
        Configuration dictionary. Defaults only if the file does not exist.

    Raises:
        ConfigError: If the file exists but cannot be parsed.
    """
    config_path = config_path or CONFIG_PATH
    if not config_path.exists():
        return copy.deepcopy(DEFAULT_CONFIG)

    try:
        user_config = toml.load(config_path)
    except (toml.TomlDecodeError, OSError) as e:
        raise ConfigError(f"Cannot read config file {config_path}: {e}") from e

    return _merge(DEFAULT_CONFIG, user_config)


def get_db_path(config: dict) -> Path:
    return Path(config["journal"]["db_path"]).expanduser()


def get_mirror_dir(config: dict) -> Path:
    return Path(config["journal"]["mirror_dir"]).expanduser()
