"""
Table preferences.

Data files, seed, default player count and the banner toggle live in a
small JSON file. Command-line flags override whatever is stored.
"""

import json
import logging
from pathlib import Path
from typing import TypedDict

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".deadwood_config.json"
DEFAULT_CONFIG_DIR = Path.home() / ".deadwood"


class Config(TypedDict, total=False):
    """Stored table preferences."""
    board_path: str | None  # None for the bundled board
    cards_path: str | None  # None for the bundled deck
    seed: int | None
    players: int
    show_banner: bool


DEFAULT_CONFIG: Config = {
    "board_path": None,
    "cards_path": None,
    "seed": None,
    "players": 3,
    "show_banner": True,
}


def get_config_path(config_dir: Path | str = DEFAULT_CONFIG_DIR) -> Path:
    return Path(config_dir) / CONFIG_FILENAME


def load_config(config_dir: Path | str = DEFAULT_CONFIG_DIR) -> Config:
    """
    Stored preferences layered over the defaults.

    A missing or unreadable file yields the defaults; keys the table does
    not know are dropped.
    """
    config = DEFAULT_CONFIG.copy()
    path = get_config_path(config_dir)
    if not path.exists():
        return config

    try:
        saved = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Ignoring config %s: %s", path, e)
        return config

    if isinstance(saved, dict):
        config.update({k: v for k, v in saved.items() if k in DEFAULT_CONFIG})
    return config


def save_config(config: Config, config_dir: Path | str = DEFAULT_CONFIG_DIR) -> bool:
    """Write preferences. Returns False if the file could not be written."""
    path = get_config_path(config_dir)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(config, indent=2), encoding="utf-8")
    except OSError as e:
        logger.warning("Could not save config %s: %s", path, e)
        return False
    return True


def set_show_banner(show: bool, config_dir: Path | str = DEFAULT_CONFIG_DIR) -> None:
    config = load_config(config_dir)
    config["show_banner"] = show
    save_config(config, config_dir)
