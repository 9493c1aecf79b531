"""
Configuration management for SmartNotes.

Uses XDG base directories:
- Config: ~/.config/smartnotes/config.toml
- Data: ~/.local/share/smartnotes/ (or SMARTNOTES_HOME)
"""

from pathlib import Path
from typing import Any
import logging
import os

# XDG defaults
DEFAULT_CONFIG_HOME = Path.home() / ".config"
DEFAULT_DATA_HOME = Path.home() / ".local" / "share"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_config_dir() -> Path:
    """Get the config directory (XDG_CONFIG_HOME/smartnotes)."""
    base = Path(os.environ.get("XDG_CONFIG_HOME", DEFAULT_CONFIG_HOME))
    return base / "smartnotes"


def get_smartnotes_home() -> Path:
    """Get the data directory (XDG_DATA_HOME/smartnotes or SMARTNOTES_HOME)."""
    if env_home := os.environ.get("SMARTNOTES_HOME"):
        return Path(env_home)
    base = Path(os.environ.get("XDG_DATA_HOME", DEFAULT_DATA_HOME))
    return base / "smartnotes"


def get_config_path() -> Path:
    """Get the path to config.toml."""
    return get_config_dir() / "config.toml"


def get_db_path(config: dict[str, Any] | None = None) -> Path:
    """Get the path to notes.db, honouring [storage] path."""
    if config:
        if custom := config.get("storage", {}).get("path"):
            return Path(custom).expanduser()
    return get_smartnotes_home() / "notes.db"


def ensure_dirs() -> None:
    """Ensure all required directories exist."""
    get_config_dir().mkdir(parents=True, exist_ok=True)
    get_smartnotes_home().mkdir(parents=True, exist_ok=True)


def load_config() -> dict[str, Any]:
    """
    Load configuration from config.toml.

    Returns default config if file doesn't exist. Sections present in the
    file override the matching default sections key by key.
    """
    config_path = get_config_path()
    config = get_default_config()

    if not config_path.exists():
        return config

    # Lazy import tomli only when needed
    import tomli

    with open(config_path, "rb") as f:
        loaded = tomli.load(f)

    for section, values in loaded.items():
        if isinstance(values, dict) and isinstance(config.get(section), dict):
            config[section].update(values)
        else:
            config[section] = values
    return config


def get_default_config() -> dict[str, Any]:
    """Return default configuration."""
    return {
        "smartnotes": {
            "home": str(get_smartnotes_home()),
        },
        "storage": {
            "path": str(get_smartnotes_home() / "notes.db"),
        },
        "display": {
            "color": True,
            "list_limit": 50,
        },
        "logging": {
            "level": "WARNING",
        },
    }


def configure_logging(config: dict[str, Any] | None = None) -> None:
    """Apply logging.basicConfig using the [logging] level."""
    config = config or get_default_config()
    level_name = str(config.get("logging", {}).get("level", "WARNING")).upper()
    logging.basicConfig(
        format=LOG_FORMAT,
        level=getattr(logging, level_name, logging.WARNING),
    )
