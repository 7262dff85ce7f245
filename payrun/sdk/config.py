"""Configuration management for Pay Run.

Configuration is split into two files:

1. settings.json - Machine-specific settings
   - data_dir: custom data directory (roster.json lives there)
   - default_schedules: category -> schedule descriptor for new hires

2. schedules.yaml - User-registered payment schedules
   - schedules: list of descriptors beyond the built-ins

Config directory resolution:
1. PAY_RUN_CONFIG_PATH environment variable (if set)
2. ~/.config/pay-run/ (XDG_CONFIG_HOME fallback)

Data directory resolution:
1. settings.json "data_dir" key
2. XDG_DATA_HOME/pay-run/ or ~/.local/share/pay-run/
"""

import json
import os
from pathlib import Path
from typing import Any, List

import yaml


APP_NAME = "pay-run"
SETTINGS_FILENAME = "settings.json"
SCHEDULES_FILENAME = "schedules.yaml"
ROSTER_FILENAME = "roster.json"


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Resolution order:
    1. PAY_RUN_CONFIG_PATH environment variable
    2. ~/.config/pay-run/ (XDG_CONFIG_HOME)
    """
    env_path = os.environ.get("PAY_RUN_CONFIG_PATH")
    if env_path:
        return Path(env_path)

    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(xdg_config_home) / APP_NAME


def get_settings_path() -> Path:
    """Get the path to settings.json (may not exist yet)."""
    return get_config_dir() / SETTINGS_FILENAME


def load_settings() -> dict:
    """Load machine-specific settings.

    Returns:
        Settings dictionary (empty dict if file doesn't exist)
    """
    settings_file = get_settings_path()

    if not settings_file.exists():
        return {}

    with open(settings_file, "r") as f:
        return json.load(f)


def save_settings(settings: dict) -> Path:
    """Save machine-specific settings.

    Returns:
        Path to the saved settings file
    """
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    settings_file = config_dir / SETTINGS_FILENAME

    with open(settings_file, "w") as f:
        json.dump(settings, f, indent=2)

    return settings_file


def get_setting(key: str, default: Any = None) -> Any:
    """Get a single setting value, or default if unset."""
    return load_settings().get(key, default)


def set_setting(key: str, value: Any) -> Path:
    """Set a single setting value and save."""
    settings = load_settings()
    settings[key] = value
    return save_settings(settings)


def get_data_path() -> Path:
    """Get the data directory path (created if doesn't exist).

    Uses settings.json "data_dir" when set, else XDG_DATA_HOME/pay-run/.
    """
    custom = get_setting("data_dir")
    if custom:
        data_path = Path(custom).expanduser()
    else:
        xdg_data_home = os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share")
        data_path = Path(xdg_data_home) / APP_NAME
    data_path.mkdir(parents=True, exist_ok=True)
    return data_path


def get_roster_path() -> Path:
    """Get the path to roster.json (may not exist yet)."""
    return get_data_path() / ROSTER_FILENAME


def get_schedules_path() -> Path:
    """Get the path to schedules.yaml (may not exist yet)."""
    return get_config_dir() / SCHEDULES_FILENAME


def load_schedules() -> List[str]:
    """Load user-registered schedule descriptors.

    Returns:
        List of descriptors (empty if the file doesn't exist)
    """
    path = get_schedules_path()
    if not path.exists():
        return []

    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}

    return [str(s) for s in data.get("schedules", [])]


def save_schedules(schedules: List[str]) -> Path:
    """Save user-registered schedule descriptors.

    Returns:
        Path to the saved schedules file
    """
    path = get_schedules_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        yaml.dump({"schedules": sorted(schedules)}, f, default_flow_style=False, sort_keys=False)

    return path
