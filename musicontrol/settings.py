# Settings: env vars for deployment knobs, YAML for everything else.

import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional

import yaml

log = logging.getLogger(__name__)

CONFIG_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "config", "musicontrol.yaml")

DEFAULT_REFRESH_INTERVAL = 1.0
DEFAULT_MANUAL_PLAYER_TYPES = ("Spotify", "VLC", "Rhythmbox")


@dataclass
class Settings:
    refresh_interval: float = DEFAULT_REFRESH_INTERVAL
    # None = wait for player commands as long as they take
    command_timeout: Optional[float] = None
    manual_player_types: List[str] = field(default_factory=lambda: list(DEFAULT_MANUAL_PLAYER_TYPES))
    # None = detect with platform.system()
    platform: Optional[str] = None


def load_config(path: str) -> dict:
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        log.warning("Config load error (%s): %s", path, e)
        return {}
    if not isinstance(data, dict):
        log.warning("Config %s is not a mapping, ignoring it", path)
        return {}
    return data


def _positive_float(data: dict, key: str, default):
    value = data.get(key, default)
    if value is None:
        return default
    try:
        value = float(value)
    except (TypeError, ValueError):
        log.warning("Config: %s must be a number, got %r", key, value)
        return default
    if value <= 0:
        log.warning("Config: %s must be positive, got %r", key, value)
        return default
    return value


def load_settings(path: Optional[str] = None) -> Settings:
    path = path or os.environ.get("MUSICONTROL_CONFIG", CONFIG_PATH)
    data = load_config(path)

    types = data.get("manual_player_types")
    if types is None:
        types = list(DEFAULT_MANUAL_PLAYER_TYPES)
    elif not isinstance(types, list) or not all(isinstance(t, str) and t for t in types):
        log.warning("Config: manual_player_types must be a list of names, got %r", types)
        types = list(DEFAULT_MANUAL_PLAYER_TYPES)

    return Settings(
        refresh_interval=_positive_float(data, "refresh_interval", DEFAULT_REFRESH_INTERVAL),
        command_timeout=_positive_float(data, "command_timeout", None),
        manual_player_types=types,
        platform=os.environ.get("MUSICONTROL_PLATFORM") or data.get("platform") or None,
    )
