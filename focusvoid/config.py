"""Application configuration management."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from focusvoid.models import AppConfig, TrackingMode

log = logging.getLogger(__name__)

_CONFIG_DIR = Path.home() / ".config" / "focusvoid"
_CONFIG_FILE = _CONFIG_DIR / "config.json"


def load_config() -> AppConfig:
    """Load config from disk, returning defaults if none exists."""
    if _CONFIG_FILE.exists():
        try:
            data = json.loads(_CONFIG_FILE.read_text())
            return AppConfig(**data)
        except (json.JSONDecodeError, TypeError, ValidationError) as exc:
            log.warning("Ignoring unreadable config %s: %s", _CONFIG_FILE, exc)
    return AppConfig()


def save_config(config: AppConfig) -> Path:
    """Write config to disk. Returns the config file path."""
    _CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    _CONFIG_FILE.write_text(config.model_dump_json(indent=2))
    return _CONFIG_FILE


def set_default_mode(mode: TrackingMode) -> AppConfig:
    """Choose whether new sessions start in word or time mode."""
    config = load_config()
    config = config.model_copy(update={"default_mode": mode})
    save_config(config)
    return config


def set_default_target(mode: TrackingMode, value: int) -> AppConfig:
    """Set the default target for ``mode``.

    Raises ``pydantic.ValidationError`` when ``value`` is outside the
    allowed range for that mode.
    """
    field = "default_target_words" if mode == TrackingMode.WORDS else "default_target_minutes"
    data = load_config().model_dump()
    data[field] = value
    config = AppConfig.model_validate(data)
    save_config(config)
    return config


def reset_config() -> AppConfig:
    """Restore the built-in defaults and save them."""
    config = AppConfig()
    save_config(config)
    return config
