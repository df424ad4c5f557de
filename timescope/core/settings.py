"""Persistent viewer settings helpers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


SETTINGS_DIR = Path.home() / ".config" / "timescope"
SETTINGS_PATH = SETTINGS_DIR / "settings.json"


def load_settings(path: Path | None = None) -> dict:
    """Load settings from disk.

    Returns an empty dict if settings file does not exist or contains invalid JSON.
    """
    path = path or SETTINGS_PATH
    if not path.exists():
        return {}

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return {}

    return data if isinstance(data, dict) else {}


def save_settings(data: dict, path: Path | None = None) -> None:
    """Persist settings to disk atomically."""
    path = path or SETTINGS_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(".tmp")
    tmp_path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
    tmp_path.replace(path)


def get_setting(key: str, default: Any = None, path: Path | None = None) -> Any:
    """Read a setting value with a fallback default."""
    return load_settings(path).get(key, default)


def set_setting(key: str, value: Any, path: Path | None = None) -> None:
    """Set and persist a single setting key."""
    settings = load_settings(path)
    settings[key] = value
    save_settings(settings, path)
