"""User preferences with JSON persistence.

Preferences are stored at:
    ~/.config/MiniTimer/settings.json

Set ``MINITIMER_HOME`` to move the whole directory (sounds included).
Only preferences live here.  The countdown itself is never saved.

Usage::

    settings = load_settings()
    settings.alarm_volume = 40
    save_settings(settings)
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, asdict
from pathlib import Path


logger = logging.getLogger(__name__)

APP_HOME = Path(
    os.environ.get("MINITIMER_HOME") or Path.home() / ".config" / "MiniTimer"
)
SETTINGS_PATH = APP_HOME / "settings.json"


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── timer ─────────────────────────────────────────────────────────
    default_minutes: int = 25

    # ── alarm ─────────────────────────────────────────────────────────
    alarm_source: str = "/alarm-sound.mp3"
    alarm_volume: int = 50                 # 0-100

    # ── window ────────────────────────────────────────────────────────
    fullscreen: bool = False


def load_settings() -> Settings:
    """Load settings from disk, falling back to defaults."""
    try:
        if SETTINGS_PATH.exists():
            data = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
            return Settings(**_valid_fields(data))
    except (OSError, ValueError, TypeError, AttributeError) as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", SETTINGS_PATH, exc)
    return Settings()


def _valid_fields(data: dict) -> dict:
    """Keep known keys whose value matches the type of the field default."""
    defaults = asdict(Settings())
    valid = {}
    for key, value in data.items():
        if key not in defaults:
            continue
        expected = type(defaults[key])
        # bool is an int subclass; keep the two apart
        if isinstance(value, expected) and (expected is bool) == isinstance(value, bool):
            valid[key] = value
        else:
            logger.warning("Ignoring invalid setting %s=%r, using default", key, value)
    return valid


def save_settings(settings: Settings) -> None:
    """Write settings to disk as JSON."""
    SETTINGS_PATH.parent.mkdir(parents=True, exist_ok=True)
    SETTINGS_PATH.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
