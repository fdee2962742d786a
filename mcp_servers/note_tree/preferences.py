"""Flat JSON files kept next to the note store: settings and reminders."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger("note_tree.preferences")


def _local_time_zone() -> str:
    return datetime.now().astimezone().tzname() or "UTC"


class Preferences(BaseModel):
    """User preferences stored in ``settings.json``."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    theme: str = "dark"
    notebook_font: str = Field(default="sans", alias="notebookFont")
    language: str = "en"
    time_zone: str = Field(default_factory=_local_time_zone, alias="timeZone")


def load_preferences(path: Path) -> Preferences:
    """Read preferences, falling back to defaults if the file is unusable."""
    try:
        return Preferences.model_validate_json(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.info("No settings file at %s, using defaults", path)
    except (OSError, ValueError) as exc:
        logger.warning("Failed to load settings from %s: %s, using defaults", path, exc)
    return Preferences()


def save_preferences(path: Path, prefs: Preferences) -> bool:
    """Persist preferences. Returns ``False`` (and logs) on failure."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(prefs.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
    except OSError as exc:
        logger.error("Failed to save settings to %s: %s", path, exc)
        return False
    return True


def load_reminders(path: Path) -> list[Any]:
    """Read the reminders array; a missing or corrupt file is reset to ``[]``."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        if isinstance(data, list):
            return data
        logger.warning("Reminders file %s does not hold a list, resetting", path)
    except FileNotFoundError:
        logger.info("No reminders file at %s, creating an empty one", path)
    except (OSError, ValueError) as exc:
        logger.warning("Failed to load reminders from %s: %s, resetting", path, exc)

    save_reminders(path, [])
    return []


def save_reminders(path: Path, reminders: list[Any]) -> bool:
    """Persist the reminders array. Returns ``False`` (and logs) on failure."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(reminders), encoding="utf-8")
    except (OSError, TypeError) as exc:
        logger.error("Failed to save reminders to %s: %s", path, exc)
        return False
    return True
