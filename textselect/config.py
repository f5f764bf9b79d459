"""Persistent JSON config helpers.

Stores default delivery preferences and the UI theme name. Selection state is
never stored. All access is defensive: malformed or missing config falls back
to defaults.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

logger = logging.getLogger(__name__)

APP_NAME = "textselect"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


@dataclass(frozen=True)
class Preferences:
    keep_empty: bool = False
    null_delimited: bool = False
    theme: str | None = None


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def _load_flag(data: dict[str, object], key: str) -> bool:
    """Only explicit booleans count; anything else falls back to ``False``."""
    value = data.get(key)
    return value if isinstance(value, bool) else False


def load_theme_name(data: dict[str, object] | None = None) -> str | None:
    """Load persisted UI theme name, returning ``None`` when unset/invalid."""
    value = (load_config() if data is None else data).get("theme")
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def load_preferences() -> Preferences:
    data = load_config()
    return Preferences(
        keep_empty=_load_flag(data, "keep_empty"),
        null_delimited=_load_flag(data, "null_delimited"),
        theme=load_theme_name(data),
    )
