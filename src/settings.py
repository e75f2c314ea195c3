"""
Settings Module for Total

Player preferences live in config.json in the working directory. Saved
values are merged over DEFAULT_SETTINGS one key at a time: a value of the
wrong type or out of range is dropped with a warning and its default is
used, so one bad entry never discards the rest of the file.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

# Settings file location (working directory)
SETTINGS_FILE = Path("config.json")

DEFAULT_SETTINGS: Dict[str, Any] = {
    "debug_enabled": False,
    "invalid_move_delay_ms": 600,
    "win_dialog_delay_ms": 800,
    "progress_file": "progress.json",
    "levels_file": None,  # None = bundled levels
}

# Upper bound for the two pause settings
MAX_DELAY_MS = 10_000


def _check_value(key: str, value: Any) -> Optional[str]:
    """Return why a value is unusable, or None if it is fine."""
    if key == "debug_enabled":
        return None if isinstance(value, bool) else "expected true or false"
    if key in ("invalid_move_delay_ms", "win_dialog_delay_ms"):
        if isinstance(value, bool) or not isinstance(value, int):
            return "expected a whole number of milliseconds"
        if not 0 <= value <= MAX_DELAY_MS:
            return f"expected 0 to {MAX_DELAY_MS}"
        return None
    if key == "progress_file":
        return None if isinstance(value, str) and value else "expected a file path"
    if key == "levels_file":
        return None if value is None or isinstance(value, str) else "expected a file path or null"
    return None


def load_settings(path: Path = SETTINGS_FILE) -> Dict[str, Any]:
    """
    Load settings from config.json.

    Args:
        path: Settings file (defaults to config.json)

    Returns:
        Defaults overlaid with every valid saved value. Unknown keys are
        kept as-is; the file being missing or unreadable yields defaults.
    """
    result = DEFAULT_SETTINGS.copy()
    if not path.exists():
        logger.debug("Settings file not found, using defaults")
        return result

    try:
        with open(path, 'r', encoding='utf-8') as f:
            saved = json.load(f)
    except (ValueError, OSError) as e:
        logger.warning(f"Failed to load settings: {e}, using defaults")
        return result

    if not isinstance(saved, dict):
        logger.warning(f"{path} must contain a JSON object, using defaults")
        return result

    for key, value in saved.items():
        problem = _check_value(key, value)
        if problem:
            logger.warning(f"Ignoring setting {key}={value!r}: {problem}")
            continue
        result[key] = value

    logger.debug(f"Settings loaded: {result}")
    return result


def save_settings(settings: Dict[str, Any], path: Path = SETTINGS_FILE) -> None:
    """
    Save settings to config.json.

    Invalid values are not written.
    """
    clean = {key: value for key, value in settings.items() if _check_value(key, value) is None}
    try:
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(clean, f, indent=2)
        logger.debug(f"Settings saved: {clean}")
    except OSError as e:
        logger.error(f"Failed to save settings: {e}")
