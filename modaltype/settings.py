"""User settings for the editor.

Settings are read once at startup from a JSON file in the user's config
directory. A missing file means defaults; bad values are logged and
replaced by their defaults so a broken file never stops the editor.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

from .constants import EditorConstants

logger = logging.getLogger(__name__)

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


@dataclass
class Settings:
    read_timeout: float = EditorConstants.DEFAULT_READ_TIMEOUT
    line_number_width: int = EditorConstants.DEFAULT_LINE_NUMBER_WIDTH
    log_level: str = 'WARNING'


def config_dir() -> Path:
    return Path(platformdirs.user_config_dir(EditorConstants.APP_NAME))


def settings_path() -> Path:
    return config_dir() / EditorConstants.SETTINGS_FILE_NAME


def log_path() -> Path:
    return Path(platformdirs.user_log_dir(EditorConstants.APP_NAME)) / EditorConstants.LOG_FILE_NAME


def validate_setting(key: str, value: Any) -> bool:
    """Check one setting value.

    Args:
        key: Setting name.
        value: Value read from the settings file.

    Returns:
        True if the value can be used.
    """
    if key == 'read_timeout':
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
        return 0.01 <= value <= 5.0
    if key == 'line_number_width':
        if isinstance(value, bool) or not isinstance(value, int):
            return False
        return 1 <= value <= 10
    if key == 'log_level':
        return isinstance(value, str) and value.upper() in LOG_LEVELS
    return False


def _read_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Could not load settings from {path}: {e}")
        return {}
    if not isinstance(data, dict):
        logger.warning("Settings file has invalid format (not a dict), ignoring")
        return {}
    return data


def load_settings(path: Optional[Path] = None) -> Settings:
    """Load settings from ``path`` (default: the user config file)."""
    path = settings_path() if path is None else path
    data = _read_file(path)
    settings = Settings()
    for f in fields(Settings):
        if f.name not in data:
            continue
        value = data[f.name]
        if not validate_setting(f.name, value):
            logger.warning(f"Invalid value {value!r} for setting {f.name}, using default")
            continue
        if f.name == 'log_level':
            value = value.upper()
        elif f.name == 'read_timeout':
            value = float(value)
        setattr(settings, f.name, value)
    return settings
