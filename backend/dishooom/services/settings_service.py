"""
User preferences: one JSON document with fixed sections, merged over defaults.

The document lives in a single JSON file (SETTINGS_PATH). Reads never fail:
a missing or corrupt file yields the defaults. Writes replace the file.
"""

from __future__ import annotations

import copy
import json
import logging
import threading
from pathlib import Path
from typing import Any

from dishooom.validation import ValidationError

logger = logging.getLogger(__name__)

_write_lock = threading.Lock()

DEFAULT_SETTINGS: dict[str, dict[str, Any]] = {
    "profile": {
        "firstName": "John",
        "lastName": "Doe",
        "email": "john.doe@dishooom.com",
        "phone": "+1 (555) 123-4567",
        "businessName": "Dishooom",
        "businessType": "Chemical Product Manufacturing",
        "businessAddress": "123 Business St, City, State 12345",
        "taxId": "TX123456789",
    },
    "notifications": {
        "email": {
            "orderUpdates": True,
            "lowStock": True,
            "weeklyReports": False,
            "customerMessages": True,
            "systemAlerts": True,
        },
        "push": {
            "orderUpdates": False,
            "lowStock": True,
            "customerMessages": False,
            "systemAlerts": True,
        },
        "system": {
            "soundEnabled": True,
            "desktopNotifications": False,
            "emailDigest": "weekly",
        },
    },
    "data": {
        "autoBackup": True,
        "backupFrequency": "weekly",
        "dataRetention": "1year",
        "exportFormat": "csv",
        "syncEnabled": False,
    },
    "security": {
        "twoFactorEnabled": False,
        "sessionTimeout": 30,
        "passwordExpiry": 90,
        "loginNotifications": True,
        "ipWhitelist": False,
    },
    "appearance": {
        "theme": "light",
        "language": "en",
        "timezone": "America/New_York",
        "dateFormat": "MM/DD/YYYY",
        "currency": "USD",
        "compactMode": False,
        "showAnimations": True,
    },
}

SECTIONS = tuple(DEFAULT_SETTINGS.keys())


class SettingsError(ValidationError):
    pass


def _defaults() -> dict:
    return copy.deepcopy(DEFAULT_SETTINGS)


def _merge_over_defaults(stored: dict) -> dict:
    # Shallow merge: a stored section replaces the default section wholesale
    merged = _defaults()
    for section, value in stored.items():
        if isinstance(merged.get(section), dict) and not isinstance(value, dict):
            logger.warning("Settings section %r is not an object; using defaults", section)
            continue
        merged[section] = value
    return merged


def _read(path: Path) -> dict | None:
    if not path.exists():
        return None
    try:
        stored = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        logger.warning("Settings file %s is unreadable; using defaults", path)
        return None
    if not isinstance(stored, dict):
        logger.warning("Settings file %s does not hold an object; using defaults", path)
        return None
    return stored


def _write(path: Path, settings: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(settings, indent=2), encoding="utf-8")


def _require_section(section: str) -> None:
    if section not in SECTIONS:
        raise SettingsError(f"Unknown settings section '{section}'. Must be one of: {', '.join(SECTIONS)}")


def get_settings(path: str | Path) -> dict:
    stored = _read(Path(path))
    if stored is None:
        return _defaults()
    return _merge_over_defaults(stored)


def update_settings(path: str | Path, section: str, data: dict) -> dict:
    """Merge data into one section and persist the whole document."""
    _require_section(section)
    if not isinstance(data, dict):
        raise SettingsError("Settings section data must be an object")
    with _write_lock:
        settings = get_settings(path)
        settings[section] = {**settings.get(section, {}), **data}
        _write(Path(path), settings)
    return settings


def reset_settings(path: str | Path, section: str | None = None) -> dict:
    """Restore one section (or everything) to defaults."""
    with _write_lock:
        if section is None:
            settings = _defaults()
        else:
            _require_section(section)
            settings = get_settings(path)
            settings[section] = copy.deepcopy(DEFAULT_SETTINGS[section])
        _write(Path(path), settings)
    return settings


def export_settings(path: str | Path) -> str:
    return json.dumps(get_settings(path), indent=2)


def import_settings(path: str | Path, text: str) -> dict:
    try:
        imported = json.loads(text)
    except (TypeError, json.JSONDecodeError):
        raise SettingsError("Invalid settings file format")
    if not isinstance(imported, dict):
        raise SettingsError("Invalid settings file format")
    for section in SECTIONS:
        if section in imported and not isinstance(imported[section], dict):
            raise SettingsError(f"Settings section '{section}' must be an object")
    settings = _merge_over_defaults(imported)
    with _write_lock:
        _write(Path(path), settings)
    return settings


def currency_code(path: str | Path) -> str:
    code = get_settings(path)["appearance"].get("currency")
    return code if isinstance(code, str) and code.strip() else "USD"
