"""Configuration package."""

from savings_tracker.config.settings import (
    AppSettings,
    DisplaySettings,
    ScheduleSettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "DisplaySettings",
    "ScheduleSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
