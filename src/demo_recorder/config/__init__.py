"""
Configuration module - Settings for recording and compositing runs.

Usage:
    from demo_recorder.config import get_settings, load_config

    settings = get_settings()                       # process-wide, loaded lazily
    settings = load_config(browser={"headless": True})  # fresh, with overrides

Environment Variables:
    DEMO_RECORDER_CONFIG=./recorder.yaml
    DEMO_RECORDER__RECORDING__TARGET_URL=http://localhost:5173
    DEMO_RECORDER__BROWSER__HEADLESS=true
    DEMO_RECORDER__DELAYS__ACTION_MS=300
"""

from demo_recorder.config.settings import (
    Settings,
    BrowserSettings,
    DelaySettings,
    RecordingSettings,
    EncoderSettings,
    LoggingSettings,
)
from demo_recorder.config.loader import ConfigLoader, load_config

_settings: Settings | None = None


def get_settings() -> Settings:
    """Settings shared by the whole process, loaded on first use."""
    global _settings
    if _settings is None:
        _settings = load_config()
    return _settings


def reset_settings() -> None:
    """Forget the shared settings so the next get_settings() reloads them."""
    global _settings
    _settings = None


__all__ = [
    "Settings",
    "BrowserSettings",
    "DelaySettings",
    "RecordingSettings",
    "EncoderSettings",
    "LoggingSettings",
    "ConfigLoader",
    "load_config",
    "get_settings",
    "reset_settings",
]
