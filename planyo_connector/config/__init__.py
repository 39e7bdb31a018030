"""Configuration package."""

from planyo_connector.config.logging import configure_logging, get_logger
from planyo_connector.config.settings import (
    LoggingSettings,
    PlanyoSettings,
    Settings,
    settings,
)

__all__ = [
    "settings",
    "Settings",
    "PlanyoSettings",
    "LoggingSettings",
    "configure_logging",
    "get_logger",
]
