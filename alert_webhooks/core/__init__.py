"""Configuration and logging shared by every subsystem."""

from alert_webhooks.core.config import (
    DiscordConfig,
    LoggingConfig,
    Settings,
    SlackConfig,
    TelegramConfig,
    TemplatesConfig,
    get_settings,
    load_settings,
    reset_settings,
)
from alert_webhooks.core.logging import setup_logging

__all__ = [
    "DiscordConfig",
    "LoggingConfig",
    "Settings",
    "SlackConfig",
    "TelegramConfig",
    "TemplatesConfig",
    "get_settings",
    "load_settings",
    "reset_settings",
    "setup_logging",
]
