"""Pydantic settings loaded from YAML configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, SecretStr

_settings: Settings | None = None

_DEFAULT_CONFIG_PATH = Path("config/settings.yaml")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "json"


class TemplatesConfig(BaseModel):
    """Template directory and profile selection."""

    directory: str = "templates"
    config_dir: str = "config"
    profile: str = "full"


class TelegramConfig(BaseModel):
    """Telegram Bot API destination.

    ``channels`` maps level keys (``chat_ids0`` .. ``chat_ids6``) to chat IDs.
    """

    enabled: bool = False
    bot_token: SecretStr = SecretStr("")
    channels: dict[str, str] = {}
    default_channel: str = ""
    api_base: str = "https://api.telegram.org"
    template_language: str = "eng"
    template_mode: str = ""


class SlackConfig(BaseModel):
    """Slack Web API destination."""

    enabled: bool = False
    token: SecretStr = SecretStr("")
    channel: str = ""
    channels: dict[str, str] = {}
    username: str = ""
    icon_url: str = ""
    icon_emoji: str = ""
    link_names: bool = False
    unfurl_links: bool = False
    unfurl_media: bool = False
    api_base: str = "https://slack.com/api"
    template_language: str = "eng"
    template_mode: str = ""


class DiscordConfig(BaseModel):
    """Discord bot destination (REST API, bot token)."""

    enabled: bool = False
    token: SecretStr = SecretStr("")
    guild_id: str = ""
    channels: dict[str, str] = {}
    default_channel: str = ""
    api_base: str = "https://discord.com/api/v10"
    template_language: str = "eng"
    template_mode: str = ""


class Settings(BaseModel):
    """Root settings container."""

    logging: LoggingConfig = LoggingConfig()
    templates: TemplatesConfig = TemplatesConfig()
    telegram: TelegramConfig = TelegramConfig()
    slack: SlackConfig = SlackConfig()
    discord: DiscordConfig = DiscordConfig()


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from a YAML file and cache globally.

    Args:
        path: Path to YAML config. Defaults to config/settings.yaml.

    Returns:
        Parsed Settings instance.
    """
    global _settings  # noqa: PLW0603

    config_path = Path(path) if path else _DEFAULT_CONFIG_PATH

    data: dict[str, Any] = {}
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            raw = yaml.safe_load(f)
            if isinstance(raw, dict):
                data = raw

    _settings = Settings(**data)
    return _settings


def get_settings() -> Settings:
    """Return the cached settings, loading defaults if not yet loaded."""
    global _settings  # noqa: PLW0603
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Reset the cached settings (useful for testing)."""
    global _settings  # noqa: PLW0603
    _settings = None
