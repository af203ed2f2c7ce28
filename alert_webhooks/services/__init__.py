"""Platform API clients (aiohttp) used as provider destination services."""

from alert_webhooks.services.discord import DiscordService
from alert_webhooks.services.slack import SlackService
from alert_webhooks.services.telegram import TelegramService

__all__ = [
    "DiscordService",
    "SlackService",
    "TelegramService",
]
