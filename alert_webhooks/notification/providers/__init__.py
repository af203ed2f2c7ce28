"""Built-in notification providers."""

from alert_webhooks.notification.providers.base import DestinationService, Provider
from alert_webhooks.notification.providers.discord import DiscordProvider
from alert_webhooks.notification.providers.slack import SlackProvider
from alert_webhooks.notification.providers.telegram import TelegramProvider

__all__ = [
    "DestinationService",
    "DiscordProvider",
    "Provider",
    "SlackProvider",
    "TelegramProvider",
]
