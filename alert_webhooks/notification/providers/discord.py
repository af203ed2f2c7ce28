"""Discord provider — routes to channel IDs by level, Markdown markup."""

from __future__ import annotations

from alert_webhooks.core.config import DiscordConfig
from alert_webhooks.notification.destinations import ErrorPattern
from alert_webhooks.notification.exceptions import DeliveryErrorCategory as Cat
from alert_webhooks.notification.providers.base import DestinationService, Provider
from alert_webhooks.notification.types import ProviderKind

DISCORD_ERRORS: tuple[ErrorPattern, ...] = (
    ErrorPattern(
        "Missing Permissions",
        Cat.NO_ACCESS,
        "bot lacks 'Send Messages' permission in channel {destination}",
    ),
    ErrorPattern(
        "Unknown Channel",
        Cat.DESTINATION_NOT_FOUND,
        "channel {destination} does not exist or the bot cannot access it",
    ),
    ErrorPattern(
        "Missing Access",
        Cat.NOT_A_MEMBER,
        "bot has no access to channel {destination}; invite it to the server or channel",
    ),
    ErrorPattern(
        "Invalid Form Body",
        Cat.PAYLOAD_TOO_LARGE,
        "message content is invalid or too long",
    ),
    ErrorPattern(
        "Unauthorized",
        Cat.INVALID_CREDENTIALS,
        "invalid Discord token; check the token in configuration",
    ),
)


class DiscordProvider(Provider):
    """Sends to a channel ID picked by ``channel``, level or default."""

    max_message_length = 2000
    error_patterns = DISCORD_ERRORS

    def __init__(
        self,
        config: DiscordConfig,
        service: DestinationService,
        supported_languages: list[str] | None = None,
    ) -> None:
        super().__init__(
            service,
            token=config.token.get_secret_value(),
            channels=config.channels,
            default_channel=config.default_channel,
            enabled=config.enabled,
            template_language=config.template_language,
            template_mode=config.template_mode,
            supported_languages=supported_languages,
        )

    @property
    def name(self) -> str:
        return ProviderKind.DISCORD
