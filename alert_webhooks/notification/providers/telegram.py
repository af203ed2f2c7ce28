"""Telegram provider — routes to chat IDs by level, HTML markup."""

from __future__ import annotations

from alert_webhooks.core.config import TelegramConfig
from alert_webhooks.notification.destinations import ErrorPattern, paginate_html
from alert_webhooks.notification.exceptions import DeliveryErrorCategory as Cat
from alert_webhooks.notification.providers.base import DestinationService, Provider
from alert_webhooks.notification.types import NotificationRequest, ProviderKind

TELEGRAM_ERRORS: tuple[ErrorPattern, ...] = (
    ErrorPattern(
        "bot is not a member",
        Cat.NOT_A_MEMBER,
        "bot is not a member of chat {destination}; add the bot to the chat first",
    ),
    ErrorPattern(
        "bot was kicked",
        Cat.NOT_A_MEMBER,
        "bot was removed from chat {destination}; add it back to the chat",
    ),
    ErrorPattern(
        "chat not found",
        Cat.DESTINATION_NOT_FOUND,
        "chat {destination} does not exist or the bot cannot see it",
    ),
    ErrorPattern(
        "not enough rights",
        Cat.NO_ACCESS,
        "bot lacks permission to post in chat {destination}",
    ),
    ErrorPattern(
        "bot was blocked",
        Cat.NO_ACCESS,
        "bot was blocked by the user in chat {destination}",
    ),
    ErrorPattern(
        "unauthorized",
        Cat.INVALID_CREDENTIALS,
        "invalid Telegram bot token; check the token in configuration",
    ),
    ErrorPattern(
        "message is too long",
        Cat.PAYLOAD_TOO_LARGE,
        "message exceeds Telegram's length limit",
    ),
)


class TelegramProvider(Provider):
    """Sends to a chat picked by ``chat_id``, ``channel``, level or default."""

    max_message_length = 4096
    error_patterns = TELEGRAM_ERRORS

    def __init__(
        self,
        config: TelegramConfig,
        service: DestinationService,
        supported_languages: list[str] | None = None,
    ) -> None:
        super().__init__(
            service,
            token=config.bot_token.get_secret_value(),
            channels=config.channels,
            default_channel=config.default_channel,
            enabled=config.enabled,
            template_language=config.template_language,
            template_mode=config.template_mode,
            supported_languages=supported_languages,
        )

    @property
    def name(self) -> str:
        return ProviderKind.TELEGRAM

    def _explicit_destination(self, request: NotificationRequest) -> str:
        return request.chat_id or request.channel

    def _paginate(self, text: str) -> list[str]:
        return paginate_html(text, self.max_message_length)
