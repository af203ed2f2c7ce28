"""Slack provider — routes to channels by level, mrkdwn markup."""

from __future__ import annotations

import re

from alert_webhooks.core.config import SlackConfig
from alert_webhooks.notification.destinations import ErrorPattern
from alert_webhooks.notification.exceptions import DeliveryErrorCategory as Cat
from alert_webhooks.notification.providers.base import DestinationService, Provider
from alert_webhooks.notification.types import ProviderKind

# Conversation IDs (C…, G…, D…) are addressed as-is.
_CONVERSATION_ID = re.compile(r"^[CGD][A-Z0-9]{8,}$")

SLACK_ERRORS: tuple[ErrorPattern, ...] = (
    ErrorPattern(
        "not_in_channel",
        Cat.NOT_A_MEMBER,
        "bot is not in channel {destination}; invite it with /invite @your_bot_name",
    ),
    ErrorPattern(
        "channel_not_found",
        Cat.DESTINATION_NOT_FOUND,
        "channel {destination} does not exist; check the channel name",
    ),
    ErrorPattern(
        "missing_scope",
        Cat.NO_ACCESS,
        "bot lacks the 'chat:write' scope; add it in the Slack app settings",
    ),
    ErrorPattern(
        "invalid_auth",
        Cat.INVALID_CREDENTIALS,
        "invalid Slack token; check the token in configuration",
    ),
    ErrorPattern(
        "not_authed",
        Cat.INVALID_CREDENTIALS,
        "no Slack token was sent; check the token in configuration",
    ),
    ErrorPattern(
        "msg_too_long",
        Cat.PAYLOAD_TOO_LARGE,
        "message exceeds Slack's length limit",
    ),
)


class SlackProvider(Provider):
    """Sends to a channel picked by ``channel``, level or ``SlackConfig.channel``."""

    max_message_length = 40000
    error_patterns = SLACK_ERRORS

    def __init__(
        self,
        config: SlackConfig,
        service: DestinationService,
        supported_languages: list[str] | None = None,
    ) -> None:
        super().__init__(
            service,
            token=config.token.get_secret_value(),
            channels=config.channels,
            default_channel=config.channel,
            enabled=config.enabled,
            template_language=config.template_language,
            template_mode=config.template_mode,
            supported_languages=supported_languages,
        )

    @property
    def name(self) -> str:
        return ProviderKind.SLACK

    def _format_destination(self, destination: str) -> str:
        if destination.startswith(("#", "@")) or _CONVERSATION_ID.match(destination):
            return destination
        return f"#{destination}"
