"""Request, response and provider metadata types."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from alert_webhooks.notification.payload import AlertManagerData


class ProviderKind(StrEnum):
    """Destinations shipped with the service."""

    TELEGRAM = "telegram"
    SLACK = "slack"
    DISCORD = "discord"


class NotificationRequest(BaseModel):
    """A single dispatch request.

    ``message`` wins over ``alert_data``: the payload is only rendered when no
    explicit text is given.
    """

    provider_name: str = ""
    level: str = ""
    channel: str = ""
    chat_id: str = ""
    message: str = ""
    alert_data: AlertManagerData | None = None
    template_language: str = ""
    options: dict[str, Any] = Field(default_factory=dict)


class NotificationResponse(BaseModel):
    """Outcome of one dispatch; ``error`` holds the typed failure, if any."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    success: bool
    message: str
    details: str = ""
    provider: str = ""
    level: str = ""
    chat_id: str = ""
    channel: str = ""
    error: Exception | None = Field(default=None, exclude=True)


class ProviderStats(BaseModel):
    messages_sent: int = 0
    messages_error: int = 0
    last_message_time: float | None = None


class ProviderStatus(BaseModel):
    name: str
    enabled: bool
    connected: bool
    last_error: str = ""
    channels: dict[str, str] = Field(default_factory=dict)
    statistics: ProviderStats = Field(default_factory=ProviderStats)


class ProviderCapabilities(BaseModel):
    supports_levels: bool = False
    supports_channels: bool = False
    supports_rich_text: bool = False
    supports_attachments: bool = False
    supported_languages: list[str] = Field(default_factory=list)
    max_message_length: int = 0
