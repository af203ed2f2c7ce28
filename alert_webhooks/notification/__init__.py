"""Notification subsystem — providers, routing and dispatch."""

from alert_webhooks.notification.destinations import (
    normalize_level,
    paginate,
    paginate_html,
    split_html_message,
    split_message,
)
from alert_webhooks.notification.exceptions import (
    DeliveryError,
    DeliveryErrorCategory,
    DestinationAPIError,
    NoDestinationResolvedError,
    NotificationError,
    PreprocessFailedError,
    ProviderDisabledError,
    ProviderInitError,
    ProviderNotFoundError,
)
from alert_webhooks.notification.manager import NotificationManager
from alert_webhooks.notification.payload import (
    AlertManagerAlert,
    AlertManagerData,
    build_template_data,
    split_by_status,
)
from alert_webhooks.notification.providers import (
    DestinationService,
    DiscordProvider,
    Provider,
    SlackProvider,
    TelegramProvider,
)
from alert_webhooks.notification.types import (
    NotificationRequest,
    NotificationResponse,
    ProviderCapabilities,
    ProviderKind,
    ProviderStats,
    ProviderStatus,
)

__all__ = [
    "AlertManagerAlert",
    "AlertManagerData",
    "DeliveryError",
    "DeliveryErrorCategory",
    "DestinationAPIError",
    "DestinationService",
    "DiscordProvider",
    "NoDestinationResolvedError",
    "NotificationError",
    "NotificationManager",
    "NotificationRequest",
    "NotificationResponse",
    "PreprocessFailedError",
    "Provider",
    "ProviderCapabilities",
    "ProviderDisabledError",
    "ProviderInitError",
    "ProviderKind",
    "ProviderNotFoundError",
    "ProviderStats",
    "ProviderStatus",
    "SlackProvider",
    "TelegramProvider",
    "build_template_data",
    "normalize_level",
    "paginate",
    "paginate_html",
    "split_by_status",
    "split_html_message",
    "split_message",
]
