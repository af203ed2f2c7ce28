"""Exception hierarchy for notification dispatch."""

from __future__ import annotations

from enum import StrEnum


class NotificationError(Exception):
    """Base exception for all notification errors."""


class ProviderNotFoundError(NotificationError):
    """No provider is registered under the requested name."""


class ProviderDisabledError(NotificationError):
    """The provider is registered but currently disabled."""


class ProviderInitError(NotificationError):
    """A provider could not be constructed from its config and service."""


class PreprocessFailedError(NotificationError):
    """Rendering the alert payload into message text failed."""


class NoDestinationResolvedError(NotificationError):
    """Neither channel, level nor a configured default yields a destination."""


class DestinationAPIError(NotificationError):
    """Raw failure reported by a platform's wire API."""


class DeliveryErrorCategory(StrEnum):
    """Coarse reasons a destination rejected a message."""

    NOT_A_MEMBER = "not_a_member"
    DESTINATION_NOT_FOUND = "destination_not_found"
    NO_ACCESS = "no_access"
    INVALID_CREDENTIALS = "invalid_credentials"
    PAYLOAD_TOO_LARGE = "payload_too_large"


class DeliveryError(NotificationError):
    """A send failed; ``category`` is None when the wire error was not recognised."""

    def __init__(self, message: str, category: DeliveryErrorCategory | None = None) -> None:
        super().__init__(message)
        self.category = category
