"""Provider base class and the destination-service protocol it drives."""

from __future__ import annotations

import abc
import time
from typing import Protocol

import structlog

from alert_webhooks.notification.destinations import (
    ErrorPattern,
    normalize_channels,
    normalize_level,
    paginate,
    translate_error,
)
from alert_webhooks.notification.exceptions import (
    DestinationAPIError,
    NoDestinationResolvedError,
    ProviderInitError,
)
from alert_webhooks.notification.types import (
    NotificationRequest,
    ProviderCapabilities,
    ProviderStats,
    ProviderStatus,
)

logger = structlog.get_logger(__name__)

DEFAULT_TEMPLATE_LANGUAGE = "eng"


class DestinationService(Protocol):
    """Wire-level client for one platform. Failures raise DestinationAPIError."""

    async def send_message(self, destination: str, text: str) -> None: ...

    async def test_connection(self) -> None: ...

    async def close(self) -> None: ...


class Provider(abc.ABC):
    """Base class for notification destinations.

    Subclasses supply the platform name, the wire-error table and how an
    explicit destination is read from a request; routing, pagination,
    statistics and error translation are shared.
    """

    max_message_length: int = 0
    error_patterns: tuple[ErrorPattern, ...] = ()

    def __init__(
        self,
        service: DestinationService,
        *,
        token: str = "",
        channels: dict[str, str] | None = None,
        default_channel: str = "",
        enabled: bool = True,
        template_language: str = DEFAULT_TEMPLATE_LANGUAGE,
        template_mode: str = "",
        supported_languages: list[str] | None = None,
    ) -> None:
        self._service = service
        self._token = token
        self._channels = normalize_channels(channels or {})
        self._default_channel = default_channel
        self._enabled = enabled
        self.template_language = template_language or DEFAULT_TEMPLATE_LANGUAGE
        self.template_mode = template_mode
        self._supported_languages = list(supported_languages or [])
        self._stats = ProviderStats()
        self._connected = False
        self._last_error = ""
        self.validate_config()

    # ── Identity & config ───────────────────────────────────────

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Registry key, e.g. ``"telegram"``."""

    @property
    def service(self) -> DestinationService:
        return self._service

    def is_enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def validate_config(self) -> None:
        """Raise ProviderInitError unless a token and a destination are configured."""
        if not self._token:
            raise ProviderInitError(f"{self.name} token is required")
        if not self._channels and not self._default_channel:
            raise ProviderInitError(f"at least one {self.name} destination must be configured")

    # ── Routing ─────────────────────────────────────────────────

    def _explicit_destination(self, request: NotificationRequest) -> str:
        return request.channel

    def _format_destination(self, destination: str) -> str:
        return destination

    def resolve_destination(self, request: NotificationRequest) -> str:
        """Explicit destination, then level, then the configured default."""
        explicit = self._explicit_destination(request)
        if explicit:
            return self._format_destination(explicit)

        if request.level:
            key = normalize_level(request.level)
            destination = self._channels.get(key)
            if destination:
                return self._format_destination(destination)
            logger.warning("level_not_configured", provider=self.name, level=request.level)

        if self._default_channel:
            return self._format_destination(self._default_channel)

        raise NoDestinationResolvedError(
            f"no {self.name} destination for level '{request.level}' and no default configured"
        )

    # ── Delivery ────────────────────────────────────────────────

    def _paginate(self, text: str) -> list[str]:
        if not self.max_message_length:
            return [text]
        return paginate(text, self.max_message_length)

    async def send_message(self, request: NotificationRequest) -> str:
        """Deliver ``request.message`` and return the destination it went to.

        Raises:
            NoDestinationResolvedError: nothing to route the message to.
            DeliveryError: the platform rejected a part of the message.
        """
        try:
            destination = self.resolve_destination(request)
        except NoDestinationResolvedError:
            self._stats.messages_error += 1
            raise

        parts = self._paginate(request.message)

        try:
            for part in parts:
                await self._service.send_message(destination, part)
        except DestinationAPIError as e:
            self._stats.messages_error += 1
            error = translate_error(self.error_patterns, str(e), destination)
            self._last_error = str(error)
            logger.warning(
                "provider_send_failed",
                provider=self.name,
                destination=destination,
                category=error.category,
                error=str(error),
            )
            raise error from e

        self._stats.messages_sent += 1
        self._stats.last_message_time = time.time()
        logger.info(
            "provider_message_sent",
            provider=self.name,
            destination=destination,
            parts=len(parts),
        )
        return destination

    async def test_connection(self) -> None:
        """Probe the platform; the outcome is reported by ``get_status``."""
        try:
            await self._service.test_connection()
        except DestinationAPIError as e:
            self._connected = False
            error = translate_error(self.error_patterns, str(e))
            self._last_error = str(error)
            raise error from e
        self._connected = True
        self._last_error = ""

    # ── Introspection ───────────────────────────────────────────

    def channels(self) -> dict[str, str]:
        channels = dict(self._channels)
        if self._default_channel:
            channels.setdefault("default", self._default_channel)
        return channels

    def get_status(self) -> ProviderStatus:
        return ProviderStatus(
            name=self.name,
            enabled=self._enabled,
            connected=self._connected,
            last_error=self._last_error,
            channels=self.channels(),
            statistics=self._stats.model_copy(),
        )

    def get_capabilities(self) -> ProviderCapabilities:
        return ProviderCapabilities(
            supports_levels=True,
            supports_channels=True,
            supports_rich_text=True,
            supports_attachments=False,
            supported_languages=list(self._supported_languages),
            max_message_length=self.max_message_length,
        )

    async def close(self) -> None:
        await self._service.close()
