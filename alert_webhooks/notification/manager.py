"""Notification manager — provider registry, preprocessing and dispatch."""

from __future__ import annotations

import threading
from collections.abc import Iterable, Mapping
from types import MappingProxyType

import structlog

from alert_webhooks.core.config import Settings
from alert_webhooks.notification.exceptions import (
    NotificationError,
    PreprocessFailedError,
    ProviderDisabledError,
    ProviderInitError,
    ProviderNotFoundError,
)
from alert_webhooks.notification.payload import (
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
    ProviderKind,
    ProviderStatus,
)
from alert_webhooks.templating import TemplateEngine, TemplateError, format_builtin_message
from alert_webhooks.templating.profiles import full_default_config
from alert_webhooks.templating.types import FormatOptions, TemplateData

logger = structlog.get_logger(__name__)

ProviderRegistry = Mapping[str, Provider]


class NotificationManager:
    """Routes requests to registered providers.

    The registry is an immutable snapshot replaced wholesale by
    ``initialize``/``reload``/``register``; a dispatch that already looked up
    its provider finishes against that instance.

    - Uninitialized: empty registry, every send fails with ProviderNotFoundError.
    - Ready: providers built from settings and services.
    """

    def __init__(self, template_engine: TemplateEngine | None = None) -> None:
        self._engine = template_engine
        self._providers: ProviderRegistry = MappingProxyType({})
        self._profile_options: Mapping[str, FormatOptions] = MappingProxyType({})
        self._write_lock = threading.Lock()

    @property
    def template_engine(self) -> TemplateEngine | None:
        return self._engine

    # ── Registry ────────────────────────────────────────────────

    def initialize(
        self,
        template_engine: TemplateEngine | None,
        settings: Settings,
        services: Mapping[str, DestinationService],
    ) -> ProviderRegistry:
        """Build one provider per enabled destination that has a service.

        A provider whose construction fails is logged and left out; the
        others are still registered.
        """
        providers = self._build_providers(template_engine, settings, services)
        profile_options = self._resolve_profile_options(template_engine, providers.values())
        with self._write_lock:
            self._engine = template_engine
            self._profile_options = MappingProxyType(profile_options)
            self._providers = MappingProxyType(providers)
        logger.info("notification_manager_initialized", providers=sorted(providers))
        return self._providers

    def reload(
        self,
        template_engine: TemplateEngine | None,
        settings: Settings,
        services: Mapping[str, DestinationService],
    ) -> ProviderRegistry:
        logger.info("notification_manager_reloading")
        return self.initialize(template_engine, settings, services)

    def register(self, provider: Provider) -> None:
        """Add or replace a single provider."""
        resolved: dict[str, FormatOptions] = {}
        if provider.template_mode not in self._profile_options:
            resolved = self._resolve_profile_options(self._engine, [provider])
        with self._write_lock:
            if resolved:
                self._profile_options = MappingProxyType({**self._profile_options, **resolved})
            providers = dict(self._providers)
            providers[provider.name] = provider
            self._providers = MappingProxyType(providers)
        logger.info("provider_registered", provider=provider.name)

    @staticmethod
    def _build_providers(
        template_engine: TemplateEngine | None,
        settings: Settings,
        services: Mapping[str, DestinationService],
    ) -> dict[str, Provider]:
        languages = template_engine.supported_languages() if template_engine else []
        candidates = (
            (ProviderKind.TELEGRAM, TelegramProvider, settings.telegram),
            (ProviderKind.SLACK, SlackProvider, settings.slack),
            (ProviderKind.DISCORD, DiscordProvider, settings.discord),
        )

        providers: dict[str, Provider] = {}
        for kind, provider_cls, config in candidates:
            if not config.enabled:
                continue
            service = services.get(kind)
            if service is None:
                logger.warning("provider_service_missing", provider=kind)
                continue
            try:
                providers[kind] = provider_cls(config, service, languages)
            except ProviderInitError as e:
                logger.error("provider_init_failed", provider=kind, error=str(e))
        return providers

    @staticmethod
    def _resolve_profile_options(
        template_engine: TemplateEngine | None,
        providers: Iterable[Provider],
    ) -> dict[str, FormatOptions]:
        """Read the profile behind each provider's ``template_mode`` once."""
        if template_engine is None:
            return {}
        modes = {p.template_mode for p in providers if p.template_mode}
        return {mode: template_engine.get_format_options(mode) for mode in sorted(modes)}

    def get_provider(self, name: str) -> Provider:
        provider = self._providers.get(name)
        if provider is None:
            raise ProviderNotFoundError(f"provider '{name}' not found")
        return provider

    def get_all_providers(self) -> dict[str, Provider]:
        return dict(self._providers)

    def get_provider_status(self) -> dict[str, ProviderStatus]:
        return {name: p.get_status() for name, p in self._providers.items()}

    async def test_connections(self) -> dict[str, bool]:
        """Probe every provider; failures are logged and reported as False."""
        results: dict[str, bool] = {}
        for name, provider in self._providers.items():
            try:
                await provider.test_connection()
                results[name] = True
            except NotificationError as e:
                logger.warning("provider_connection_failed", provider=name, error=str(e))
                results[name] = False
        return results

    # ── Dispatch ────────────────────────────────────────────────

    async def send_notification(
        self, provider_name: str, request: NotificationRequest
    ) -> NotificationResponse:
        """Preprocess *request* and hand it to *provider_name*.

        Never raises for dispatch problems: the response carries
        ``success=False`` and the typed error in ``error``.
        """
        provider = self._providers.get(provider_name)
        if provider is None:
            return self._failure(
                ProviderNotFoundError(f"provider '{provider_name}' not found"),
                provider_name,
                request,
            )
        if not provider.is_enabled():
            return self._failure(
                ProviderDisabledError(f"provider '{provider_name}' is disabled"),
                provider_name,
                request,
            )

        try:
            request = self._preprocess(provider, request)
        except PreprocessFailedError as e:
            return self._failure(e, provider_name, request)

        try:
            destination = await provider.send_message(request)
        except NotificationError as e:
            return self._failure(e, provider_name, request)

        logger.info(
            "notification_sent",
            provider=provider_name,
            level=request.level,
            destination=destination,
        )
        return NotificationResponse(
            success=True,
            message="notification sent",
            provider=provider_name,
            level=request.level,
            chat_id=request.chat_id,
            channel=destination,
        )

    def _preprocess(self, provider: Provider, request: NotificationRequest) -> NotificationRequest:
        """Fill ``message`` from ``alert_data`` unless a message was given."""
        if request.message:
            return request
        if request.alert_data is None:
            raise PreprocessFailedError("request has neither message nor alert_data")

        engine = self._engine
        if engine is None:
            raise PreprocessFailedError("no template engine configured")

        language = engine.get_default_language(request.template_language or provider.template_language)
        data = build_template_data(request.alert_data, self._format_options(provider))
        try:
            message = engine.render_for_platform(language, provider.name, data)
        except TemplateError as e:
            raise PreprocessFailedError(f"failed to render alert for {provider.name}: {e}") from e

        return request.model_copy(update={"message": message, "template_language": language})

    def _format_options(self, provider: Provider) -> FormatOptions:
        # Unset options resolve against the engine's active config at render.
        return self._profile_options.get(provider.template_mode, FormatOptions())

    def _failure(
        self,
        error: NotificationError,
        provider_name: str,
        request: NotificationRequest,
    ) -> NotificationResponse:
        logger.warning(
            "notification_failed",
            provider=provider_name,
            error_type=type(error).__name__,
            error=str(error),
        )
        return NotificationResponse(
            success=False,
            message="notification failed",
            details=str(error),
            provider=provider_name,
            level=request.level,
            chat_id=request.chat_id,
            channel=request.channel,
            error=error,
        )

    # ── Alert entry point ───────────────────────────────────────

    def render_alert(
        self,
        provider: Provider,
        alert_data: AlertManagerData,
        template_language: str = "",
    ) -> str:
        """Render *alert_data* for *provider*, falling back to the built-in text.

        A template problem never stops the alert: the built-in formatter is
        used whenever rendering raises a TemplateError.
        """
        engine = self._engine
        language = template_language or provider.template_language
        data = build_template_data(alert_data, self._format_options(provider))

        if engine is not None:
            language = engine.get_default_language(language)
            try:
                return engine.render_for_platform(language, provider.name, data)
            except TemplateError as e:
                logger.warning(
                    "template_fallback_builtin",
                    provider=provider.name,
                    language=language,
                    error=str(e),
                )
            fallback = engine.current_format_options()
        else:
            fallback = full_default_config().format_options

        return self._builtin(data, fallback, language, provider.name)

    @staticmethod
    def _builtin(data: TemplateData, fallback: FormatOptions, language: str, platform: str) -> str:
        options = data.format_options.merged_with(fallback)
        data = data.model_copy(update={"format_options": options, "platform": platform})
        return format_builtin_message(data, language, platform)

    async def notify_alert(
        self,
        provider_name: str,
        alert_data: AlertManagerData,
        *,
        level: str = "",
        channel: str = "",
        chat_id: str = "",
        template_language: str = "",
        separate_by_status: bool = False,
    ) -> list[NotificationResponse]:
        """Render and send an Alertmanager batch, one response per message.

        With *separate_by_status* a mixed batch goes out as a firing message
        followed by a resolved one.
        """
        batches = split_by_status(alert_data) if separate_by_status else [alert_data]
        provider = self._providers.get(provider_name)

        responses: list[NotificationResponse] = []
        for batch in batches:
            message = self.render_alert(provider, batch, template_language) if provider else ""
            request = NotificationRequest(
                provider_name=provider_name,
                level=level,
                channel=channel,
                chat_id=chat_id,
                message=message,
                alert_data=batch,
                template_language=template_language,
            )
            responses.append(await self.send_notification(provider_name, request))
        return responses

    # ── Lifecycle ───────────────────────────────────────────────

    async def close(self) -> None:
        for name, provider in self._providers.items():
            try:
                await provider.close()
            except Exception:
                logger.exception("provider_close_error", provider=name)
