"""Convenience factory for wiring the notification stack."""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from alert_webhooks.core.config import Settings
from alert_webhooks.notification.manager import NotificationManager
from alert_webhooks.notification.providers import DestinationService
from alert_webhooks.notification.types import ProviderKind
from alert_webhooks.services import DiscordService, SlackService, TelegramService
from alert_webhooks.templating import TemplateEngine, TemplateError

logger = structlog.get_logger(__name__)


@dataclass
class NotificationStack:
    """Everything a caller needs to render and dispatch alerts."""

    engine: TemplateEngine
    manager: NotificationManager
    services: dict[str, DestinationService]

    async def close(self) -> None:
        await self.manager.close()


def create_services(settings: Settings) -> dict[str, DestinationService]:
    """One wire client per enabled destination."""
    services: dict[str, DestinationService] = {}
    if settings.telegram.enabled:
        services[ProviderKind.TELEGRAM] = TelegramService(settings.telegram)
    if settings.slack.enabled:
        services[ProviderKind.SLACK] = SlackService(settings.slack)
    if settings.discord.enabled:
        services[ProviderKind.DISCORD] = DiscordService(settings.discord)
    return services


def create_template_engine(settings: Settings) -> TemplateEngine:
    """Load the configured profile and templates.

    A template directory that cannot be loaded leaves the engine empty:
    every render then fails and callers fall back to the built-in text.
    """
    engine = TemplateEngine(config_dir=settings.templates.config_dir)
    engine.load_config(settings.templates.profile)
    try:
        engine.load_templates(settings.templates.directory)
    except TemplateError as e:
        logger.error(
            "template_load_failed_degraded",
            template_dir=settings.templates.directory,
            error=str(e),
        )
    return engine


def create_notification_stack(
    settings: Settings,
    services: dict[str, DestinationService] | None = None,
) -> NotificationStack:
    """Build engine + manager + services from *settings*.

    Pass *services* to substitute the wire clients (tests, custom transports).
    """
    engine = create_template_engine(settings)
    if services is None:
        services = create_services(settings)
    manager = NotificationManager()
    manager.initialize(engine, settings, services)
    return NotificationStack(engine=engine, manager=manager, services=services)
