"""Tests for structlog setup."""

from __future__ import annotations

import logging

import structlog

from alert_webhooks.core.config import LoggingConfig
from alert_webhooks.core.logging import setup_logging


class TestSetupLogging:
    def test_level_from_config(self) -> None:
        setup_logging(LoggingConfig(level="WARNING", format="console"))
        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1

    def test_level_override_wins(self) -> None:
        setup_logging(LoggingConfig(level="WARNING"), level="debug")
        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("aiohttp.access").level == logging.WARNING

    def test_json_renderer(self) -> None:
        setup_logging(LoggingConfig(level="INFO", format="json"))
        formatter = logging.getLogger().handlers[0].formatter
        assert isinstance(formatter, structlog.stdlib.ProcessorFormatter)
        assert isinstance(formatter.processors[-1], structlog.processors.JSONRenderer)

    def test_repeat_calls_replace_handler(self) -> None:
        setup_logging(LoggingConfig())
        setup_logging(LoggingConfig())
        assert len(logging.getLogger().handlers) == 1
