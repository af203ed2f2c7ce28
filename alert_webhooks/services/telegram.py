"""Telegram Bot API client."""

from __future__ import annotations

import structlog

from alert_webhooks.core.config import TelegramConfig
from alert_webhooks.notification.exceptions import DestinationAPIError
from alert_webhooks.services.base import HTTPService, body_preview

logger = structlog.get_logger(__name__)


class TelegramService(HTTPService):
    """Sends HTML-formatted messages through ``sendMessage``."""

    platform = "telegram"

    def __init__(self, config: TelegramConfig, timeout_secs: float = 10.0) -> None:
        super().__init__(timeout_secs)
        self._token = config.bot_token.get_secret_value()
        self._api_base = config.api_base.rstrip("/")

    def _url(self, method: str) -> str:
        return f"{self._api_base}/bot{self._token}/{method}"

    async def _call(self, method: str, payload: dict[str, object] | None = None) -> dict:
        status, data, body = await self._request("POST", self._url(method), json=payload or {})
        if status == 200 and data.get("ok"):
            return data
        description = data.get("description") or f"HTTP {status}: {body_preview(body)}"
        logger.warning("telegram_api_error", method=method, status=status, description=description)
        raise DestinationAPIError(description)

    async def send_message(self, destination: str, text: str) -> None:
        await self._call(
            "sendMessage",
            {
                "chat_id": destination,
                "text": text,
                "parse_mode": "HTML",
                "disable_web_page_preview": True,
            },
        )

    async def test_connection(self) -> None:
        data = await self._call("getMe")
        logger.info("telegram_connected", bot=data.get("result", {}).get("username", ""))
