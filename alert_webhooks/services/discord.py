"""Discord REST API client (bot token)."""

from __future__ import annotations

import structlog

from alert_webhooks.core.config import DiscordConfig
from alert_webhooks.notification.exceptions import DestinationAPIError
from alert_webhooks.services.base import HTTPService, body_preview

logger = structlog.get_logger(__name__)


class DiscordService(HTTPService):
    """Creates channel messages with ``POST /channels/{id}/messages``."""

    platform = "discord"

    def __init__(self, config: DiscordConfig, timeout_secs: float = 10.0) -> None:
        super().__init__(timeout_secs)
        self._token = config.token.get_secret_value()
        self._api_base = config.api_base.rstrip("/")

    async def _call(self, method: str, path: str, payload: dict[str, object] | None = None) -> dict:
        status, data, body = await self._request(
            method,
            f"{self._api_base}{path}",
            json=payload,
            headers={"Authorization": f"Bot {self._token}"},
        )
        if 200 <= status < 300:
            return data
        if status == 401:
            error = "401: Unauthorized"
        else:
            error = data.get("message") or f"HTTP {status}: {body_preview(body)}"
        logger.warning("discord_api_error", path=path, status=status, error=error)
        raise DestinationAPIError(error)

    async def send_message(self, destination: str, text: str) -> None:
        await self._call("POST", f"/channels/{destination}/messages", {"content": text})

    async def test_connection(self) -> None:
        data = await self._call("GET", "/users/@me")
        logger.info("discord_connected", bot=data.get("username", ""))
