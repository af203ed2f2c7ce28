"""Slack Web API client."""

from __future__ import annotations

import structlog

from alert_webhooks.core.config import SlackConfig
from alert_webhooks.notification.exceptions import DestinationAPIError
from alert_webhooks.services.base import HTTPService, body_preview

logger = structlog.get_logger(__name__)


class SlackService(HTTPService):
    """Posts mrkdwn messages through ``chat.postMessage``."""

    platform = "slack"

    def __init__(self, config: SlackConfig, timeout_secs: float = 10.0) -> None:
        super().__init__(timeout_secs)
        self._config = config
        self._token = config.token.get_secret_value()
        self._api_base = config.api_base.rstrip("/")

    async def _call(self, method: str, payload: dict[str, object] | None = None) -> dict:
        # The Web API reports failures as HTTP 200 with ok=false.
        status, data, body = await self._request(
            "POST",
            f"{self._api_base}/{method}",
            json=payload or {},
            headers={"Authorization": f"Bearer {self._token}"},
        )
        if status == 200 and data.get("ok"):
            return data
        error = data.get("error") or f"HTTP {status}: {body_preview(body)}"
        logger.warning("slack_api_error", method=method, status=status, error=error)
        raise DestinationAPIError(error)

    def _message_payload(self, destination: str, text: str) -> dict[str, object]:
        payload: dict[str, object] = {
            "channel": destination,
            "text": text,
            "mrkdwn": True,
            "link_names": self._config.link_names,
            "unfurl_links": self._config.unfurl_links,
            "unfurl_media": self._config.unfurl_media,
        }
        if self._config.username:
            payload["username"] = self._config.username
        if self._config.icon_emoji:
            payload["icon_emoji"] = self._config.icon_emoji
        elif self._config.icon_url:
            payload["icon_url"] = self._config.icon_url
        return payload

    async def send_message(self, destination: str, text: str) -> None:
        await self._call("chat.postMessage", self._message_payload(destination, text))

    async def test_connection(self) -> None:
        data = await self._call("auth.test")
        logger.info("slack_connected", team=data.get("team", ""), user=data.get("user", ""))
