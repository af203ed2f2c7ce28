"""Shared aiohttp plumbing for platform API clients."""

from __future__ import annotations

import asyncio
import json
from typing import Any

import aiohttp
import structlog

from alert_webhooks.notification.exceptions import DestinationAPIError

logger = structlog.get_logger(__name__)

_BODY_PREVIEW = 200


class HTTPService:
    """Owns one lazily created aiohttp session.

    Transport failures are raised as DestinationAPIError so providers only
    ever see one error type from the wire layer.
    """

    platform = "http"

    def __init__(self, timeout_secs: float = 10.0) -> None:
        self._timeout = aiohttp.ClientTimeout(total=timeout_secs)
        self._session: aiohttp.ClientSession | None = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session

    async def _request(self, method: str, url: str, **kwargs: Any) -> tuple[int, dict[str, Any], str]:
        """Perform one call and return ``(status, decoded JSON object, raw body)``."""
        try:
            session = self._get_session()
            async with session.request(method, url, **kwargs) as resp:
                status = resp.status
                body = await resp.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning("http_request_error", platform=self.platform, error=str(e))
            raise DestinationAPIError(f"{self.platform} request failed: {e}") from e

        try:
            data = json.loads(body) if body else {}
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}
        return status, data, body

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None


def body_preview(body: str) -> str:
    return body[:_BODY_PREVIEW]
