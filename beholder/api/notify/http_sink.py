"""
HTTP 기반 NotificationSink (Trello REST API, 채팅 웹훅, 미디어 서버)
"""
import logging
from typing import Any, Optional

import httpx

from beholder.config.env import Settings
from beholder.errors import SinkError

from .sink import NotificationSink

logger = logging.getLogger(__name__)


class HttpNotificationSink(NotificationSink):
    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None):
        self.settings = settings
        self.client = client or httpx.AsyncClient(timeout=settings.http_timeout_seconds)

    def _trello_auth(self) -> dict[str, str]:
        return {
            "key": self.settings.trello_key or "",
            "token": self.settings.trello_token or "",
        }

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self.client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise SinkError(
                f"{method} {exc.request.url.path} returned {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise SinkError(f"{method} {url} failed: {exc}") from exc
        return response

    async def post_comment(self, ref: str, text: str) -> None:
        logger.info(f"creating comment on {ref} with text: {text}")
        await self._request(
            "POST",
            f"{self.settings.trello_api_url}/1/cards/{ref}/actions/comments",
            params={**self._trello_auth(), "text": text or "Failed to retrieve comment text."},
        )

    async def move_card(self, ref: str, list_id: str) -> None:
        logger.info(f"moving card {ref} to list {list_id}")
        await self._request(
            "PUT",
            f"{self.settings.trello_api_url}/1/cards/{ref}",
            params={**self._trello_auth(), "idList": list_id},
        )

    async def post_chat_message(self, channel: str, text: str) -> None:
        if not self.settings.chat_webhook_url:
            logger.info("chat webhook not configured, skipping chat message")
            return
        await self._request(
            "POST",
            self.settings.chat_webhook_url,
            json={"channel": channel, "text": text},
        )

    async def refresh_media_library(self, host: Optional[str]) -> None:
        url = host or self.settings.media_refresh_url
        if not url:
            logger.info("media refresh url not configured, skipping refresh")
            return
        params = {}
        if self.settings.media_refresh_token:
            params["X-Plex-Token"] = self.settings.media_refresh_token
        await self._request("GET", url, params=params)

    async def aclose(self) -> None:
        await self.client.aclose()
