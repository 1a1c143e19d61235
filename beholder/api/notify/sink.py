"""
알림 전송 인터페이스 (트래커, 채팅, 미디어 서버)
"""

from abc import ABC, abstractmethod
from typing import Optional


class NotificationSink(ABC):
    @abstractmethod
    async def post_comment(self, ref: str, text: str) -> None:
        """Add a comment to the tracker card ref."""

    @abstractmethod
    async def move_card(self, ref: str, list_id: str) -> None:
        """Move the tracker card ref to list_id."""

    @abstractmethod
    async def post_chat_message(self, channel: str, text: str) -> None:
        """Post text to a chat channel."""

    @abstractmethod
    async def refresh_media_library(self, host: Optional[str]) -> None:
        """Ask the media server at host to rescan its library."""
