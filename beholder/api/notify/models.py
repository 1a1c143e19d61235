"""
외부 알림 관련 모델
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class NotificationKind(str, Enum):
    """알림 종류"""

    COMMENT = "comment"  # 트래커 카드 코멘트
    MOVE_CARD = "move_card"  # 트래커 카드 리스트 이동
    CHAT = "chat"  # 채팅 채널 메시지
    REFRESH_MEDIA = "refresh_media"  # 미디어 라이브러리 갱신


class Notification(BaseModel):
    """핸들러가 만들어 내는 알림 한 건"""

    kind: NotificationKind = NotificationKind.COMMENT
    job_id: str
    text: Optional[str] = None
    ref: Optional[str] = None  # 이미 확인된 트래커 카드 ID
    list_id: Optional[str] = None  # MOVE_CARD 대상 리스트

    @classmethod
    def comment(cls, job_id: str, text: str) -> "Notification":
        return cls(kind=NotificationKind.COMMENT, job_id=job_id, text=text)
