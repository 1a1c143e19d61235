"""
이름 있는 시스템 이벤트 처리 (events 채널)
"""
import logging
from typing import Any, Awaitable, Callable

from beholder.api.notify.models import Notification

from .models import NamedEvent

logger = logging.getLogger(__name__)


async def scale_up_pending(cause: Any) -> list[Notification]:
    """스케일 업 대기 중인 job들에 코멘트"""
    if not isinstance(cause, list):
        logger.warning(f"scaleUpPending expects a list of job ids, got {type(cause).__name__}")
        return []

    notifications = []
    for job_id in cause:
        logger.info(f"Notifying {job_id} of pending scale up")
        notifications.append(Notification.comment(str(job_id), "**Scale up pending**"))
    return notifications


EVENT_TABLE: dict[str, Callable[[Any], Awaitable[list[Notification]]]] = {
    "scaleUpPending": scale_up_pending,
}


async def handle_named_event(event: NamedEvent) -> list[Notification]:
    logger.info(f"got event {event.event}")

    handler = EVENT_TABLE.get(event.event)
    if handler is None:
        logger.warning(f"skipping event we dont know of: {event.event}")
        return []

    return await handler(event.cause)
