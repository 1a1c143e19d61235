import logging

from beholder.api.notify.models import Notification

from .models import FailureEvent

logger = logging.getLogger(__name__)

# 알려진 오류 코드 -> 제안하는 조치
KNOWN_ERRORS = {
    "ERRDLSTALL": "Try finding another source.",
}


async def handle_failure(event: FailureEvent) -> list[Notification]:
    logger.info(f"[{event.job_id}] {event.stage} failed: {event.message} (code: {event.code})")

    notifications = [Notification.comment(event.job_id, f"{event.stage}: Failed: {event.message}")]

    potential_fix = KNOWN_ERRORS.get(event.code) if event.code else None
    if potential_fix:
        notifications.append(Notification.comment(event.job_id, f"Suggested fix: {potential_fix}"))

    return notifications
