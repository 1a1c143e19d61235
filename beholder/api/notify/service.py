"""
알림 전달 서비스

핸들러가 만든 Notification 목록을 순서대로 NotificationSink에 전달한다.
한 건의 실패가 나머지 알림이나 이벤트 처리에 영향을 주지 않도록
모든 호출을 개별적으로 감싼다.
"""
import logging
from typing import Optional

from beholder.api.jobs.models import CreatorKind
from beholder.config.env import Settings
from beholder.errors import JobLookupError, SinkError

from .models import Notification, NotificationKind
from .sink import NotificationSink

logger = logging.getLogger(__name__)

_TRACKER_KINDS = (NotificationKind.COMMENT, NotificationKind.MOVE_CARD)


class NotificationService:
    def __init__(self, sink: NotificationSink, jobs, settings: Settings):
        self.sink = sink
        self.jobs = jobs
        self.settings = settings
        self.delivered = 0
        self.failed = 0

    async def deliver(self, notifications: list[Notification]) -> None:
        # 한 번의 전달 안에서는 job 조회 결과를 재사용
        refs: dict[str, Optional[str]] = {}

        for notification in notifications:
            try:
                await self._deliver_one(notification, refs)
            except SinkError as exc:
                self.failed += 1
                logger.error(f"Failed to deliver {notification.kind.value} for job {notification.job_id}: {exc}")
            except Exception:
                self.failed += 1
                logger.exception(f"Unexpected error delivering {notification.kind.value} for job {notification.job_id}")

    async def _deliver_one(self, notification: Notification, refs: dict[str, Optional[str]]) -> None:
        if notification.kind in _TRACKER_KINDS:
            if self.settings.disable_tracker_notifications:
                logger.debug(f"tracker notifications disabled, dropping {notification.kind.value}")
                return

            ref = notification.ref or await self._tracker_ref(notification.job_id, refs)
            if not ref:
                return

            if notification.kind == NotificationKind.COMMENT:
                await self.sink.post_comment(ref, notification.text or "")
            else:
                await self.sink.move_card(ref, notification.list_id)

        elif notification.kind == NotificationKind.CHAT:
            await self.sink.post_chat_message(self.settings.chat_channel, notification.text or "")

        elif notification.kind == NotificationKind.REFRESH_MEDIA:
            await self.sink.refresh_media_library(self.settings.media_refresh_url)

        self.delivered += 1

    async def _tracker_ref(self, job_id: str, refs: dict[str, Optional[str]]) -> Optional[str]:
        if job_id in refs:
            return refs[job_id]

        ref = None
        try:
            job = await self.jobs.get_job(job_id)
        except JobLookupError as exc:
            logger.warning(f"Not notifying tracker: {exc}")
        else:
            if job.creator_kind == CreatorKind.TRELLO and job.creator_ref:
                ref = job.creator_ref
            else:
                logger.info(f"[{job_id}] not created by the tracker, skipping tracker notification")

        refs[job_id] = ref
        return ref
