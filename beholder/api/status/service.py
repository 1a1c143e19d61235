"""
job 상태 전이 처리

상태를 저장하고, 트래커 카드를 상태에 맞는 리스트로 옮기고,
배포 완료 시 후속 훅(채팅 알림, 미디어 라이브러리 갱신)을 요청한다.
"""
import logging
from typing import Optional

from beholder.api.jobs.models import CreatorKind, JobStatus
from beholder.api.notify.models import Notification, NotificationKind
from beholder.config.env import Settings
from beholder.errors import ConfigMappingError, JobLookupError

from .models import StatusEvent

logger = logging.getLogger(__name__)


class StatusTransitionHandler:
    def __init__(self, jobs, settings: Settings):
        self.jobs = jobs
        self.status_lists = settings.status_lists
        self.deploy_hooks_enabled = settings.deploy_hooks_enabled

    def resolve_list(self, status: JobStatus) -> str:
        list_id = self.status_lists.get(status.value)
        if not list_id:
            raise ConfigMappingError(f"No list configured for status {status.value}")
        return list_id

    async def handle_status(self, event: StatusEvent) -> list[Notification]:
        # 1. 상태 저장은 알림 여부와 관계없이 항상 먼저
        await self.jobs.set_status(event.job_id, event.status)

        label = event.status.label
        logger.info(f"[{event.job_id}] status -> {label}{f' (host: {event.host})' if event.host else ''}")

        try:
            job = await self.jobs.get_job(event.job_id)
        except JobLookupError as exc:
            logger.warning(f"Skipping notifications for status {label}: {exc}")
            return []

        notifications: list[Notification] = []

        if job.creator_kind != CreatorKind.TRELLO:
            logger.info(
                f"[{event.job_id}] created by {job.creator_kind.value}, skipping tracker notification"
            )
        else:
            move = self._card_move(event, job.creator_ref)
            if move:
                notifications.append(move)

        if event.status == JobStatus.DEPLOYED and self.deploy_hooks_enabled:
            notifications.append(
                Notification(
                    kind=NotificationKind.CHAT,
                    job_id=event.job_id,
                    text=f"Job `{event.job_id}` has been deployed",
                )
            )
            notifications.append(Notification(kind=NotificationKind.REFRESH_MEDIA, job_id=event.job_id))

        return notifications

    def _card_move(self, event: StatusEvent, card_ref: Optional[str]) -> Optional[Notification]:
        if not card_ref:
            logger.warning(f"[{event.job_id}] tracker job has no card reference")
            return None

        try:
            list_id = self.resolve_list(event.status)
        except ConfigMappingError as exc:
            logger.warning(f"[{event.job_id}] not moving card {card_ref}: {exc}")
            return None

        return Notification(
            kind=NotificationKind.MOVE_CARD,
            job_id=event.job_id,
            ref=card_ref,
            list_id=list_id,
        )
