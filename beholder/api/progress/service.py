"""
진행도 상태 머신

progress 이벤트 하나를 받아 StageRecord/SubtaskRecord를 갱신하고
트래커에 남길 코멘트(Notification) 목록을 돌려준다.

이벤트는 순서가 뒤바뀌거나 중복으로 올 수 있으므로 모든 전이는
(percent, subtask, subtask_count) 비교와 저장소 값만으로 결정한다.
"""
import logging
from typing import Awaitable, Callable, NamedTuple, Optional

from beholder.api.notify.models import Notification
from beholder.store import StateStore
from beholder.utils.clock import Clock, format_minutes, minutes_between, parse_timestamp

from .models import (
    IGNORED_STAGES,
    ProgressEvent,
    StageRecord,
    SubtaskRecord,
    stage_key,
    subtask_key,
)

logger = logging.getLogger(__name__)


def _is_stage_start(event: ProgressEvent) -> bool:
    # subtask_count == 0 이면 0 == 0 으로 항상 참 (subtask 없는 stage)
    return event.percent == 0 and event.subtask == event.subtask_count


def _is_stage_finish(event: ProgressEvent) -> bool:
    return event.percent == 100 and event.subtask == event.subtask_count


def _is_subtask_start(event: ProgressEvent) -> bool:
    return event.percent == 0 and event.subtask_count > 0 and event.subtask != event.subtask_count


def _is_subtask_finish(event: ProgressEvent) -> bool:
    return event.percent == 100 and event.subtask > 0 and event.subtask != event.subtask_count


class Transition(NamedTuple):
    name: str
    matches: Callable[[ProgressEvent], bool]
    action: Callable[..., Awaitable[list[Notification]]]


class ProgressStateMachine:
    def __init__(self, store: StateStore, clock: Optional[Clock] = None):
        self.store = store
        self.clock = clock or Clock()

    async def handle_progress(self, event: ProgressEvent) -> list[Notification]:
        """
        progress 이벤트 처리

        Args:
            event: 디코딩된 진행도 이벤트

        Returns:
            트래커에 남길 코멘트 목록 (없으면 빈 리스트)
        """
        if event.stage in IGNORED_STAGES:
            logger.debug(f"Skipping {event.stage} event for job {event.job_id}")
            return []

        key = stage_key(event.job_id, event.stage)
        transition = match_transition(event)

        notifications: list[Notification] = []
        if transition is None:
            logger.debug(
                f"[{event.job_id}] {event.stage} {event.percent}% "
                f"(subtask {event.subtask}/{event.subtask_count}): no transition"
            )
        else:
            notifications = await transition.action(self, event, key)

        # 어떤 전이든 마지막 진행도는 항상 기록 (ETA sweep에서 사용)
        await self.store.set_field(key, "percent", str(event.percent))
        return notifications

    async def get_stage_record(self, job_id: str, stage: str) -> Optional[StageRecord]:
        fields = await self.store.get_all(stage_key(job_id, stage))
        if not fields:
            return None
        return StageRecord.from_fields(job_id, stage, fields)

    async def get_subtask_record(self, job_id: str, stage: str, subtask: int) -> Optional[SubtaskRecord]:
        fields = await self.store.get_all(subtask_key(job_id, stage, subtask))
        if not fields:
            return None
        return SubtaskRecord.from_fields(job_id, stage, subtask, fields)

    async def _start_stage(self, event: ProgressEvent, key: str) -> list[Notification]:
        logger.info(f"[{event.job_id}] started stage {event.stage} on {event.host}")
        await self.store.set_field(key, "started", self.clock.now_iso())

        text = f"Started stage **{event.stage}**"
        if event.host:
            text += f" on _{event.host}_"
        return [Notification.comment(event.job_id, text)]

    async def _finish_stage(self, event: ProgressEvent, key: str) -> list[Notification]:
        started = parse_timestamp(await self.store.get_field(key, "started"))
        if started is None:
            logger.warning(
                f"[{event.job_id}] finished stage {event.stage} without a recorded start, "
                f"skipping duration"
            )
            return []

        now = self.clock.now()
        await self.store.set_field(key, "finished", now.isoformat())

        elapsed = minutes_between(started, now)
        logger.info(f"[{event.job_id}] finished stage {event.stage}, took {elapsed:.2f} minutes")
        return [
            Notification.comment(
                event.job_id,
                f"Finished stage '{event.stage}' in **{format_minutes(elapsed)} minutes**.",
            )
        ]

    async def _start_subtask(self, event: ProgressEvent, key: str) -> list[Notification]:
        if not 0 < event.subtask <= event.subtask_count:
            logger.debug(
                f"[{event.job_id}] ignoring start of subtask {event.subtask} "
                f"outside 1..{event.subtask_count}"
            )
            return []

        logger.info(f"[{event.job_id}] started {event.stage} subtask {event.subtask}/{event.subtask_count}")
        await self.store.set_field(
            subtask_key(event.job_id, event.stage, event.subtask),
            "started",
            self.clock.now_iso(),
        )
        # subtask 시작은 코멘트를 남기지 않음
        return []

    async def _finish_subtask(self, event: ProgressEvent, key: str) -> list[Notification]:
        if event.subtask > event.subtask_count:
            logger.warning(
                f"[{event.job_id}] subtask {event.subtask} is outside 1..{event.subtask_count}"
            )
            return []

        sub_key = subtask_key(event.job_id, event.stage, event.subtask)
        started = parse_timestamp(await self.store.get_field(sub_key, "started"))
        if started is None:
            logger.warning(
                f"[{event.job_id}] finished {event.stage} subtask {event.subtask} "
                f"without a recorded start"
            )
            return []

        now = self.clock.now()
        await self.store.set_field(sub_key, "finished", now.isoformat())

        elapsed = minutes_between(started, now)
        logger.info(f"[{event.job_id}] finished {event.stage} subtask {event.subtask}/{event.subtask_count}")

        notifications = [
            Notification.comment(
                event.job_id,
                f"{event.stage}: Finished sub-task **{event.subtask}** out of "
                f"**{event.subtask_count}** in **{format_minutes(elapsed)} minutes**",
            )
        ]
        if event.subtask == 1:
            # 첫 subtask 소요 시간으로 단순 선형 추정
            projected = elapsed * event.subtask_count
            notifications.append(
                Notification.comment(
                    event.job_id,
                    f"{event.stage}: Estimating completion in **{format_minutes(projected)} minutes**",
                )
            )
        return notifications

    # 위에서부터 처음 일치하는 전이 하나만 적용
    TRANSITIONS = (
        Transition("stage_start", _is_stage_start, _start_stage),
        Transition("stage_finish", _is_stage_finish, _finish_stage),
        Transition("subtask_start", _is_subtask_start, _start_subtask),
        Transition("subtask_finish", _is_subtask_finish, _finish_subtask),
    )


def match_transition(event: ProgressEvent) -> Optional[Transition]:
    for transition in ProgressStateMachine.TRANSITIONS:
        if transition.matches(event):
            return transition
    return None


def classify(event: ProgressEvent) -> Optional[str]:
    """이벤트가 해당하는 전이 이름 (없으면 None)"""
    transition = match_transition(event)
    return transition.name if transition else None
