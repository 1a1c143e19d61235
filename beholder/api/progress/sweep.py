"""
장시간 stage(download)의 주기적 ETA 코멘트
"""
import asyncio
import logging
import math
from typing import Awaitable, Callable, Optional

from beholder.api.notify.models import Notification
from beholder.store import StateStore
from beholder.utils.clock import Clock, humanize_minutes, minutes_between, parse_timestamp

from .models import stage_prefix

logger = logging.getLogger(__name__)

Deliver = Callable[[list[Notification]], Awaitable[None]]


class EtaSweeper:
    """
    stage_prefix(stage) 아래의 StageRecord를 훑어 ETA 코멘트를 만든다.

    0% / 100% 에 멈춰 있는 레코드는 끝났거나 버려진 것으로 보고 삭제한다.
    이전 실행이 끝나지 않았으면 이번 실행은 건너뛴다 (큐잉하지 않음).
    """

    def __init__(
        self,
        store: StateStore,
        deliver: Optional[Deliver] = None,
        clock: Optional[Clock] = None,
        stage: str = "download",
    ):
        self.store = store
        self.deliver = deliver
        self.clock = clock or Clock()
        self.stage = stage
        self.running = False
        self.last_run_at: Optional[str] = None
        self.skipped_runs = 0
        self._tasks: set[asyncio.Task] = set()

    async def run_once(self) -> list[Notification]:
        prefix = stage_prefix(self.stage)
        notifications: list[Notification] = []

        for key in await self.store.list_keys_by_prefix(prefix):
            job_id = key[len(prefix):]
            if ":" in job_id:
                # subtask 레코드
                continue

            logger.info(f"checking {self.stage} status for {key} (job: {job_id})")
            raw_percent = await self.store.get_field(key, "percent")
            percent = _parse_percent(raw_percent)

            if percent is None:
                # 시작 직후 percent가 아직 기록되지 않은 레코드일 수 있음
                logger.info(f"{key} has no progress yet, skipping")
                continue

            if percent in (0, 100):
                logger.info(f"cleaning up old {self.stage} at {raw_percent}")
                await self.store.delete_key(key)
                continue

            started = parse_timestamp(await self.store.get_field(key, "started"))
            if started is None:
                logger.warning(f"{key} has progress {percent}% but no start time, skipping eta")
                continue

            elapsed = minutes_between(started, self.clock.now())
            # 경과 분 / 진행률 * 남은 진행률
            eta_minutes = math.floor((elapsed / percent) * (100 - percent))

            notifications.append(
                Notification.comment(
                    job_id,
                    f"{self.stage}: progress **{percent}%** (eta: {humanize_minutes(eta_minutes)})",
                )
            )

        return notifications

    async def tick(self) -> list[Notification]:
        if self.running:
            self.skipped_runs += 1
            logger.warning(f"previous {self.stage} eta sweep still running, skipping")
            return []

        self.running = True
        try:
            notifications = await self.run_once()
            if self.deliver and notifications:
                await self.deliver(notifications)
            return notifications
        finally:
            self.running = False
            self.last_run_at = self.clock.now_iso()

    async def run_forever(self, interval: float) -> None:
        logger.info(f"started {self.stage} watcher (every {interval:.0f}s)")
        while True:
            # 다음 tick이 이전 tick과 겹치지 않도록 백그라운드로 실행
            task = asyncio.create_task(self._safe_tick())
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
            await asyncio.sleep(interval)

    async def _safe_tick(self) -> None:
        try:
            await self.tick()
        except Exception:
            logger.exception(f"{self.stage} eta sweep failed")


def _parse_percent(value: Optional[str]) -> Optional[int]:
    if value in (None, ""):
        return None
    try:
        return int(float(value))
    except ValueError:
        return None
