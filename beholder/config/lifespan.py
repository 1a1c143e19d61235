import asyncio
import logging
import os
import signal
from contextlib import asynccontextmanager

from fastapi import FastAPI

from beholder.api.jobs.service import JobService
from beholder.api.notify.http_sink import HttpNotificationSink
from beholder.api.notify.service import NotificationService
from beholder.api.progress.service import ProgressStateMachine
from beholder.api.progress.sweep import EtaSweeper
from beholder.api.status.service import StatusTransitionHandler
from beholder.dispatch import build_router
from beholder.store import RedisStateStore
from beholder.workers.subscriber import TopicSubscriber, shutdown_on_failure

from .db import make_db
from .env import settings
from .redis import get_redis

logger = logging.getLogger(__name__)


def _terminate() -> None:
    os.kill(os.getpid(), signal.SIGTERM)


@asynccontextmanager
async def lifespan(app: FastAPI):
    redis = get_redis()
    await redis.ping()

    db = make_db()
    jobs = JobService(db)
    store = RedisStateStore(redis)
    sink = HttpNotificationSink(settings)
    notifier = NotificationService(sink, jobs, settings)

    machine = ProgressStateMachine(store)
    router = build_router(machine, StatusTransitionHandler(jobs, settings), notifier)
    sweeper = EtaSweeper(store, deliver=notifier.deliver, stage=settings.eta_stage)

    app.state.machine = machine
    app.state.router = router
    app.state.sweeper = sweeper

    # pub/sub 은 별도 연결 사용
    subscriber = TopicSubscriber(get_redis(), router)
    tasks = [
        asyncio.create_task(subscriber.run(), name="subscriber"),
        asyncio.create_task(sweeper.run_forever(settings.eta_sweep_interval_seconds), name="eta-sweep"),
    ]
    # 저장소 장애 등으로 워커가 죽으면 프로세스 재시작
    for task in tasks:
        shutdown_on_failure(task, _terminate)
    app.state.workers = tasks
    logger.info("initialized")

    try:
        yield
    finally:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        await sink.aclose()
        await subscriber.redis.aclose()
        await redis.aclose()
        db.client.close()
