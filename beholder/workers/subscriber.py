"""
Redis pub/sub 구독 워커

토픽마다 큐와 consumer 태스크를 하나씩 두어
같은 토픽의 메시지는 순서대로, 다른 토픽끼리는 동시에 처리한다.
"""
import asyncio
import logging
from typing import Callable, Optional

from redis.asyncio import Redis

from beholder.dispatch import DispatchResult, EventRouter, Topic

logger = logging.getLogger(__name__)


class TopicSubscriber:
    def __init__(self, redis: Redis, router: EventRouter, queue_size: int = 1000):
        self.redis = redis
        self.router = router
        self.queues: dict[str, asyncio.Queue] = {
            topic.value: asyncio.Queue(maxsize=queue_size) for topic in Topic
        }
        self._consumers: list[asyncio.Task] = []

    async def enqueue(self, channel: str, payload) -> None:
        queue = self.queues.get(channel)
        if queue is None:
            # 라우터에서 경고/ack 처리
            await self.router.dispatch(channel, payload)
            return
        await queue.put(payload)

    async def consume(self, topic: str) -> None:
        queue = self.queues[topic]
        while True:
            payload = await queue.get()
            try:
                result = await self.router.dispatch(topic, payload)
                if result == DispatchResult.ERROR:
                    logger.error(f"message on {topic} was not processed")
            finally:
                queue.task_done()

    def start_consumers(self) -> None:
        for topic in self.queues:
            self._consumers.append(asyncio.create_task(self.consume(topic), name=f"consume:{topic}"))

    async def run(self) -> None:
        pubsub = self.redis.pubsub(ignore_subscribe_messages=True)
        channels = list(self.queues)
        await pubsub.subscribe(*channels)
        for channel in channels:
            logger.info(f"listening on pubsub queue: {channel}")

        self.start_consumers()
        try:
            while True:
                self._raise_if_consumer_failed()
                message: Optional[dict] = await pubsub.get_message(timeout=1.0)
                if message is None:
                    continue
                channel = message["channel"]
                if isinstance(channel, bytes):
                    channel = channel.decode("utf-8")
                await self.enqueue(channel, message["data"])
        finally:
            await self.stop()
            await pubsub.unsubscribe(*channels)
            await pubsub.aclose()

    def _raise_if_consumer_failed(self) -> None:
        # 저장소 장애 등 치명적인 오류는 프로세스 재시작으로 넘긴다
        for task in self._consumers:
            if task.done() and not task.cancelled() and task.exception() is not None:
                raise task.exception()

    async def drain(self) -> None:
        """쌓인 메시지를 모두 처리할 때까지 대기"""
        await asyncio.gather(*(queue.join() for queue in self.queues.values()))

    async def stop(self) -> None:
        for task in self._consumers:
            task.cancel()
        await asyncio.gather(*self._consumers, return_exceptions=True)
        self._consumers.clear()


def worker_failure(task: asyncio.Task) -> Optional[BaseException]:
    """예외로 끝난 워커 태스크의 예외 (실행 중이거나 취소됐으면 None)"""
    if not task.done() or task.cancelled():
        return None
    return task.exception()


def shutdown_on_failure(task: asyncio.Task, shutdown: Callable[[], None]) -> None:
    """
    워커 태스크가 예외로 끝나면 로그를 남기고 shutdown 호출

    pub/sub 은 메시지를 다시 보내주지 않으므로 구독이 죽은 채로
    서버만 떠 있지 않도록 프로세스를 내린다.
    """

    def _on_done(done: asyncio.Task) -> None:
        exc = worker_failure(done)
        if exc is None:
            return
        logger.critical(f"worker {done.get_name()} stopped: {exc!r}, shutting down", exc_info=exc)
        shutdown()

    task.add_done_callback(_on_done)
