"""
토픽 이름 -> 핸들러 라우팅

토픽은 닫힌 열거형이며 라우트는 시작 시점에 등록/검증된다.
실행 중에 모르는 토픽이 들어오면 경고만 남기고 ack 한다.
"""
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, NamedTuple, Union

from pydantic import BaseModel, ValidationError

from beholder.errors import DecodeError, StoreUnavailableError

logger = logging.getLogger(__name__)

RawPayload = Union[str, bytes]


class Topic(str, Enum):
    PROGRESS = "progress"
    ERROR = "error"
    STATUS = "status"
    EVENTS = "events"
    TELEMETRY_PROGRESS = "telemetry.progress"
    TELEMETRY_STATUS = "telemetry.status"


class DispatchResult(str, Enum):
    ACK = "ack"
    ERROR = "error"


class Route(NamedTuple):
    decode: Callable[[RawPayload], Any]
    handle: Callable[[Any], Awaitable[None]]


def json_decoder(model: type[BaseModel]) -> Callable[[RawPayload], BaseModel]:
    """JSON 페이로드를 pydantic 모델로 디코딩하는 decoder 생성"""

    def decode(raw: RawPayload) -> BaseModel:
        try:
            return model.model_validate_json(raw)
        except ValidationError as exc:
            raise DecodeError(f"invalid {model.__name__} payload: {exc.error_count()} error(s)") from exc

    return decode


class EventRouter:
    def __init__(self):
        self.routes: dict[Topic, Route] = {}
        self.stats = {
            "received": 0,
            "acked": 0,
            "dropped": 0,
            "unknown": 0,
            "errors": 0,
        }

    def register(self, topic: Union[Topic, str], route: Route) -> None:
        # 열거형에 없는 토픽이면 ValueError (시작 시 설정 오류 검출)
        topic = Topic(topic)
        if topic in self.routes:
            raise ValueError(f"topic {topic.value} already registered")
        self.routes[topic] = route
        logger.info(f"registered topic: {topic.value}")

    def ensure_complete(self) -> None:
        missing = [topic.value for topic in Topic if topic not in self.routes]
        if missing:
            raise ValueError(f"no route registered for topics: {', '.join(missing)}")

    async def dispatch(self, topic: str, raw: RawPayload) -> DispatchResult:
        self.stats["received"] += 1

        try:
            route = self.routes[Topic(topic)]
        except (ValueError, KeyError):
            self.stats["unknown"] += 1
            self.stats["acked"] += 1
            logger.warning(f"metric {topic} not implemented")
            return DispatchResult.ACK

        try:
            event = route.decode(raw)
        except DecodeError as exc:
            # 재전달해도 파싱될 리 없으므로 버린다
            self.stats["dropped"] += 1
            self.stats["acked"] += 1
            logger.error(f"Failed to parse {topic} message: {exc}")
            return DispatchResult.ACK

        try:
            await route.handle(event)
        except StoreUnavailableError:
            raise
        except Exception:
            self.stats["errors"] += 1
            logger.exception(f"Handler for {topic} failed")
            return DispatchResult.ERROR

        self.stats["acked"] += 1
        return DispatchResult.ACK
