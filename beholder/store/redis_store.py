"""
Redis 해시 기반 저장소
"""

import logging
from typing import Optional

from redis.asyncio import Redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from beholder.errors import StoreUnavailableError
from .base import StateStore

logger = logging.getLogger(__name__)

_UNAVAILABLE = (RedisConnectionError, RedisTimeoutError)


class RedisStateStore(StateStore):
    def __init__(self, redis: Redis, scan_count: int = 200):
        self.redis = redis
        self.scan_count = scan_count

    async def get_field(self, key: str, field: str) -> Optional[str]:
        try:
            return _text(await self.redis.hget(key, field))
        except _UNAVAILABLE as exc:
            raise StoreUnavailableError(f"hget {key} {field} failed") from exc

    async def set_field(self, key: str, field: str, value: str) -> None:
        try:
            await self.redis.hset(key, field, str(value))
        except _UNAVAILABLE as exc:
            raise StoreUnavailableError(f"hset {key} {field} failed") from exc

    async def get_all(self, key: str) -> dict[str, str]:
        try:
            raw = await self.redis.hgetall(key)
        except _UNAVAILABLE as exc:
            raise StoreUnavailableError(f"hgetall {key} failed") from exc
        return {_text(k): _text(v) for k, v in raw.items()}

    async def delete_key(self, key: str) -> None:
        try:
            await self.redis.delete(key)
        except _UNAVAILABLE as exc:
            raise StoreUnavailableError(f"del {key} failed") from exc

    async def list_keys_by_prefix(self, prefix: str) -> list[str]:
        # KEYS 대신 SCAN 사용 (운영 Redis 블로킹 방지)
        keys = []
        try:
            async for key in self.redis.scan_iter(match=f"{prefix}*", count=self.scan_count):
                keys.append(_text(key))
        except _UNAVAILABLE as exc:
            raise StoreUnavailableError(f"scan {prefix}* failed") from exc
        logger.debug(f"Found {len(keys)} keys under prefix {prefix}")
        return sorted(keys)


def _text(value) -> Optional[str]:
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return value
