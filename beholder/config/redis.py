from redis.asyncio import Redis

from .env import settings


def get_redis(url: str | None = None) -> Redis:
    return Redis.from_url(url or settings.redis_url, decode_responses=True)
