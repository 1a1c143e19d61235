"""
진행 상태 저장소 (job/stage 별 해시 레코드)
"""
from .base import StateStore
from .memory import MemoryStateStore
from .redis_store import RedisStateStore

__all__ = [
    "StateStore",
    "MemoryStateStore",
    "RedisStateStore",
]
