"""
진행 상태 저장소 인터페이스 (필드 단위 해시)
"""

from abc import ABC, abstractmethod
from typing import Optional


class StateStore(ABC):
    @abstractmethod
    async def get_field(self, key: str, field: str) -> Optional[str]:
        """Return one field of the hash at key, or None."""

    @abstractmethod
    async def set_field(self, key: str, field: str, value: str) -> None:
        """Write one field of the hash at key, creating the hash if needed."""

    @abstractmethod
    async def get_all(self, key: str) -> dict[str, str]:
        """Return every field of the hash at key ({} when absent)."""

    @abstractmethod
    async def delete_key(self, key: str) -> None:
        """Remove the whole hash at key."""

    @abstractmethod
    async def list_keys_by_prefix(self, prefix: str) -> list[str]:
        """Return every key starting with prefix."""
