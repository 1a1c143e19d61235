"""
프로세스 내 dict 저장소 (테스트, 로컬 개발용)
"""

from collections import defaultdict
from typing import Optional

from .base import StateStore


class MemoryStateStore(StateStore):
    """Keeps hashes in a dict. Not shared across processes."""

    def __init__(self):
        self._data: dict[str, dict[str, str]] = defaultdict(dict)

    async def get_field(self, key: str, field: str) -> Optional[str]:
        record = self._data.get(key)
        if record is None:
            return None
        return record.get(field)

    async def set_field(self, key: str, field: str, value: str) -> None:
        self._data[key][field] = str(value)

    async def get_all(self, key: str) -> dict[str, str]:
        return dict(self._data.get(key, {}))

    async def delete_key(self, key: str) -> None:
        self._data.pop(key, None)

    async def list_keys_by_prefix(self, prefix: str) -> list[str]:
        return sorted(key for key in self._data if key.startswith(prefix))
