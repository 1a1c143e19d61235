"""
Pytest configuration and fixtures
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from beholder.api.jobs.models import CreatorKind, JobRecord, JobStatus
from beholder.api.notify.service import NotificationService
from beholder.api.notify.sink import NotificationSink
from beholder.api.progress.service import ProgressStateMachine
from beholder.config.env import Settings
from beholder.errors import JobLookupError, SinkError
from beholder.store import MemoryStateStore
from beholder.utils.clock import Clock

T0 = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock(Clock):
    """고정 시간 (advance로만 움직임)"""

    def __init__(self, start: datetime = T0):
        self.current = start

    def now(self) -> datetime:
        return self.current

    def advance(self, minutes: float) -> None:
        self.current += timedelta(minutes=minutes)


class RecordingSink(NotificationSink):
    """외부 호출 대신 호출 내역만 기록"""

    def __init__(self, calls: list, fail_on: Optional[set] = None):
        self.calls = calls
        self.fail_on = fail_on or set()

    async def _record(self, name: str, *args):
        self.calls.append((name, *args))
        if name in self.fail_on:
            raise SinkError(f"{name} failed")

    async def post_comment(self, ref, text):
        await self._record("post_comment", ref, text)

    async def move_card(self, ref, list_id):
        await self._record("move_card", ref, list_id)

    async def post_chat_message(self, channel, text):
        await self._record("post_chat_message", channel, text)

    async def refresh_media_library(self, host):
        await self._record("refresh_media_library", host)


class InMemoryJobs:
    """JobService와 같은 인터페이스의 메모리 구현"""

    def __init__(self, calls: list):
        self.calls = calls
        self.jobs: dict[str, JobRecord] = {}

    def add(self, job_id: str, kind: CreatorKind = CreatorKind.TRELLO, ref: Optional[str] = None):
        self.jobs[job_id] = JobRecord(
            job_id=job_id,
            status=JobStatus.QUEUED,
            creator_kind=kind,
            creator_ref=ref if ref is not None else f"card-{job_id}",
        )

    async def get_job(self, job_id: str) -> JobRecord:
        if job_id not in self.jobs:
            raise JobLookupError(f"Job {job_id} not found")
        return self.jobs[job_id]

    async def set_status(self, job_id: str, status: JobStatus, *, message=None) -> bool:
        self.calls.append(("set_status", job_id, status))
        job = self.jobs.get(job_id)
        if job is None:
            return False
        job.status = status
        return True


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return MemoryStateStore()


@pytest.fixture
def machine(store, clock):
    return ProgressStateMachine(store, clock=clock)


@pytest.fixture
def calls():
    """set_status와 sink 호출 순서를 함께 기록"""
    return []


@pytest.fixture
def sink(calls):
    return RecordingSink(calls)


@pytest.fixture
def jobs(calls):
    return InMemoryJobs(calls)


@pytest.fixture
def settings():
    return Settings(
        status_lists={
            "deployed": "list-deployed",
            "downloading": "list-downloading",
        },
        chat_channel="#media",
        media_refresh_url="http://media.local/library/sections/all/refresh",
    )


@pytest.fixture
def notifier(sink, jobs, settings):
    return NotificationService(sink, jobs, settings)
