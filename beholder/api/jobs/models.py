from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class JobStatus(str, Enum):
    """파이프라인 job 상태 코드"""

    QUEUED = "queued"
    DOWNLOADING = "downloading"
    CONVERTING = "converting"
    UPLOADING = "uploading"
    DEPLOYED = "deployed"  # 최종 성공 상태
    ERRORED = "errored"

    @property
    def label(self) -> str:
        return STATUS_LABELS[self]


STATUS_LABELS = {
    JobStatus.QUEUED: "Queued",
    JobStatus.DOWNLOADING: "Downloading",
    JobStatus.CONVERTING: "Converting",
    JobStatus.UPLOADING: "Uploading",
    JobStatus.DEPLOYED: "Deployed",
    JobStatus.ERRORED: "Errored",
}


class CreatorKind(str, Enum):
    """job의 사람용 레코드를 소유한 외부 시스템"""

    TRELLO = "trello"  # 티켓 트래커
    OTHER = "other"


class JobHistoryEntry(BaseModel):
    status: JobStatus
    ts: datetime
    message: Optional[str] = None


class JobRecord(BaseModel):
    job_id: str
    status: Optional[JobStatus] = None
    creator_kind: CreatorKind = CreatorKind.OTHER
    creator_ref: Optional[str] = None
    updated_at: Optional[datetime] = None
    history: list[JobHistoryEntry] = Field(default_factory=list)
