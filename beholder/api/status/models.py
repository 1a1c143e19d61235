"""
job 상태 전이 이벤트 모델
"""
from typing import Optional

from pydantic import AliasChoices, BaseModel, Field

from beholder.api.jobs.models import JobStatus


class StatusEvent(BaseModel):
    job_id: str = Field(validation_alias=AliasChoices("job_id", "jobId", "job"), min_length=1)
    status: JobStatus
    host: Optional[str] = None
