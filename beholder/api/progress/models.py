"""
진행도 이벤트 및 저장 레코드 모델
"""

from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator

# 상태 머신이 처리하지 않는 stage (error는 error 채널에서 처리)
IGNORED_STAGES = frozenset({"queue", "error"})

KEY_PREFIX = "progress"


def stage_key(job_id: str, stage: str) -> str:
    """StageRecord 키. stage를 앞에 두어 prefix로 stage 종류를 고를 수 있게 한다"""
    return f"{KEY_PREFIX}:{stage}:{job_id}"


def subtask_key(job_id: str, stage: str, subtask: int) -> str:
    return f"{stage_key(job_id, stage)}:{subtask}"


def stage_prefix(stage: str) -> str:
    return f"{KEY_PREFIX}:{stage}:"


class ProgressEvent(BaseModel):
    """
    파이프라인 진행도 이벤트

    두 가지 형태를 모두 받는다:
    - {"job", "stage", "percent", "host", "data": {"subTask", "subTasks"}}
    - {"jobId", "stage", "percent", "host", "subtask", "subtaskCount"}
    """

    job_id: str = Field(validation_alias=AliasChoices("job_id", "jobId", "job"), min_length=1)
    stage: str = Field(min_length=1)
    percent: int = Field(ge=0, le=100)
    host: Optional[str] = None
    subtask: int = Field(default=0, ge=0, validation_alias=AliasChoices("subtask", "subTask"))
    subtask_count: int = Field(
        default=0,
        ge=0,
        validation_alias=AliasChoices("subtask_count", "subtaskCount", "subTasks"),
    )

    @field_validator("percent", mode="before")
    @classmethod
    def _truncate_percent(cls, value: Any) -> Any:
        # 일부 워커는 소수점 진행도를 보낸다
        if isinstance(value, float):
            return int(value)
        return value

    @model_validator(mode="before")
    @classmethod
    def _flatten_subtask_data(cls, data: Any) -> Any:
        # 파이프라인 형식은 subtask 정보를 data 블록에 담아 보낸다
        if isinstance(data, dict) and isinstance(data.get("data"), dict):
            nested = data["data"]
            data = {k: v for k, v in data.items() if k != "data"}
            data.setdefault("subTask", nested.get("subTask", 0))
            data.setdefault("subTasks", nested.get("subTasks", 0))
        return data


class StageRecord(BaseModel):
    """(job, stage) 단위 진행 상태"""

    job_id: str
    stage: str
    started: Optional[str] = None
    finished: Optional[str] = None
    percent: Optional[int] = None

    @classmethod
    def from_fields(cls, job_id: str, stage: str, fields: dict[str, str]) -> "StageRecord":
        percent = fields.get("percent")
        return cls(
            job_id=job_id,
            stage=stage,
            started=fields.get("started"),
            finished=fields.get("finished"),
            percent=int(percent) if percent not in (None, "") else None,
        )


class SubtaskRecord(BaseModel):
    """(job, stage, subtask) 단위 진행 상태"""

    job_id: str
    stage: str
    subtask: int
    started: Optional[str] = None
    finished: Optional[str] = None

    @classmethod
    def from_fields(cls, job_id: str, stage: str, subtask: int, fields: dict[str, str]) -> "SubtaskRecord":
        return cls(
            job_id=job_id,
            stage=stage,
            subtask=subtask,
            started=fields.get("started"),
            finished=fields.get("finished"),
        )
