from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, Field, model_validator


class FailureEvent(BaseModel):
    """
    파이프라인 오류 보고

    워커 형식: {"job", "stage", "data": {"message", "code"}}
    """

    job_id: str = Field(validation_alias=AliasChoices("job_id", "jobId", "job"), min_length=1)
    stage: str
    message: str = "unknown error"
    code: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _flatten_error_data(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("data"), dict):
            nested = data["data"]
            data = {k: v for k, v in data.items() if k != "data"}
            if nested.get("message"):
                data.setdefault("message", nested["message"])
            if nested.get("code"):
                data.setdefault("code", nested["code"])
        return data
