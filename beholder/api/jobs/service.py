from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from beholder.errors import JobLookupError

from .models import CreatorKind, JobRecord, JobStatus

JOB_COLLECTION = "jobs"

logger = logging.getLogger(__name__)


def _serialize_job(doc: dict[str, Any]) -> JobRecord:
    creator = doc.get("creator") or {}
    return JobRecord.model_validate(
        {
            "job_id": str(doc["_id"]),
            "status": doc.get("status"),
            "creator_kind": doc.get("creator_kind") or creator.get("kind") or CreatorKind.OTHER,
            "creator_ref": doc.get("creator_ref") or creator.get("ref"),
            "updated_at": doc.get("updated_at"),
            "history": doc.get("history", []),
        }
    )


class JobService:
    """jobs 컬렉션 접근 (job 상태 기록, 생성자 정보 조회)"""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db[JOB_COLLECTION]

    async def get_job(self, job_id: str) -> JobRecord:
        try:
            document = await self.collection.find_one({"_id": job_id})
        except PyMongoError as exc:
            logger.error(f"Failed to load job {job_id}: {exc}")
            raise

        if not document:
            raise JobLookupError(f"Job {job_id} not found")

        return _serialize_job(document)

    async def set_status(
        self,
        job_id: str,
        status: JobStatus,
        *,
        message: Optional[str] = None,
    ) -> bool:
        """
        job 상태 저장

        Returns:
            job 문서가 존재해서 갱신되었으면 True
        """
        now = datetime.now(timezone.utc)
        update_operations: dict[str, Any] = {
            "$set": {
                "status": status.value,
                "updated_at": now,
            },
            "$push": {
                "history": {
                    "status": status.value,
                    "ts": now,
                    "message": message or f"status changed to {status.label}",
                }
            },
        }

        try:
            result = await self.collection.update_one({"_id": job_id}, update_operations)
        except PyMongoError as exc:
            logger.error(f"Failed to update status of job {job_id}: {exc}")
            raise

        if result.matched_count == 0:
            logger.warning(f"Job {job_id} not found while setting status {status.value}")
            return False
        return True
