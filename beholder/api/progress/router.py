"""
진행 상태 조회 엔드포인트
"""

import logging

from fastapi import APIRouter, HTTPException, status

from ..deps import MachineDep, RouterDep, SweeperDep
from .models import StageRecord, SubtaskRecord

progress_router = APIRouter(prefix="/progress", tags=["Progress"])
logger = logging.getLogger(__name__)


@progress_router.get("/stats")
async def get_progress_stats(router: RouterDep, sweeper: SweeperDep):
    """
    이벤트 처리 통계 조회
    """
    return {
        "dispatch": dict(router.stats),
        "topics": [topic.value for topic in router.routes],
        "eta_sweep": {
            "stage": sweeper.stage,
            "running": sweeper.running,
            "last_run_at": sweeper.last_run_at,
            "skipped_runs": sweeper.skipped_runs,
        },
    }


@progress_router.get("/{job_id}/{stage}", response_model=StageRecord)
async def get_stage_progress(job_id: str, stage: str, machine: MachineDep) -> StageRecord:
    """
    job의 stage 진행 상태 조회

    Returns:
        {"job_id", "stage", "started", "finished", "percent"}
    """
    record = await machine.get_stage_record(job_id, stage)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Stage progress not found"
        )
    return record


@progress_router.get("/{job_id}/{stage}/{subtask}", response_model=SubtaskRecord)
async def get_subtask_progress(
    job_id: str, stage: str, subtask: int, machine: MachineDep
) -> SubtaskRecord:
    """
    stage 안의 subtask 진행 상태 조회
    """
    record = await machine.get_subtask_record(job_id, stage, subtask)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Subtask progress not found"
        )
    return record
