"""
job 진행도 상태 머신 모듈
"""
from .router import progress_router
from .service import ProgressStateMachine, classify
from .sweep import EtaSweeper
from .models import (
    IGNORED_STAGES,
    ProgressEvent,
    StageRecord,
    SubtaskRecord,
    stage_key,
    subtask_key,
)

__all__ = [
    # Router
    "progress_router",
    # State machine
    "ProgressStateMachine",
    "EtaSweeper",
    "classify",
    # Models
    "IGNORED_STAGES",
    "ProgressEvent",
    "StageRecord",
    "SubtaskRecord",
    "stage_key",
    "subtask_key",
]
