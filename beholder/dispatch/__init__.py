"""
토픽별 이벤트 라우팅
"""
from .router import DispatchResult, EventRouter, Route, Topic
from .routes import build_router

__all__ = [
    "DispatchResult",
    "EventRouter",
    "Route",
    "Topic",
    "build_router",
]
