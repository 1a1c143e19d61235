import logging

from fastapi import FastAPI, Response, status

from beholder.api.main import api_router
from beholder.config.env import settings
from beholder.config.lifespan import lifespan
from beholder.middleware.middleware import LoggingMiddleware
from beholder.workers.subscriber import worker_failure

# 로그 포맷 설정 (시간 - 로거이름 - 레벨 - 메시지)
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


def create_app(use_lifespan: bool = True) -> FastAPI:
    app = FastAPI(
        title="Beholder",
        description="파이프라인 진행도/상태 이벤트 알림 서비스",
        version="1.0.0",
        lifespan=lifespan if use_lifespan else None,
    )
    app.add_middleware(LoggingMiddleware)
    app.include_router(api_router)

    # 루트 엔드포인트 (서버 상태 확인용)
    @app.get("/", tags=["Status"])
    async def read_root(response: Response):
        failed = [
            task.get_name()
            for task in getattr(app.state, "workers", [])
            if worker_failure(task) is not None
        ]
        if failed:
            response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
            return {"status": "Beholder is degraded.", "failed_workers": failed}
        return {"status": "Beholder is running."}

    return app


app = create_app()
