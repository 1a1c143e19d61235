import json
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_json_dict(name: str) -> dict[str, str]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return {}
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"{name} must be a JSON object: {exc}") from exc
    if not isinstance(parsed, dict):
        raise ValueError(f"{name} must be a JSON object")
    return {str(k): str(v) for k, v in parsed.items()}


class Settings(BaseModel):
    """환경 변수 기반 설정"""

    redis_url: str = "redis://localhost:6379/1"
    mongo_url: str = "mongodb://localhost:27017"
    db_name: str = "triton"

    trello_key: Optional[str] = None
    trello_token: Optional[str] = None
    trello_api_url: str = "https://api.trello.com"

    chat_webhook_url: Optional[str] = None
    chat_channel: str = "#media"
    media_refresh_url: Optional[str] = None
    media_refresh_token: Optional[str] = None
    http_timeout_seconds: float = 10.0

    # 트래커가 없는 환경에서는 코멘트/카드 이동을 모두 끈다
    disable_tracker_notifications: bool = False
    deploy_hooks_enabled: bool = True
    # status 코드 -> 트래커 리스트 ID
    status_lists: dict[str, str] = Field(default_factory=dict)

    eta_sweep_interval_seconds: float = 600.0
    eta_stage: str = "download"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            redis_url=os.getenv("REDIS_URL", "redis://localhost:6379/1"),
            mongo_url=os.getenv("MONGO_URL", "mongodb://localhost:27017"),
            db_name=os.getenv("DB_NAME", "triton"),
            trello_key=os.getenv("TRELLO_KEY"),
            trello_token=os.getenv("TRELLO_TOKEN"),
            trello_api_url=os.getenv("TRELLO_API_URL", "https://api.trello.com"),
            chat_webhook_url=os.getenv("CHAT_WEBHOOK_URL"),
            chat_channel=os.getenv("CHAT_CHANNEL", "#media"),
            media_refresh_url=os.getenv("MEDIA_REFRESH_URL"),
            media_refresh_token=os.getenv("MEDIA_REFRESH_TOKEN"),
            http_timeout_seconds=float(os.getenv("HTTP_TIMEOUT_SECONDS", "10")),
            disable_tracker_notifications=_env_bool("DISABLE_TRACKER_NOTIFICATIONS"),
            deploy_hooks_enabled=_env_bool("DEPLOY_HOOKS_ENABLED", default=True),
            status_lists=_env_json_dict("STATUS_LISTS"),
            eta_sweep_interval_seconds=float(os.getenv("ETA_SWEEP_INTERVAL_SECONDS", "600")),
            eta_stage=os.getenv("ETA_STAGE", "download"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


settings = Settings.from_env()
