from typing import Any

from pydantic import BaseModel


class NamedEvent(BaseModel):
    """시스템 이벤트 {"event": 이름, "cause": 이벤트별 페이로드}"""

    event: str
    cause: Any = None
