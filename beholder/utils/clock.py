"""
시간 관련 유틸리티 함수들
"""
import math
from datetime import datetime, timezone
from typing import Optional


class Clock:
    """벽시계 시간 (UTC). 테스트에서는 서브클래스로 고정 시간을 주입"""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def now_iso(self) -> str:
        return self.now().isoformat()


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """저장된 ISO-8601 문자열을 datetime으로 변환 (없거나 잘못된 값이면 None)"""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def minutes_between(start: datetime, end: datetime) -> float:
    """start ~ end 사이의 경과 시간 (분, 소수점 포함)"""
    return (end - start).total_seconds() / 60


def format_minutes(minutes: float) -> str:
    """
    분 단위 값을 코멘트용 문자열로 변환

    소수점 둘째 자리까지 표시하고 뒤쪽 0은 제거한다.
    예: 5.0 -> "5", 2.5 -> "2.5", 0.333 -> "0.33"
    """
    text = f"{minutes:.2f}".rstrip("0").rstrip(".")
    return text if text not in ("", "-0") else "0"


_DAYS_PER_MONTH = 146097 / 4800
_DAYS_PER_YEAR = 146097 / 400


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def humanize_minutes(minutes: float) -> str:
    """
    경과/남은 시간을 사람이 읽기 쉬운 형태로 변환

    단위별로 먼저 반올림한 뒤 임계값과 비교한다.
    예: 30 -> "30 minutes", 44.6 -> "an hour", 180 -> "3 hours"
    """
    total = abs(minutes)
    days_total = total / 1440

    seconds = _round_half_up(total * 60)
    mins = _round_half_up(total)
    hours = _round_half_up(total / 60)
    days = _round_half_up(days_total)
    months = _round_half_up(days_total / _DAYS_PER_MONTH)
    years = _round_half_up(days_total / _DAYS_PER_YEAR)

    if seconds < 45:
        return "a few seconds"
    if mins <= 1:
        return "a minute"
    if mins < 45:
        return f"{mins} minutes"
    if hours <= 1:
        return "an hour"
    if hours < 22:
        return f"{hours} hours"
    if days <= 1:
        return "a day"
    if days < 26:
        return f"{days} days"
    if months <= 1:
        return "a month"
    if months < 11:
        return f"{months} months"
    if years <= 1:
        return "a year"
    return f"{years} years"
