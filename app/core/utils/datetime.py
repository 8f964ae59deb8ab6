"""날짜/시간 유틸리티"""

import time
from datetime import datetime, timezone
from typing import Optional

UTC = timezone.utc


def now_utc() -> datetime:
    """현재 UTC 시간 반환"""
    return datetime.now(UTC)


def to_utc(dt: datetime) -> datetime:
    """UTC로 변환 (naive datetime은 UTC로 간주)"""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def format_iso(dt: Optional[datetime]) -> str:
    """ISO 8601 형식으로 포맷 (None이면 빈 문자열)"""
    if dt is None:
        return ""
    return to_utc(dt).isoformat()


def file_age_seconds(mtime: float, now: Optional[float] = None) -> float:
    """파일 수정 시각(epoch 초) 기준 경과 시간(초)"""
    if now is None:
        now = time.time()
    return now - mtime
