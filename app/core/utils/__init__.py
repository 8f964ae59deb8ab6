"""유틸리티 모듈"""

from app.core.utils.datetime import (
    UTC,
    file_age_seconds,
    format_iso,
    now_utc,
    to_utc,
)
from app.core.utils.pagination import (
    MAX_PAGE_SIZE,
    PageParams,
    PageRequest,
    PageResult,
)
from app.core.utils.time import measure_time

__all__ = [
    # datetime
    "UTC",
    "now_utc",
    "to_utc",
    "format_iso",
    "file_age_seconds",
    # pagination
    "MAX_PAGE_SIZE",
    "PageParams",
    "PageRequest",
    "PageResult",
    # time measurement
    "measure_time",
]
