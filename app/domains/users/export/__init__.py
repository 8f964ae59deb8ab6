"""사용자 CSV Export (스트리밍 + 파일 캐시)"""

from app.domains.users.export.cache import (
    ExportCache,
    compute_fingerprint,
    get_export_cache,
    sweep_periodically,
)
from app.domains.users.export.service import CSV_HEADERS, ExportService
from app.domains.users.export.sinks import (
    ExportSink,
    FileSink,
    SinkClosedError,
    StreamSink,
    TeeSink,
)

__all__ = [
    "CSV_HEADERS",
    "ExportCache",
    "ExportService",
    "ExportSink",
    "FileSink",
    "SinkClosedError",
    "StreamSink",
    "TeeSink",
    "compute_fingerprint",
    "get_export_cache",
    "sweep_periodically",
]
