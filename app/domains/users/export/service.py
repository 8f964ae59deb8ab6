"""사용자 CSV Export 서비스

전체 사용자를 메모리에 올리지 않고 100건 단위 페이지로 읽어 CSV로 내보냅니다.

1. 1건짜리 첫 페이지로 전체 건수와 최신 레코드의 updated_at을 확인해 지문 생성
2. 같은 지문의 캐시 파일이 TTL 이내면 그대로 재전송 (추가 DB 조회 없음)
3. 아니면 페이지를 순회하며 응답과 캐시 파일에 동시에 기록 (TeeSink)
"""

import asyncio
import csv
import io
from dataclasses import dataclass
from datetime import datetime
from typing import AsyncIterator, Iterable, Sequence

from app.core.exceptions import ExportException
from app.core.logging import get_logger
from app.core.utils.datetime import format_iso, now_utc
from app.core.utils.pagination import PageRequest
from app.core.utils.time import measure_time
from app.domains.users.entities import UserEntity
from app.domains.users.export.cache import (
    CacheEntryWriter,
    ExportCache,
    compute_fingerprint,
)
from app.domains.users.export.sinks import (
    ExportSink,
    SinkClosedError,
    StreamSink,
    TeeSink,
)
from app.domains.users.ports import UserRepositoryPort

logger = get_logger(__name__)

CSV_HEADERS = ("ID", "Name", "Email", "CreatedAt", "UpdatedAt")
DEFAULT_CHUNK_SIZE = 100
DEFAULT_CHUNK_DELAY_MS = 10


@dataclass(frozen=True)
class ExportMetadata:
    total_users: int
    last_modified: datetime
    fingerprint: str


def user_to_row(user: UserEntity) -> tuple[str, ...]:
    return (
        user.id or "",
        user.name,
        user.email,
        format_iso(user.created_at),
        format_iso(user.updated_at),
    )


def format_csv_rows(rows: Iterable[Sequence[str]]) -> bytes:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerows(rows)
    return buffer.getvalue().encode("utf-8")


class ExportService:
    """사용자 CSV Export 서비스"""

    def __init__(
        self,
        repository: UserRepositoryPort,
        cache: ExportCache,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        chunk_delay_ms: int = DEFAULT_CHUNK_DELAY_MS,
    ):
        self.repository = repository
        self.cache = cache
        self.chunk_size = chunk_size
        self.chunk_delay = chunk_delay_ms / 1000

    async def get_export_metadata(self) -> ExportMetadata:
        """캐시 지문 계산용 메타데이터

        첫 페이지(1건)의 레코드 updated_at을 마지막 수정 시각으로 사용합니다.
        사용자가 없으면 현재 시각을 사용합니다.
        """
        # TODO: 생성일 순 첫 레코드만 보므로 다른 레코드의 수정/삭제를 놓칠 수
        # 있음. MAX(updated_at) 집계를 포트에 추가해 지문에 반영할 것.
        result = await self.repository.list(PageRequest(page=1, page_size=1))
        latest = result.records[0] if result.records else None
        last_modified = (latest.updated_at if latest else None) or now_utc()

        return ExportMetadata(
            total_users=result.total,
            last_modified=last_modified,
            fingerprint=compute_fingerprint(result.total, last_modified),
        )

    async def export_users_to_csv(self, sink: ExportSink) -> None:
        """전체 사용자를 CSV로 sink에 기록

        반환 시점에는 sink가 닫혀 있고, 모든 바이트가 전달된 상태입니다.
        """
        metadata = await self.get_export_metadata()
        cached_file = self.cache.path_for(metadata.fingerprint)

        if await self.cache.is_fresh(cached_file):
            try:
                sent = await self.cache.replay(cached_file, sink)
            except FileNotFoundError:
                logger.info(f"[Export] 캐시 파일이 사라짐, 새로 생성: {cached_file}")
            else:
                await sink.close()
                logger.info(
                    f"[Export] Using cached file: {cached_file} ({sent} bytes)"
                )
                return

        logger.info(
            f"[Export] Generating new export file... "
            f"(total: {metadata.total_users})"
        )
        await self._generate(sink, metadata)

    async def _generate(self, sink: ExportSink, metadata: ExportMetadata) -> None:
        cache_writer: CacheEntryWriter = await self.cache.open_writer(
            metadata.fingerprint
        )
        tee = TeeSink(sink, cache_writer)
        completed = False

        try:
            with measure_time() as timer:
                await tee.write(format_csv_rows([CSV_HEADERS]))

                page = 1
                while True:
                    result = await self.repository.list(
                        PageRequest(page=page, page_size=self.chunk_size)
                    )
                    if result.records:
                        await tee.write(
                            format_csv_rows(
                                user_to_row(user) for user in result.records
                            )
                        )

                    processed = min(page * self.chunk_size, result.total)
                    logger.debug(
                        f"[Export] Progress: {processed}/{result.total} "
                        f"({timer.elapsed_ms:.0f}ms)"
                    )

                    if page >= result.total_pages:
                        break
                    page += 1
                    await asyncio.sleep(self.chunk_delay)

                # 캐시 파일을 확정한 뒤에 응답 스트림을 닫음
                await tee.close()
                completed = True

            logger.info(
                f"[Export] Export completed successfully "
                f"({cache_writer.bytes_written} bytes, {timer.elapsed_ms:.2f}ms)"
            )
        finally:
            if not completed:
                await cache_writer.abort()

    async def stream_csv(self) -> AsyncIterator[bytes]:
        """StreamingResponse용 CSV 청크 이터레이터

        export는 별도 태스크에서 StreamSink로 기록하고, 이 이터레이터가
        청크를 꺼내 응답으로 보냅니다. 클라이언트가 연결을 끊으면 sink를
        분리하고 export 태스크를 취소합니다 (재시도 없음).
        """
        sink = StreamSink()

        async def produce() -> None:
            try:
                await self.export_users_to_csv(sink)
            except SinkClosedError:
                logger.warning("[Export] Client disconnected, export aborted")
            except Exception as exc:
                logger.exception("[Export] Export failed")
                await sink.abort(
                    ExportException(detail={"error": str(exc)})
                )

        task = asyncio.create_task(produce())
        try:
            async for chunk in sink.iter_chunks():
                yield chunk
        except BaseException:
            sink.detach()
            task.cancel()
            raise
        await task
