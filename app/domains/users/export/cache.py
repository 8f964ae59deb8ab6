"""Export 파일 캐시

지문(fingerprint)별로 CSV 파일을 하나씩 보관하는 디렉터리 캐시입니다.

    {cache_dir}/users_export_{md5}.csv

- TTL(기본 5분) 이내의 파일만 재사용합니다.
- 생성 중에는 고유한 .part 파일에 쓰고, 완료 시 최종 경로로 rename 합니다.
- sweep()은 최대 보관 기간(기본 1시간)을 넘긴 파일을 삭제합니다.
"""

import asyncio
import hashlib
import uuid
from datetime import datetime
from functools import lru_cache
from pathlib import Path

import aiofiles
import aiofiles.os

from app.core.config import Settings, settings
from app.core.logging import get_logger
from app.core.utils.datetime import file_age_seconds, format_iso
from app.domains.users.export.sinks import ExportSink, FileSink

logger = get_logger(__name__)

CACHE_FILE_PREFIX = "users_export_"
READ_CHUNK_SIZE = 64 * 1024


def compute_fingerprint(total: int, last_modified: datetime) -> str:
    """전체 건수와 마지막 수정 시각으로 변경 감지용 지문 생성 (md5 hex)"""
    data = f"{total}-{format_iso(last_modified)}"
    return hashlib.md5(data.encode("utf-8"), usedforsecurity=False).hexdigest()


class CacheEntryWriter(FileSink):
    """캐시 항목 기록기

    임시 .part 파일에 기록하고 close() 시점에 최종 경로로 교체합니다.
    abort()는 임시 파일을 남겨 두며, sweep이 나중에 정리합니다.
    """

    def __init__(self, target: Path):
        self.target = target
        super().__init__(
            target.with_name(f"{target.name}.{uuid.uuid4().hex}.part")
        )

    async def close(self) -> None:
        await super().close()
        await aiofiles.os.replace(self.path, self.target)

    async def abort(self) -> None:
        await super().close()


class ExportCache:
    """CSV Export 파일 캐시"""

    def __init__(
        self,
        directory: Path,
        ttl_seconds: float = 300,
        max_age_seconds: float = 3600,
    ):
        self.directory = directory
        self.ttl_seconds = ttl_seconds
        self.max_age_seconds = max_age_seconds

    @classmethod
    def from_settings(cls, config: Settings) -> "ExportCache":
        return cls(
            directory=Path(config.export_cache_dir),
            ttl_seconds=config.export_cache_ttl_seconds,
            max_age_seconds=config.export_cache_max_age_seconds,
        )

    def path_for(self, fingerprint: str) -> Path:
        return self.directory / f"{CACHE_FILE_PREFIX}{fingerprint}.csv"

    async def ensure_directory(self) -> None:
        await aiofiles.os.makedirs(self.directory, exist_ok=True)

    async def is_fresh(self, path: Path) -> bool:
        """파일이 존재하고 TTL 이내인지 확인"""
        try:
            stat = await aiofiles.os.stat(path)
        except FileNotFoundError:
            return False
        return file_age_seconds(stat.st_mtime) < self.ttl_seconds

    async def open_writer(self, fingerprint: str) -> CacheEntryWriter:
        await self.ensure_directory()
        writer = CacheEntryWriter(self.path_for(fingerprint))
        await writer.open()
        return writer

    async def replay(self, path: Path, sink: ExportSink) -> int:
        """캐시 파일의 바이트를 그대로 sink에 전달

        Returns:
            전달한 바이트 수

        Raises:
            FileNotFoundError: 파일을 여는 시점에 이미 삭제된 경우
                (이때 sink에는 아무것도 쓰지 않음)
        """
        sent = 0
        async with aiofiles.open(path, "rb") as f:
            while chunk := await f.read(READ_CHUNK_SIZE):
                await sink.write(chunk)
                sent += len(chunk)
        return sent

    async def sweep(self) -> int:
        """최대 보관 기간을 넘긴 캐시 파일 삭제

        개별 파일 처리 중 오류(예: 도중에 삭제됨)는 로깅 후 다음 파일로
        넘어갑니다.

        Returns:
            삭제한 파일 수
        """
        try:
            names = await aiofiles.os.listdir(self.directory)
        except FileNotFoundError:
            return 0
        except OSError as e:
            logger.warning(f"[Export] 캐시 디렉터리 조회 실패: {e}")
            return 0

        deleted = 0
        for name in names:
            if not name.startswith(CACHE_FILE_PREFIX):
                continue

            path = self.directory / name
            try:
                stat = await aiofiles.os.stat(path)
                if file_age_seconds(stat.st_mtime) <= self.max_age_seconds:
                    continue
                await aiofiles.os.remove(path)
                deleted += 1
                logger.info(f"[Export] 오래된 캐시 파일 삭제: {name}")
            except OSError as e:
                logger.warning(f"[Export] 캐시 파일 정리 실패: {name} ({e})")

        return deleted


async def sweep_periodically(cache: ExportCache, interval_seconds: float) -> None:
    """interval_seconds마다 sweep 실행 (취소될 때까지)"""
    while True:
        await cache.sweep()
        await asyncio.sleep(interval_seconds)


@lru_cache
def _create_export_cache() -> ExportCache:
    return ExportCache.from_settings(settings)


def get_export_cache() -> ExportCache:
    """FastAPI DI용 Export 캐시 의존성"""
    return _create_export_cache()
