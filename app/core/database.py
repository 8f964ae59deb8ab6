from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator

from sqlalchemy import MetaData
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.core.config import settings

# 제약 조건 이름 규칙 (Alembic 마이그레이션과 일치)
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "pk": "pk_%(table_name)s",
}

# 비동기 엔진 생성
engine = create_async_engine(
    settings.database_url,
    echo=settings.database_echo,
    pool_pre_ping=True,
    pool_size=10,
    max_overflow=20,
)

# 비동기 세션 팩토리
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    """SQLAlchemy 모델 베이스 클래스"""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """요청 단위 데이터베이스 세션 의존성 (성공 시 커밋, 실패 시 롤백)"""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def read_only_session() -> AsyncIterator[AsyncSession]:
    """요청 수명과 분리된 읽기 전용 세션

    StreamingResponse처럼 엔드포인트 반환 이후에도 조회가 이어지는 경우
    사용합니다. 커밋하지 않습니다.
    """
    async with async_session_maker() as session:
        yield session



async def close_db() -> None:
    """데이터베이스 연결 종료"""
    await engine.dispose()
