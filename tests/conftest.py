"""테스트 설정"""

import itertools
import os
import uuid
from contextlib import asynccontextmanager
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Generator, List, Optional

import pytest
import pytest_asyncio
from docker import from_env
from docker.errors import DockerException
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from testcontainers.postgres import PostgresContainer

from app.core.database import Base, get_db
from app.core.utils.datetime import now_utc
from app.core.utils.pagination import PageRequest, PageResult
from app.domains.users.entities import UserChanges, UserEntity
from app.domains.users.export import ExportCache, get_export_cache
from app.domains.users.exceptions import EmailAlreadyExistsException
from app.domains.users.ports import UserRepositoryPort
from app.domains.users.repository import SQLAlchemyUserRepository
from app.domains.users.router import (
    get_export_repository_scope,
    get_user_repository,
)
from app.main import app


def _is_docker_available() -> bool:
    """로컬 환경에서 Docker 접근 가능 여부 확인"""
    if os.getenv("FORCE_DOCKER_TESTS", "").lower() in {"1", "true"}:
        return True
    if os.getenv("SKIP_DOCKER_TESTS", "").lower() in {"1", "true"}:
        return False

    try:
        client = from_env()
        client.ping()
        return True
    except (DockerException, OSError):
        return False


DOCKER_AVAILABLE = _is_docker_available()


class InMemoryUserRepository(UserRepositoryPort):
    """테스트용 리포지토리 (생성 순서대로 1ms씩 증가하는 타임스탬프 부여)"""

    def __init__(self, start: Optional[datetime] = None):
        self.users: dict[str, UserEntity] = {}
        self.list_calls: list[PageRequest] = []
        self._clock = itertools.count()
        self._start = start or now_utc() - timedelta(days=1)

    def _tick(self) -> datetime:
        return self._start + timedelta(milliseconds=next(self._clock))

    async def list(self, request: PageRequest) -> PageResult[UserEntity]:
        self.list_calls.append(request)
        ordered = sorted(
            self.users.values(),
            key=lambda u: (u.created_at, u.id),
            reverse=True,
        )
        return PageResult(
            records=[
                replace(u)
                for u in ordered[request.offset : request.offset + request.limit]
            ],
            page=request.page,
            page_size=request.page_size,
            total=len(ordered),
        )

    async def get_by_id(self, user_id: str) -> Optional[UserEntity]:
        user = self.users.get(user_id)
        return replace(user) if user else None

    async def get_by_email(self, email: str) -> Optional[UserEntity]:
        for user in self.users.values():
            if user.email == email:
                return replace(user)
        return None

    async def create(self, user: UserEntity) -> UserEntity:
        if any(u.email == user.email for u in self.users.values()):
            raise EmailAlreadyExistsException(email=user.email)
        timestamp = self._tick()
        stored = UserEntity(
            id=str(uuid.uuid4()),
            name=user.name,
            email=user.email,
            created_at=timestamp,
            updated_at=timestamp,
        )
        self.users[stored.id] = stored
        return replace(stored)

    async def update(
        self, user_id: str, changes: UserChanges
    ) -> Optional[UserEntity]:
        user = self.users.get(user_id)
        if user is None:
            return None
        if changes.name:
            user.name = changes.name
        if changes.email:
            user.email = changes.email
        user.updated_at = self._tick()
        return replace(user)

    async def delete(self, user_id: str) -> bool:
        return self.users.pop(user_id, None) is not None

    async def seed(self, count: int, start: int = 0) -> List[UserEntity]:
        return [
            await self.create(
                UserEntity(name=f"User {i}", email=f"user{i}@example.com")
            )
            for i in range(start, start + count)
        ]


@pytest.fixture
def memory_repository() -> InMemoryUserRepository:
    """인메모리 사용자 리포지토리"""
    return InMemoryUserRepository()


@pytest.fixture
def export_cache(tmp_path) -> ExportCache:
    """임시 디렉터리 기반 Export 캐시"""
    return ExportCache(
        directory=tmp_path / "exports_cache",
        ttl_seconds=300,
        max_age_seconds=3600,
    )


@pytest_asyncio.fixture
async def api_client(memory_repository, export_cache):
    """인메모리 리포지토리를 사용하는 비동기 테스트 클라이언트 (DB 불필요)"""

    @asynccontextmanager
    async def memory_scope():
        yield memory_repository

    app.dependency_overrides[get_user_repository] = lambda: memory_repository
    app.dependency_overrides[get_export_repository_scope] = lambda: memory_scope
    app.dependency_overrides[get_export_cache] = lambda: export_cache

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport, base_url="http://test"
    ) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture(scope="session")
def postgres_container() -> Generator[PostgresContainer, None, None]:
    """PostgreSQL 테스트 컨테이너"""
    if not DOCKER_AVAILABLE:
        pytest.skip("Docker is not available; skipping container-based tests.")

    with PostgresContainer("postgres:16-alpine") as postgres:
        yield postgres


@pytest.fixture(scope="session")
def test_database_url(postgres_container: PostgresContainer) -> str:
    """테스트 데이터베이스 URL (asyncpg)"""
    return str(
        postgres_container.get_connection_url().replace(
            "postgresql+psycopg2://", "postgresql+asyncpg://"
        )
    )


# NOTE:
# pytest-asyncio는 테스트마다 독립적인 event loop를 생성하므로
# async fixture는 모두 function 스코프로 유지
@pytest_asyncio.fixture
async def db_session(test_database_url: str):
    """테스트 데이터베이스 세션 (테스트마다 스키마 재생성)"""
    engine = create_async_engine(test_database_url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async_session: async_sessionmaker[AsyncSession] = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()

    await engine.dispose()


@pytest.fixture
def sql_repository(db_session) -> SQLAlchemyUserRepository:
    """실제 PostgreSQL을 사용하는 리포지토리"""
    return SQLAlchemyUserRepository(db_session)


@pytest_asyncio.fixture
async def client(db_session, export_cache):
    """비동기 테스트 클라이언트 (테스트 DB 사용)"""

    async def override_get_db():
        yield db_session

    @asynccontextmanager
    async def db_scope():
        yield SQLAlchemyUserRepository(db_session)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_export_repository_scope] = lambda: db_scope
    app.dependency_overrides[get_export_cache] = lambda: export_cache

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport, base_url="http://test"
    ) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def anyio_backend():
    """anyio 백엔드 설정"""
    return "asyncio"
