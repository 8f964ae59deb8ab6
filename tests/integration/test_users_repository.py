"""Users 리포지토리 통합 테스트 (PostgreSQL 컨테이너)

Docker를 사용할 수 없으면 건너뜁니다.
"""

import csv
import io

import pytest

from app.core.utils.pagination import PageRequest
from app.domains.users.entities import UserChanges, UserEntity
from app.domains.users.exceptions import EmailAlreadyExistsException
from app.domains.users.export import ExportService

pytestmark = pytest.mark.integration


async def seed_users(repository, count: int) -> list[UserEntity]:
    return [
        await repository.create(
            UserEntity(name=f"User {i}", email=f"user{i}@example.com")
        )
        for i in range(count)
    ]


class TestSQLAlchemyUserRepository:
    """SQLAlchemyUserRepository 테스트"""

    @pytest.mark.asyncio
    async def test_create_assigns_id_and_timestamps(self, sql_repository):
        """저장소가 ID와 생성/수정 시각 부여"""
        user = await sql_repository.create(
            UserEntity(name="John", email="john@example.com")
        )

        assert user.id is not None
        assert len(user.id) == 36
        assert user.created_at is not None
        assert user.updated_at is not None

    @pytest.mark.asyncio
    async def test_pages_cover_all_users_once(self, sql_repository):
        """25명, 10건 단위 → 10/10/5, 중복 없이 전체"""
        # Given
        created = await seed_users(sql_repository, 25)

        # When
        pages = [
            await sql_repository.list(PageRequest(page=page, page_size=10))
            for page in (1, 2, 3, 4)
        ]

        # Then
        assert [len(p.records) for p in pages] == [10, 10, 5, 0]
        assert all(p.total == 25 for p in pages)
        assert pages[0].total_pages == 3
        ids = [user.id for p in pages for user in p.records]
        assert sorted(ids) == sorted(user.id for user in created)

    @pytest.mark.asyncio
    async def test_get_by_email(self, sql_repository):
        await sql_repository.create(UserEntity(name="John", email="john@example.com"))

        found = await sql_repository.get_by_email("john@example.com")

        assert found is not None
        assert found.name == "John"
        assert await sql_repository.get_by_email("nobody@example.com") is None

    @pytest.mark.asyncio
    async def test_unique_email_constraint(self, sql_repository):
        """unique 제약 위반은 EmailAlreadyExistsException"""
        await sql_repository.create(UserEntity(name="John", email="john@example.com"))

        with pytest.raises(EmailAlreadyExistsException):
            await sql_repository.create(
                UserEntity(name="Other", email="john@example.com")
            )

    @pytest.mark.asyncio
    async def test_update_and_delete(self, sql_repository):
        """부분 수정 후 삭제"""
        user = await sql_repository.create(
            UserEntity(name="John", email="john@example.com")
        )

        updated = await sql_repository.update(user.id, UserChanges(name="Johnny"))
        assert updated.name == "Johnny"
        assert updated.email == "john@example.com"

        assert await sql_repository.delete(user.id) is True
        assert await sql_repository.get_by_id(user.id) is None
        assert await sql_repository.delete(user.id) is False


class TestExportWithDatabase:
    """PostgreSQL 기반 Export 테스트"""

    @pytest.mark.asyncio
    async def test_export_all_users(self, sql_repository, export_cache):
        """250명 → 헤더 + 250행"""
        await seed_users(sql_repository, 250)
        service = ExportService(sql_repository, export_cache, chunk_delay_ms=0)

        data = b"".join([chunk async for chunk in service.stream_csv()])

        rows = list(csv.reader(io.StringIO(data.decode("utf-8"))))
        assert len(rows) == 251
        assert len({row[0] for row in rows[1:]}) == 250

    @pytest.mark.asyncio
    async def test_export_endpoint(self, client):
        """HTTP 다운로드"""
        for i in range(3):
            response = await client.post(
                "/api/v1/users",
                json={"name": f"User {i}", "email": f"user{i}@example.com"},
            )
            assert response.status_code == 201

        response = await client.get("/api/v1/users/export")

        assert response.status_code == 200
        assert response.text.count("\n") == 4
