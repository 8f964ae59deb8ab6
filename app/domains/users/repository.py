"""Users 도메인 리포지토리

UserRepositoryPort의 SQLAlchemy(비동기) 구현체입니다.
"""

from typing import Optional, Sequence, cast

from sqlalchemy import Select, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.utils.pagination import PageRequest, PageResult
from app.domains.users.entities import UserChanges, UserEntity
from app.domains.users.exceptions import EmailAlreadyExistsException
from app.domains.users.models import User
from app.domains.users.ports import UserRepositoryPort


def to_entity(row: User) -> UserEntity:
    """ORM 모델 → 도메인 엔티티"""
    return UserEntity(
        id=row.id,
        name=row.name,
        email=row.email,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def build_list_query(request: PageRequest) -> Select:
    """페이지 조회 쿼리 (created_at DESC, 동일 시각은 id DESC)"""
    return (
        select(User)
        .order_by(User.created_at.desc(), User.id.desc())
        .offset(request.offset)
        .limit(request.limit)
    )


class SQLAlchemyUserRepository(UserRepositoryPort):
    """사용자 리포지토리"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list(self, request: PageRequest) -> PageResult[UserEntity]:
        """사용자 페이지 조회

        Args:
            request: 페이지 요청 (offset = (page - 1) * page_size)

        Returns:
            생성일 내림차순 레코드와 전체 건수
        """
        total = await self.count()

        result = await self.session.execute(build_list_query(request))
        rows = cast(Sequence[User], result.scalars().all())

        return PageResult(
            records=[to_entity(row) for row in rows],
            page=request.page,
            page_size=request.page_size,
            total=total,
        )

    async def count(self) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(User)
        )
        return int(result.scalar_one())

    async def get_by_id(self, user_id: str) -> Optional[UserEntity]:
        row = await self.session.get(User, user_id)
        return to_entity(row) if row else None

    async def get_by_email(self, email: str) -> Optional[UserEntity]:
        result = await self.session.execute(
            select(User).where(User.email == email)
        )
        row = cast(Optional[User], result.scalar_one_or_none())
        return to_entity(row) if row else None

    async def create(self, user: UserEntity) -> UserEntity:
        """사용자 생성

        Raises:
            EmailAlreadyExistsException: 동시 요청으로 unique 제약에 걸린 경우
        """
        row = User(name=user.name, email=user.email)
        self.session.add(row)
        await self._flush(email=user.email)
        await self.session.refresh(row)
        return to_entity(row)

    async def update(
        self, user_id: str, changes: UserChanges
    ) -> Optional[UserEntity]:
        """주어진 필드만 수정한 뒤 다시 읽어 최신 updated_at을 반환"""
        row = await self.session.get(User, user_id)
        if row is None:
            return None

        if changes.name:
            row.name = changes.name
        if changes.email:
            row.email = changes.email

        await self._flush(email=changes.email)
        await self.session.refresh(row)
        return to_entity(row)

    async def delete(self, user_id: str) -> bool:
        row = await self.session.get(User, user_id)
        if row is None:
            return False

        await self.session.delete(row)
        await self.session.flush()
        return True

    async def _flush(self, email: Optional[str]) -> None:
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise EmailAlreadyExistsException(email=email) from e
