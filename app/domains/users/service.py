"""Users 도메인 서비스

검증과 비즈니스 규칙(페이지 범위, 이메일 형식, 이메일 중복)을 적용한 뒤
리포지토리 포트에 위임합니다. 검증 실패는 저장소에 도달하지 않습니다.
"""

import re
from typing import Optional

from app.core.logging import get_logger
from app.core.middlewares.context import get_request_id
from app.core.utils.pagination import MAX_PAGE_SIZE, PageRequest, PageResult
from app.domains.users.entities import UserChanges, UserEntity
from app.domains.users.exceptions import (
    EmailAlreadyExistsException,
    EmptyUserUpdateException,
    InvalidEmailException,
    InvalidPaginationException,
    MissingUserFieldsException,
    UserIdRequiredException,
    UserNotFoundException,
)
from app.domains.users.ports import UserRepositoryPort

logger = get_logger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def is_valid_email(email: str) -> bool:
    return EMAIL_PATTERN.match(email) is not None


class UserService:
    """사용자 서비스"""

    def __init__(self, repository: UserRepositoryPort):
        self.repository = repository

    async def list_users(
        self, page: int = 1, page_size: int = 10
    ) -> PageResult[UserEntity]:
        """사용자 목록 조회

        Raises:
            InvalidPaginationException: page < 1 또는 page_size가 [1, 100] 밖인 경우
        """
        if page < 1:
            raise InvalidPaginationException(
                "Page must be greater than 0", page, page_size
            )
        if page_size < 1 or page_size > MAX_PAGE_SIZE:
            raise InvalidPaginationException(
                f"PageSize must be between 1 and {MAX_PAGE_SIZE}",
                page,
                page_size,
            )

        return await self.repository.list(
            PageRequest(page=page, page_size=page_size)
        )

    async def get_user(self, user_id: str) -> UserEntity:
        """사용자 조회

        Raises:
            UserIdRequiredException: ID가 비어 있는 경우
            UserNotFoundException: 사용자를 찾을 수 없는 경우
        """
        self._ensure_user_id(user_id)

        user = await self.repository.get_by_id(user_id)
        if user is None:
            raise UserNotFoundException(user_id=user_id)
        return user

    async def create_user(
        self, name: Optional[str], email: Optional[str]
    ) -> UserEntity:
        """사용자 생성

        Raises:
            MissingUserFieldsException: name 또는 email이 없는 경우
            InvalidEmailException: 이메일 형식이 잘못된 경우
            EmailAlreadyExistsException: 이미 사용 중인 이메일인 경우
        """
        name = name.strip() if name else name
        email = normalize_email(email) if email else email
        if not name or not email:
            raise MissingUserFieldsException()

        if not is_valid_email(email):
            raise InvalidEmailException(email=email)

        if await self.repository.get_by_email(email):
            raise EmailAlreadyExistsException(email=email)

        user = await self.repository.create(UserEntity(name=name, email=email))

        logger.info(
            "User created",
            extra={"request_id": get_request_id(), "user_id": user.id},
        )
        return user

    async def update_user(
        self,
        user_id: str,
        name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> UserEntity:
        """사용자 부분 수정

        이메일을 바꾸는 경우 형식을 다시 검사하고, 다른 사용자가 쓰고 있는지
        확인합니다.

        Raises:
            UserIdRequiredException: ID가 비어 있는 경우
            EmptyUserUpdateException: name, email 모두 없는 경우
            InvalidEmailException: 이메일 형식이 잘못된 경우
            EmailAlreadyExistsException: 다른 사용자가 쓰는 이메일인 경우
            UserNotFoundException: 사용자를 찾을 수 없는 경우
        """
        self._ensure_user_id(user_id)

        changes = UserChanges(
            name=name.strip() if name else None,
            email=normalize_email(email) if email else None,
        )
        if changes.is_empty:
            raise EmptyUserUpdateException()

        if changes.email:
            if not is_valid_email(changes.email):
                raise InvalidEmailException(email=changes.email)

            owner = await self.repository.get_by_email(changes.email)
            if owner and owner.id != user_id:
                raise EmailAlreadyExistsException(email=changes.email)

        user = await self.repository.update(user_id, changes)
        if user is None:
            raise UserNotFoundException(user_id=user_id)

        logger.info(
            "User updated",
            extra={"request_id": get_request_id(), "user_id": user_id},
        )
        return user

    async def delete_user(self, user_id: str) -> None:
        """사용자 삭제 (Hard Delete)

        Raises:
            UserIdRequiredException: ID가 비어 있는 경우
            UserNotFoundException: 삭제된 레코드가 없는 경우
        """
        self._ensure_user_id(user_id)

        if not await self.repository.delete(user_id):
            raise UserNotFoundException(user_id=user_id)

        logger.info(
            "User deleted",
            extra={"request_id": get_request_id(), "user_id": user_id},
        )

    @staticmethod
    def _ensure_user_id(user_id: str) -> None:
        if not user_id or not user_id.strip():
            raise UserIdRequiredException()
