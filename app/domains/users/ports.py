"""Users 리포지토리 포트

애플리케이션 서비스와 Export가 의존하는 저장소 추상 인터페이스입니다.
저장소 기술마다 하나의 구현체를 둡니다 (운영: SQLAlchemyUserRepository).
"""

from abc import ABC, abstractmethod
from typing import Optional

from app.core.utils.pagination import PageRequest, PageResult
from app.domains.users.entities import UserChanges, UserEntity


class UserRepositoryPort(ABC):
    """사용자 저장소 인터페이스"""

    @abstractmethod
    async def list(self, request: PageRequest) -> PageResult[UserEntity]:
        """생성일 내림차순 페이지 조회"""
        raise NotImplementedError

    @abstractmethod
    async def get_by_id(self, user_id: str) -> Optional[UserEntity]:
        raise NotImplementedError

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[UserEntity]:
        raise NotImplementedError

    @abstractmethod
    async def create(self, user: UserEntity) -> UserEntity:
        """저장 후 ID와 타임스탬프가 채워진 레코드 반환"""
        raise NotImplementedError

    @abstractmethod
    async def update(
        self, user_id: str, changes: UserChanges
    ) -> Optional[UserEntity]:
        """주어진 필드만 수정. 대상이 없으면 None"""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, user_id: str) -> bool:
        """삭제 여부 반환"""
        raise NotImplementedError
