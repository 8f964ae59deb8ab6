"""Users 도메인 모듈

사용자 CRUD와 CSV Export를 담당하는 도메인입니다.

구조:
    - entities.py: 도메인 엔티티 (UserEntity, UserChanges)
    - ports.py: 리포지토리 포트 (UserRepositoryPort)
    - models.py: SQLAlchemy 모델 (User)
    - repository.py: 포트의 SQLAlchemy 구현체
    - schemas.py: Pydantic 스키마 (UserCreate, UserUpdate, UserResponse)
    - service.py: 비즈니스 로직 (검증, 이메일 중복 확인)
    - export/: 스트리밍 CSV Export 및 파일 캐시
    - router.py: API 엔드포인트
    - exceptions.py: 도메인 예외
"""

from app.domains.users.entities import UserChanges, UserEntity
from app.domains.users.exceptions import (
    EmailAlreadyExistsException,
    UserErrorCode,
    UserNotFoundException,
)
from app.domains.users.models import User
from app.domains.users.ports import UserRepositoryPort
from app.domains.users.repository import SQLAlchemyUserRepository
from app.domains.users.router import router
from app.domains.users.schemas import UserCreate, UserResponse, UserUpdate
from app.domains.users.service import UserService

__all__ = [
    "User",
    "UserEntity",
    "UserChanges",
    "UserRepositoryPort",
    "SQLAlchemyUserRepository",
    "UserService",
    "UserCreate",
    "UserUpdate",
    "UserResponse",
    "router",
    "UserErrorCode",
    "UserNotFoundException",
    "EmailAlreadyExistsException",
]
