"""Users 도메인 라우터

GET    /users          → 사용자 목록 (페이지네이션)
GET    /users/export   → 전체 사용자 CSV 다운로드
GET    /users/{id}     → 사용자 조회
POST   /users          → 사용자 생성
PUT    /users/{id}     → 사용자 수정 (부분)
DELETE /users/{id}     → 사용자 삭제

/export는 /{user_id}보다 먼저 등록해야 합니다.
"""

from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import AsyncIterator, Callable

from fastapi import APIRouter, Depends, Response
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db, read_only_session
from app.core.schemas import (
    APIResponse,
    ListAPIResponse,
    create_list_response,
    create_response,
)
from app.core.utils.datetime import now_utc
from app.core.utils.pagination import PageParams
from app.domains.users.export import ExportCache, ExportService, get_export_cache
from app.domains.users.ports import UserRepositoryPort
from app.domains.users.repository import SQLAlchemyUserRepository
from app.domains.users.schemas import UserCreate, UserResponse, UserUpdate
from app.domains.users.service import UserService

router = APIRouter()

RepositoryScope = Callable[[], AbstractAsyncContextManager[UserRepositoryPort]]


def get_user_repository(
    session: AsyncSession = Depends(get_db),
) -> UserRepositoryPort:
    """요청 세션 기반 리포지토리 의존성"""
    return SQLAlchemyUserRepository(session)


def get_user_service(
    repository: UserRepositoryPort = Depends(get_user_repository),
) -> UserService:
    """UserService 의존성"""
    return UserService(repository)


@asynccontextmanager
async def export_repository_scope() -> AsyncIterator[UserRepositoryPort]:
    async with read_only_session() as session:
        yield SQLAlchemyUserRepository(session)


def get_export_repository_scope() -> RepositoryScope:
    """Export 스트림 수명 동안 유지되는 리포지토리 스코프 의존성"""
    return export_repository_scope


@router.get("", response_model=ListAPIResponse[UserResponse])
async def get_users(
    page_params: PageParams = Depends(),
    service: UserService = Depends(get_user_service),
):
    """사용자 목록 조회"""
    result = await service.list_users(
        page=page_params.page, page_size=page_params.page_size
    )
    return create_list_response(
        data=[UserResponse.model_validate(user) for user in result.records],
        total=result.total,
        page=result.page,
        size=result.page_size,
        total_pages=result.total_pages,
        message="사용자 목록을 조회했습니다.",
    )


@router.get(
    "/export",
    responses={200: {"content": {"text/csv": {}}}},
)
async def export_users(
    repository_scope: RepositoryScope = Depends(get_export_repository_scope),
    cache: ExportCache = Depends(get_export_cache),
):
    """전체 사용자 CSV 다운로드 (스트리밍, 5분 캐시)"""

    async def body() -> AsyncIterator[bytes]:
        async with repository_scope() as repository:
            service = ExportService(
                repository,
                cache,
                chunk_size=settings.export_chunk_size,
                chunk_delay_ms=settings.export_chunk_delay_ms,
            )
            async for chunk in service.stream_csv():
                yield chunk

    filename = f"users_export_{now_utc().date().isoformat()}.csv"
    return StreamingResponse(
        body(),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{user_id}", response_model=APIResponse[UserResponse])
async def get_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
):
    """사용자 상세 조회"""
    user = await service.get_user(user_id)
    return create_response(
        data=UserResponse.model_validate(user),
        message="사용자 정보를 조회했습니다.",
    )


@router.post("", response_model=APIResponse[UserResponse], status_code=201)
async def create_user(
    user_data: UserCreate,
    service: UserService = Depends(get_user_service),
):
    """사용자 생성"""
    user = await service.create_user(name=user_data.name, email=user_data.email)
    return create_response(
        data=UserResponse.model_validate(user),
        message="사용자가 생성되었습니다.",
    )


@router.put("/{user_id}", response_model=APIResponse[UserResponse])
async def update_user(
    user_id: str,
    user_data: UserUpdate,
    service: UserService = Depends(get_user_service),
):
    """사용자 수정 (name, email 중 전달된 필드만)"""
    user = await service.update_user(
        user_id, name=user_data.name, email=user_data.email
    )
    return create_response(
        data=UserResponse.model_validate(user),
        message="사용자 정보가 수정되었습니다.",
    )


@router.delete("/{user_id}", status_code=204)
async def delete_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
):
    """사용자 삭제"""
    await service.delete_user(user_id)
    return Response(status_code=204)
