"""페이지네이션 유틸리티"""

import math
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from fastapi import Query

T = TypeVar("T")

MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 10


@dataclass(frozen=True)
class PageRequest:
    """1부터 시작하는 페이지 요청"""

    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size


@dataclass
class PageResult(Generic[T]):
    """페이지 조회 결과

    records는 생성일 내림차순(최신순)으로 정렬되어 있습니다.
    """

    records: list[T] = field(default_factory=list)
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    total: int = 0

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.page_size else 0


class PageParams:
    """페이지네이션 쿼리 파라미터 의존성

    Example::

        @router.get("", response_model=ListAPIResponse[UserResponse])
        async def get_users(page_params: PageParams = Depends()):
            result = await service.list_users(
                page=page_params.page, page_size=page_params.page_size
            )
    """

    def __init__(
        self,
        page: int = Query(1, ge=1, description="페이지 번호"),
        page_size: int = Query(
            DEFAULT_PAGE_SIZE,
            ge=1,
            le=MAX_PAGE_SIZE,
            alias="pageSize",
            description="페이지 크기",
        ),
    ):
        self.page = page
        self.page_size = page_size
