"""Users 도메인 엔티티

저장소 기술과 무관한 사용자 데이터 구조입니다. 동작은 없습니다.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class UserEntity:
    """사용자 레코드 (저장소가 소유, 애플리케이션은 사본만 보유)"""

    name: str
    email: str
    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class UserChanges:
    """부분 수정 입력 (None인 필드는 변경하지 않음)"""

    name: Optional[str] = None
    email: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.name and not self.email
