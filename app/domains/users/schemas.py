"""Users 도메인 스키마 정의

HTTP 요청/응답용 Pydantic 스키마입니다.
"""

from datetime import datetime
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    field_validator,
    model_validator,
)


def _normalize_email(value):
    if isinstance(value, str):
        return value.strip().lower()
    return value


class UserCreate(BaseModel):
    """사용자 생성 요청 스키마"""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=2, max_length=100, description="이름")
    email: EmailStr = Field(..., description="이메일")

    @field_validator("email", mode="before")
    @classmethod
    def lowercase_email(cls, v):
        return _normalize_email(v)


class UserUpdate(BaseModel):
    """사용자 수정 요청 스키마 (부분 수정, 최소 1개 필드 필요)"""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(
        default=None, min_length=2, max_length=100, description="이름"
    )
    email: Optional[EmailStr] = Field(default=None, description="이메일")

    @field_validator("email", mode="before")
    @classmethod
    def lowercase_email(cls, v):
        return _normalize_email(v)

    @model_validator(mode="after")
    def require_any_field(self) -> "UserUpdate":
        if not self.name and not self.email:
            raise ValueError(
                "At least one field (name or email) must be provided"
            )
        return self


class UserResponse(BaseModel):
    """사용자 응답 스키마"""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
