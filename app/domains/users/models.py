"""Users 도메인 모델 정의

users 테이블의 SQLAlchemy 매핑입니다. ID는 삽입 시 UUID4 문자열로 발급됩니다.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


def generate_user_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    """사용자 모델"""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=generate_user_id,
        comment="사용자 ID (UUID)",
    )
    name: Mapped[str] = mapped_column(
        String(100), nullable=False, comment="이름"
    )
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="이메일 (소문자 정규화)",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
        comment="생성 일시",
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=True,
        comment="수정 일시",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
