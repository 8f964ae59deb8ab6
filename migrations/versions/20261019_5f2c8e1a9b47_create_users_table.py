"""create_users_table

Revision ID: 5f2c8e1a9b47
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "5f2c8e1a9b47"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """업그레이드 마이그레이션: users 테이블 생성"""
    op.create_table(
        "users",
        sa.Column(
            "id",
            sa.String(length=36),
            nullable=False,
            comment="사용자 ID (UUID)",
        ),
        sa.Column(
            "name", sa.String(length=100), nullable=False, comment="이름"
        ),
        sa.Column(
            "email",
            sa.String(length=255),
            nullable=False,
            comment="이메일 (소문자 정규화)",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
            comment="생성 일시",
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=True,
            comment="수정 일시",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    # 페이지 조회 정렬(created_at DESC)용 인덱스
    op.create_index(
        "ix_users_created_at", "users", ["created_at"], unique=False
    )


def downgrade() -> None:
    """다운그레이드 마이그레이션: users 테이블 삭제"""
    op.drop_index("ix_users_created_at", table_name="users")
    op.drop_table("users")
