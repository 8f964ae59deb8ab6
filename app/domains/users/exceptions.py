"""Users 도메인 예외 정의"""

from enum import Enum

from app.core.exceptions import (
    BadRequestException,
    ConflictException,
    NotFoundException,
)


class UserErrorCode(str, Enum):
    """사용자 도메인 에러 코드"""

    USER_NOT_FOUND = "USER_NOT_FOUND"
    USER_ID_REQUIRED = "USER_ID_REQUIRED"
    EMAIL_ALREADY_EXISTS = "EMAIL_ALREADY_EXISTS"
    INVALID_EMAIL = "INVALID_EMAIL"
    INVALID_PAGINATION = "INVALID_PAGINATION"
    MISSING_REQUIRED_FIELDS = "MISSING_REQUIRED_FIELDS"
    EMPTY_UPDATE = "EMPTY_UPDATE"


class UserNotFoundException(NotFoundException):
    """사용자를 찾을 수 없는 경우"""

    def __init__(self, user_id: str | None = None):
        detail = {"user_id": user_id} if user_id else {}
        super().__init__(
            message=f"User with ID {user_id} not found",
            error_code=UserErrorCode.USER_NOT_FOUND,
            detail=detail,
        )


class UserIdRequiredException(BadRequestException):
    """사용자 ID가 비어 있는 경우"""

    def __init__(self):
        super().__init__(
            message="User ID is required",
            error_code=UserErrorCode.USER_ID_REQUIRED,
        )


class EmailAlreadyExistsException(ConflictException):
    """이미 사용 중인 이메일인 경우"""

    def __init__(self, email: str | None = None):
        detail = {"email": email} if email else {}
        super().__init__(
            message="User with this email already exists",
            error_code=UserErrorCode.EMAIL_ALREADY_EXISTS,
            detail=detail,
        )


class InvalidEmailException(BadRequestException):
    """이메일 형식이 잘못된 경우"""

    def __init__(self, email: str | None = None):
        detail = {"email": email} if email else {}
        super().__init__(
            message="Invalid email format",
            error_code=UserErrorCode.INVALID_EMAIL,
            detail=detail,
        )


class InvalidPaginationException(BadRequestException):
    """페이지 파라미터가 범위를 벗어난 경우"""

    def __init__(self, message: str, page: int, page_size: int):
        super().__init__(
            message=message,
            error_code=UserErrorCode.INVALID_PAGINATION,
            detail={"page": page, "page_size": page_size},
        )


class MissingUserFieldsException(BadRequestException):
    """생성 시 필수 필드가 없는 경우"""

    def __init__(self):
        super().__init__(
            message="Name and email are required",
            error_code=UserErrorCode.MISSING_REQUIRED_FIELDS,
        )


class EmptyUserUpdateException(BadRequestException):
    """수정할 필드가 하나도 없는 경우"""

    def __init__(self):
        super().__init__(
            message="At least one field (name or email) is required",
            error_code=UserErrorCode.EMPTY_UPDATE,
        )
