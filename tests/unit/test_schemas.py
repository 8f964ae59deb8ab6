"""스키마 단위 테스트"""

from app.core.schemas import (
    APIResponse,
    ErrorDetail,
    ErrorResponse,
    FieldError,
    ListAPIResponse,
    PageMeta,
    create_list_response,
    create_response,
)


class TestAPIResponse:
    """APIResponse 테스트"""

    def test_success_response_with_data(self):
        """데이터가 있는 성공 응답"""
        response = APIResponse(
            success=True,
            data={"id": "u-1", "name": "test"},
            message="조회 성공",
        )

        assert response.success is True
        assert response.message == "조회 성공"
        assert response.data == {"id": "u-1", "name": "test"}

    def test_default_message(self):
        """기본 메시지"""
        response = APIResponse(success=True)

        assert response.message == "요청이 성공적으로 처리되었습니다."
        assert response.data is None

    def test_create_response(self):
        """create_response 팩토리"""
        response = create_response(data={"id": "u-1"}, message="생성 성공")

        assert response.success is True
        assert response.data == {"id": "u-1"}


class TestListAPIResponse:
    """ListAPIResponse 테스트"""

    def test_list_response_with_pagination(self):
        """페이지네이션 메타 정보 검증"""
        items = [{"id": "1"}, {"id": "2"}]
        meta = PageMeta(
            total=100,
            page=2,
            size=20,
            total_pages=5,
            has_next=True,
            has_prev=True,
        )
        response = ListAPIResponse(data=items, meta=meta, message="목록 조회 성공")

        assert response.data == items
        assert response.meta.total_pages == 5
        assert response.meta.has_next is True
        assert response.meta.has_prev is True

    def test_create_list_response_computes_total_pages(self):
        """total_pages 미지정 시 ceil(total / size)"""
        response = create_list_response(data=[], total=25, page=3, size=10)

        assert response.meta.total_pages == 3
        assert response.meta.has_next is False
        assert response.meta.has_prev is True

    def test_create_list_response_first_page(self):
        """첫 페이지는 has_prev가 False"""
        response = create_list_response(
            data=[{"id": "1"}], total=25, page=1, size=10, total_pages=3
        )

        assert response.meta.has_prev is False
        assert response.meta.has_next is True

    def test_empty_result(self):
        """빈 결과"""
        response = create_list_response(data=[], total=0, page=1, size=10)

        assert response.data == []
        assert response.meta.total == 0
        assert response.meta.total_pages == 0
        assert response.meta.has_next is False
        assert response.meta.has_prev is False

    def test_page_beyond_last(self):
        """마지막 페이지 이후 요청도 메타는 그대로 계산"""
        response = create_list_response(data=[], total=25, page=4, size=10)

        assert response.data == []
        assert response.meta.total_pages == 3
        assert response.meta.has_next is False


class TestErrorResponse:
    """ErrorResponse 테스트"""

    def test_error_response_structure(self):
        """에러 응답 구조 검증"""
        error = ErrorResponse(
            message="User with ID abc not found",
            error=ErrorDetail(
                code="USER_NOT_FOUND",
                message="User with ID abc not found",
                detail={"user_id": "abc"},
            ),
        )

        assert error.success is False
        assert error.error.code == "USER_NOT_FOUND"
        assert error.error.detail == {"user_id": "abc"}
        assert error.error.errors is None

    def test_error_response_with_field_errors(self):
        """필드별 검증 오류 포함"""
        error = ErrorResponse(
            message="Validation failed",
            error=ErrorDetail(
                code="VALIDATION_ERROR",
                message="Validation failed",
                errors=[FieldError(field="email", message="Invalid email format")],
            ),
        )

        assert error.error.errors[0].field == "email"
