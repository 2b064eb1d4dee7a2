"""Unit tests for error classification utilities."""

import pytest
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from yearpeer.core.db_client import DatabaseError
from yearpeer.core.errors import (
    UNEXPECTED_ERROR_MESSAGE,
    DomainValidationError,
    ErrorCategory,
    ErrorCode,
    NotFoundError,
    UnauthorizedError,
    classify_error,
)
from yearpeer.domain.create_models import GoalCreate


@pytest.mark.unit
class TestPlannerErrors:
    """Tests for the planner exception hierarchy."""

    def test_not_found_error(self):
        error = NotFoundError("Goal with ID x not found")

        assert error.status_code == 404
        assert error.category == ErrorCategory.NOT_FOUND
        assert error.code == ErrorCode.ERR_NOT_FOUND
        assert str(error) == "Goal with ID x not found"

    def test_validation_error_with_specific_code(self):
        error = DomainValidationError("Cannot exceed 5 tasks per day", code=ErrorCode.ERR_TASK_LIMIT)

        assert error.status_code == 400
        assert error.category == ErrorCategory.VALIDATION
        assert error.code == ErrorCode.ERR_TASK_LIMIT

    def test_unauthorized_error(self):
        error = UnauthorizedError("Authentication required")

        assert error.status_code == 401
        assert error.code == ErrorCode.ERR_UNAUTHORIZED


@pytest.mark.unit
class TestClassifyError:
    """Tests for classify_error function."""

    def test_planner_error_keeps_message(self):
        status_code, body = classify_error(
            DomainValidationError("A goal already exists during this time period", code=ErrorCode.ERR_GOAL_OVERLAP)
        )

        assert status_code == 400
        assert body.success is False
        assert body.message == "A goal already exists during this time period"
        assert body.code == ErrorCode.ERR_GOAL_OVERLAP

    def test_pydantic_validation_error_is_bad_request(self):
        with pytest.raises(ValidationError) as exc_info:
            GoalCreate(title="x", start_date="2025-01-01", end_date="2025-01-31", color="red", impact=9)

        status_code, body = classify_error(exc_info.value)

        assert status_code == 400
        assert body.code == ErrorCode.ERR_VALIDATION
        assert "color" in body.message
        assert "impact" in body.message

    def test_request_validation_error_drops_location_prefix(self):
        error = RequestValidationError(
            [{"loc": ("body", "title"), "msg": "Field required", "type": "missing"}],
        )

        status_code, body = classify_error(error)

        assert status_code == 400
        assert body.message == "title: Field required"

    def test_framework_http_exception_keeps_status(self):
        status_code, body = classify_error(StarletteHTTPException(status_code=405, detail="Method Not Allowed"))

        assert status_code == 405
        assert body.success is False
        assert body.message == "Method Not Allowed"
        assert body.code == ErrorCode.ERR_METHOD_NOT_ALLOWED

    def test_unmapped_http_status_uses_unknown_code(self):
        status_code, body = classify_error(StarletteHTTPException(status_code=418))

        assert status_code == 418
        assert body.code == ErrorCode.ERR_UNKNOWN

    def test_unexpected_error_is_hidden_outside_debug(self):
        status_code, body = classify_error(DatabaseError("disk I/O error"))

        assert status_code == 500
        assert body.message == UNEXPECTED_ERROR_MESSAGE
        assert body.code == ErrorCode.ERR_UNKNOWN

    def test_unexpected_error_is_exposed_in_debug(self):
        status_code, body = classify_error(DatabaseError("disk I/O error"), debug=True)

        assert status_code == 500
        assert body.message == "disk I/O error"

    def test_empty_unexpected_message_falls_back_in_debug(self):
        _, body = classify_error(RuntimeError(), debug=True)

        assert body.message == UNEXPECTED_ERROR_MESSAGE
