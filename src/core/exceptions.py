from typing import List, Optional

from fastapi import status

from src.core.response.schemas import ErrorDetail


class AppException(Exception):
    """Base class for errors that map onto an HTTP error response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "ERROR"

    def __init__(
        self,
        detail: str = "Unknown Error",
        error_details: Optional[List[ErrorDetail]] = None,
    ):
        super().__init__(detail)
        self.detail = detail
        self.error_details = error_details or []


class ServiceException(AppException):
    error_code = "SERVICE_ERROR"


class InvalidInputException(AppException):
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "INVALID_INPUT"


class FormShapeException(InvalidInputException):
    """A form field arrived with more than one value or a non-text value."""

    error_code = "INVALID_FORM_SHAPE"

    def __init__(self, field: str, detail: Optional[str] = None):
        detail = detail or f"{field} must be a single text value"
        super().__init__(
            detail,
            [ErrorDetail(field=field, code=self.error_code, message=detail)],
        )
        self.field = field


class NotFoundException(AppException):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"


class ValidationException(AppException):
    status_code = 422
    error_code = "VALIDATION_ERROR"


class ConflictException(AppException):
    status_code = status.HTTP_409_CONFLICT
    error_code = "CONFLICT"
