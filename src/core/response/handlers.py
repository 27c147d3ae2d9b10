from typing import Any, Dict, List, Optional

import structlog
from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from src.core import exceptions
from src.core.response.schemas import BaseResponse, ErrorDetail, ErrorResponse
from src.core.templating import templates

logger = structlog.get_logger(__name__)

API_PREFIX = "/api"


def success_response(
    data: Any = None,
    message: Optional[str] = None,
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    body = BaseResponse(success=True, message=message, data=jsonable_encoder(data))
    return JSONResponse(content=body.model_dump(), status_code=status_code)


def error_response(
    error_code: str = "ERROR",
    message: str = "Unknown Error",
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
    details: Optional[List[Dict[str, Any]]] = None,
) -> JSONResponse:
    body = ErrorResponse(
        message=message,
        error_code=error_code,
        error_details=details or [],
    )
    return JSONResponse(content=body.model_dump(), status_code=status_code)


def _wants_html(request: Request) -> bool:
    return not request.url.path.startswith(API_PREFIX)


def _render_error_page(request: Request, status_code: int, message: str) -> Response:
    return templates.TemplateResponse(
        request,
        "error.html",
        {"status_code": status_code, "message": message},
        status_code=status_code,
    )


async def app_exception_handler(
    request: Request, exc: exceptions.AppException
) -> Response:
    """Turn an AppException into an error page or an ErrorResponse body."""
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(
            "request_failed",
            path=request.url.path,
            error_code=exc.error_code,
            detail=exc.detail,
        )
    else:
        logger.info(
            "request_rejected",
            path=request.url.path,
            error_code=exc.error_code,
            detail=exc.detail,
        )

    if _wants_html(request):
        return _render_error_page(request, exc.status_code, exc.detail)
    return error_response(
        error_code=exc.error_code,
        message=exc.detail,
        status_code=exc.status_code,
        details=[detail.model_dump() for detail in exc.error_details],
    )


async def global_exception_handler(request: Request, exc: Exception) -> Response:
    """Last resort handler for anything the routes did not map."""
    logger.error(
        "unhandled_exception",
        path=request.url.path,
        method=request.method,
        exc_info=exc,
    )
    message = "Internal server error"
    if _wants_html(request):
        return _render_error_page(
            request, status.HTTP_500_INTERNAL_SERVER_ERROR, message
        )
    return error_response(
        error_code="INTERNAL_ERROR",
        message=message,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> Response:
    """Wrap request body/parameter errors on the API in an ErrorResponse."""
    if _wants_html(request):
        return await request_validation_exception_handler(request, exc)

    details = [
        ErrorDetail(
            field=".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            code=error.get("type", "value_error"),
            message=error.get("msg", "Invalid value"),
        )
        for error in exc.errors()
    ]
    return await app_exception_handler(
        request, exceptions.ValidationException("Request validation failed", details)
    )
