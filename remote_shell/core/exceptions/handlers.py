"""Global exception handlers for FastAPI

모든 에러 응답은 같은 형태를 가진다:

    {
        "success": false,
        "error": {"code": 30000, "message": "...", "category": "3", "detail": "..."},
        "path": "/api/v1/ssh/connections/.../commands",
        "request_id": "..."
    }
"""

import traceback
from typing import Any, Dict, Optional, Union

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from remote_shell.core.exceptions.base import BaseAppException
from remote_shell.core.exceptions.error_codes import ErrorCode, get_error_category
from remote_shell.core.logger import logger

# HTTP 상태 코드 -> 에러 코드 (라우팅 단계에서 발생한 Starlette 예외용)
_HTTP_STATUS_ERROR_CODES = {
    404: ErrorCode.RESOURCE_NOT_FOUND,
    405: ErrorCode.INVALID_REQUEST,
    422: ErrorCode.VALIDATION_ERROR,
    503: ErrorCode.SERVICE_UNAVAILABLE,
}


def _request_context(request: Request) -> Dict[str, Any]:
    return {
        "path": request.url.path,
        "method": request.method,
        "request_id": getattr(request.state, "request_id", None),
    }


def error_response(
    request: Request,
    status_code: int,
    error_code: ErrorCode,
    detail: Optional[str] = None,
) -> JSONResponse:
    """표준 에러 응답 생성"""
    error: Dict[str, Any] = {
        "code": error_code.code,
        "message": error_code.message,
        "category": get_error_category(error_code.code).value,
    }
    if detail:
        error["detail"] = detail

    content = {"success": False, "error": error, "path": request.url.path}
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        content["request_id"] = request_id

    return JSONResponse(status_code=status_code, content=content)


async def base_app_exception_handler(request: Request, exc: BaseAppException) -> JSONResponse:
    """애플리케이션 예외 처리. 5xx 는 error, 4xx 는 warning 레벨로 기록"""
    log_data = exc.to_log_dict()
    log_data.update(_request_context(request))

    log = logger.error if exc.http_status >= 500 else logger.warning
    log(f"[{exc.code}] {exc.error_code.message}: {exc.detail or '-'}", extra={"context": log_data})

    return error_response(request, exc.http_status, exc.error_code, exc.detail)


async def validation_exception_handler(
    request: Request,
    exc: Union[RequestValidationError, ValidationError]
) -> JSONResponse:
    """요청 바디/경로 검증 실패 (422)"""
    messages = [
        f"{' -> '.join(str(loc) for loc in error.get('loc', []))}: {error.get('msg', '')}"
        for error in exc.errors()
    ]
    detail = "; ".join(messages) or "Validation failed"

    logger.warning(
        f"[{ErrorCode.VALIDATION_ERROR.code}] Validation failed: {detail}",
        extra={"context": _request_context(request)}
    )

    return error_response(request, 422, ErrorCode.VALIDATION_ERROR, detail)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    error_code = _HTTP_STATUS_ERROR_CODES.get(exc.status_code, ErrorCode.INTERNAL_SERVER_ERROR)

    logger.warning(
        f"[{error_code.code}] HTTP {exc.status_code} - {exc.detail}",
        extra={"context": _request_context(request)}
    )

    return error_response(
        request,
        exc.status_code,
        error_code,
        str(exc.detail) if exc.detail else None,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """예상하지 못한 예외. 응답에는 내부 정보를 노출하지 않음"""
    context = _request_context(request)
    context["exception_type"] = type(exc).__name__
    context["traceback"] = traceback.format_exc()

    logger.error(
        f"[{ErrorCode.INTERNAL_SERVER_ERROR.code}] Unexpected exception: {exc}",
        extra={"context": context}
    )

    return error_response(
        request,
        500,
        ErrorCode.INTERNAL_SERVER_ERROR,
        "Internal server error. Please contact administrator.",
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers to FastAPI app"""
    app.add_exception_handler(BaseAppException, base_app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    logger.info("Global exception handlers registered")
