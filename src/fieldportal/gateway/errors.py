"""全局异常处理器

所有错误响应统一为 {error, message}：error 为稳定的分类字符串，
message 为可读描述。不向客户端泄露堆栈或内部细节。
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fieldportal.core.exceptions import PortalError
from fieldportal.upstream import UpstreamError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

log = structlog.get_logger()


def error_response(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "message": message},
    )


async def portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
    if exc.status_code >= 500:
        log.error(
            "request_failed",
            error_kind=exc.error,
            message=exc.message,
            detail=exc.detail,
        )
    else:
        log.info(
            "request_rejected",
            error_kind=exc.error,
            message=exc.message,
            detail=exc.detail,
        )
    return error_response(exc.status_code, exc.error, exc.message)


async def upstream_error_handler(request: Request, exc: UpstreamError) -> JSONResponse:
    log.error("upstream_request_failed", error=str(exc), error_type=type(exc).__name__)
    return error_response(500, "Server Error", "Upstream service request failed")


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    log.info("request_validation_failed", errors=exc.errors())
    return error_response(400, "Bad Request", "Invalid request body")


async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    if exc.status_code == 404:
        return error_response(
            404,
            "Not Found",
            f"Route {request.method} {request.url.path} not found",
        )
    return error_response(exc.status_code, "Error", str(exc.detail))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log.exception("unhandled_error", error_type=type(exc).__name__)
    return error_response(500, "Internal Server Error", "An unexpected error occurred")


def register_error_handlers(app: FastAPI) -> None:
    """注册全局异常处理器"""
    app.add_exception_handler(PortalError, portal_error_handler)
    app.add_exception_handler(UpstreamError, upstream_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
