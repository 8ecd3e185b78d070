"""LoggingMiddleware

为每个 HTTP 请求生成 request_id，绑定到 structlog contextvars。
"""

import time

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from ulid import ULID

from ..errors import error_response


class LoggingMiddleware(BaseHTTPMiddleware):
    """请求级日志中间件 -- 为每个请求生成 request_id"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = str(ULID())
        start_time = time.monotonic()

        # 绑定 request_id 到 structlog context
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        log = structlog.get_logger()
        await log.ainfo("request_started")

        try:
            response = await call_next(request)
        except Exception as e:
            # 未处理异常在此转换为 500，保证响应仍带 X-Request-ID 且经过 CORS 中间件
            log.exception("unhandled_error", error_type=type(e).__name__)
            response = error_response(
                500, "Internal Server Error", "An unexpected error occurred"
            )

        await log.ainfo(
            "request_completed",
            status_code=response.status_code,
            duration_ms=int((time.monotonic() - start_time) * 1000),
        )

        # 在响应头中返回 request_id
        response.headers["X-Request-ID"] = request_id
        return response
