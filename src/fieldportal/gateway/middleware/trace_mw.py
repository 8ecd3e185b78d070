"""TraceMiddleware

为预约相关请求绑定 booking_id，贯穿该请求的全部日志。
booking_id 从 /bookings/{id}、/attachments/booking/{id}、/messages/booking/{id} 路径提取。
"""

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response


def extract_booking_id(path: str) -> str | None:
    """从请求路径提取 booking_id，无法提取时返回 None"""
    parts = [p for p in path.split("/") if p]
    for i, part in enumerate(parts):
        if part == "bookings" and i + 1 < len(parts):
            return parts[i + 1]
        if (
            part == "booking"
            and i > 0
            and parts[i - 1] in ("attachments", "messages")
            and i + 1 < len(parts)
        ):
            return parts[i + 1]
    return None


class TraceMiddleware(BaseHTTPMiddleware):
    """预约级追踪中间件 -- 为预约操作绑定 booking_id"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        booking_id = extract_booking_id(request.url.path)
        if booking_id:
            structlog.contextvars.bind_contextvars(booking_id=booking_id)

        return await call_next(request)
