"""依赖注入模块 -- 通过 FastAPI Depends 注入服务实例

服务实例通过 app.state 管理，在 lifespan 中初始化。
"""

import structlog
from fastapi import Depends, Header, Request
from fieldportal.core.models import SessionClaims
from fieldportal.core.store import StoreGroup

from .services.attachment_links import AttachmentLinkService
from .services.booking_service import BookingService
from .services.message_service import MessageService
from .services.session_service import SessionService


def get_store_group(request: Request) -> StoreGroup:
    """从 app.state 获取 StoreGroup 实例"""
    return request.app.state.store_group


def get_session_service(request: Request) -> SessionService:
    """从 app.state 获取 SessionService 实例"""
    return request.app.state.session_service


def get_booking_service(request: Request) -> BookingService:
    """从 app.state 获取 BookingService 实例"""
    return request.app.state.booking_service


def get_link_service(request: Request) -> AttachmentLinkService:
    """从 app.state 获取 AttachmentLinkService 实例"""
    return request.app.state.attachment_links


def get_job_source(request: Request):
    """从 app.state 获取 JobSource 实例"""
    return request.app.state.job_source


def get_message_service(
    store_group: StoreGroup = Depends(get_store_group),
) -> MessageService:
    return MessageService(store_group.message_store)


def get_current_claims(
    authorization: str | None = Header(default=None),
    session_service: SessionService = Depends(get_session_service),
) -> SessionClaims:
    """校验 Authorization: Bearer <token>，返回会话声明

    失败时抛出 UnauthorizedError，由全局异常处理器转换为 401。
    """
    claims = session_service.verify(authorization)
    structlog.contextvars.bind_contextvars(customer_id=claims.customer_id)
    return claims
