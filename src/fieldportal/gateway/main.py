"""FastAPI 应用主文件

app 创建 + lifespan 管理：Store 初始化 + job 数据源选择 + 服务装配 + 路由注册。
"""

from collections.abc import AsyncGenerator, Callable
from contextlib import asynccontextmanager
from datetime import datetime, timedelta

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fieldportal.core.config import get_customers_path, get_messages_path
from fieldportal.core.store import StoreGroup, create_store_group
from fieldportal.upstream import (
    DemoJobSource,
    FallbackJobSource,
    JobSource,
    ServiceM8Client,
    UpstreamConfig,
    load_upstream_config,
)

from .config import GatewayConfig, load_gateway_config
from .errors import register_error_handlers
from .middleware.logging_config import setup_logfire, setup_logging
from .middleware.logging_mw import LoggingMiddleware
from .middleware.trace_mw import TraceMiddleware
from .routes import attachments, auth, bookings, health, messages
from .services.attachment_links import AttachmentLinkService
from .services.booking_service import BookingService
from .services.session_service import SessionService

log = structlog.get_logger()


def build_job_source(
    config: UpstreamConfig,
) -> tuple[JobSource, ServiceM8Client | None]:
    """根据配置选择 job 数据源

    - demo: 仅 DemoJobSource
    - live: 仅 ServiceM8Client，上游错误直接向上传播
    - hybrid: ServiceM8Client + DemoJobSource 降级

    Returns:
        (job_source, upstream_client)，demo 模式下 upstream_client 为 None
    """
    if config.mode == "demo":
        return DemoJobSource(), None

    client = ServiceM8Client(
        api_key=config.api_key.get_secret_value(),
        base_url=config.base_url,
        timeout_s=config.timeout_s,
    )
    if config.mode == "live":
        return FallbackJobSource(primary=client, fallback=None), client
    return FallbackJobSource(primary=client, fallback=DemoJobSource()), client


def configure_services(
    app: FastAPI,
    store_group: StoreGroup,
    job_source: JobSource,
    gateway_config: GatewayConfig,
    upstream_config: UpstreamConfig | None = None,
    upstream_client: ServiceM8Client | None = None,
    clock: Callable[[], datetime] | None = None,
) -> None:
    """装配服务实例到 app.state（lifespan 与测试共用）"""
    secret = gateway_config.session_secret.get_secret_value()

    attachment_links = AttachmentLinkService(
        access=gateway_config.attachment_access,
        secret=secret,
        ttl_s=gateway_config.attachment_link_ttl_s,
        clock=clock,
    )

    app.state.gateway_config = gateway_config
    app.state.upstream_config = upstream_config
    app.state.upstream_client = upstream_client
    app.state.store_group = store_group
    app.state.job_source = job_source
    app.state.attachment_links = attachment_links
    app.state.session_service = SessionService(
        customer_store=store_group.customer_store,
        secret=secret,
        ttl=timedelta(hours=gateway_config.session_ttl_hours),
        clock=clock,
    )
    app.state.booking_service = BookingService(
        job_source=job_source,
        links=attachment_links,
        filter_by_customer=gateway_config.filter_bookings_by_customer,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理：启动时初始化 Store 与数据源"""
    store_group = await create_store_group(
        get_messages_path(),
        get_customers_path(),
    )

    upstream_config = load_upstream_config()
    job_source, upstream_client = build_job_source(upstream_config)

    configure_services(
        app,
        store_group=store_group,
        job_source=job_source,
        gateway_config=app.state.gateway_config,
        upstream_config=upstream_config,
        upstream_client=upstream_client,
    )

    log.info(
        "portal_initialized",
        job_source_mode=upstream_config.mode,
        upstream_url=upstream_config.base_url if upstream_client else None,
        messages_path=str(get_messages_path()),
        attachment_access=app.state.gateway_config.attachment_access,
    )

    yield


def create_app(gateway_config: GatewayConfig | None = None) -> FastAPI:
    """创建 FastAPI 应用实例"""
    gateway_config = gateway_config or load_gateway_config()

    app = FastAPI(
        title="Customer Portal Gateway",
        version="0.1.0",
        description="Customer portal API over the ServiceM8 field-service API",
        lifespan=lifespan,
    )
    app.state.gateway_config = gateway_config

    # 注册中间件（顺序：先 Trace 后 Logging，Logging 位于最外层）
    app.add_middleware(TraceMiddleware)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=gateway_config.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    # 初始化日志
    setup_logging()
    setup_logfire(app)

    register_error_handlers(app)

    # 注册路由
    app.include_router(auth.router, tags=["auth"])
    app.include_router(bookings.router, tags=["bookings"])
    app.include_router(attachments.router, tags=["attachments"])
    app.include_router(messages.router, tags=["messages"])
    app.include_router(health.router, tags=["health"])

    return app


# 默认 app 实例（uvicorn 入口）
app = create_app()
