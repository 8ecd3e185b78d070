"""健康检查路由

GET /api/health: Liveness 检查，永远返回 200。
GET /ready: Readiness 检查，包含消息文件目录可写性、job 数据源模式，
            profile=upstream 时额外探测 ServiceM8 API。
"""

import os
from datetime import UTC, datetime

import structlog
from fastapi import APIRouter, Query, Request
from starlette.responses import JSONResponse

log = structlog.get_logger()

router = APIRouter()

SERVICE_NAME = "Customer Portal Backend"


@router.get("/api/health")
async def health():
    """Liveness 检查 -- 永远返回 200"""
    return {
        "status": "ok",
        "timestamp": datetime.now(UTC).isoformat(),
        "service": SERVICE_NAME,
    }


@router.get("/ready")
async def ready(
    request: Request,
    profile: str | None = Query(
        default=None,
        description="core（默认）仅本地检查；upstream 额外探测 ServiceM8 API",
    ),
):
    """Readiness 检查 -- 验证核心依赖可用性

    检查项：
    1. message_store: 消息文件所在目录存在且可写
    2. job_source: 当前数据源模式（live / hybrid / demo）
    3. upstream: 根据 profile 决定是否探测 ServiceM8
    """
    effective_profile = profile or "core"

    checks = {}
    all_ok = True

    # 1. 消息文件目录检查
    try:
        store_group = request.app.state.store_group
        messages_dir = store_group.message_store.path.parent
        if messages_dir.is_dir() and os.access(messages_dir, os.W_OK):
            checks["message_store"] = "ok"
        else:
            checks["message_store"] = "error: directory missing or not writable"
            all_ok = False
    except Exception as e:
        checks["message_store"] = f"error: {str(e)}"
        all_ok = False

    # 2. 数据源模式
    upstream_config = getattr(request.app.state, "upstream_config", None)
    checks["job_source"] = upstream_config.mode if upstream_config else "unknown"

    # 3. ServiceM8 探测
    if effective_profile in ("upstream", "full"):
        upstream_client = getattr(request.app.state, "upstream_client", None)
        if upstream_client is not None:
            try:
                if await upstream_client.health_check():
                    checks["upstream"] = "ok"
                else:
                    checks["upstream"] = "unreachable"
                    all_ok = False
            except Exception as e:
                log.warning("health_check_error", error=str(e))
                checks["upstream"] = "unreachable"
                all_ok = False
        else:
            # demo 模式：无上游客户端，跳过探测
            checks["upstream"] = "skipped"
    else:
        checks["upstream"] = "skipped"

    status_code = 200 if all_ok else 503
    status_text = "ready" if all_ok else "not_ready"

    return JSONResponse(
        status_code=status_code,
        content={
            "status": status_text,
            "profile": effective_profile,
            "checks": checks,
        },
    )
