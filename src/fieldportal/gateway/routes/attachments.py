"""附件路由

GET /api/attachments/booking/{booking_id}: 预约附件列表（需要会话）。
GET /api/attachments/{attachment_id}/download: 二进制透传。
GET /api/attachments/{attachment_id}/view: 二进制透传，inline 展示。

下载/预览端点的访问控制由 PORTAL_ATTACHMENT_ACCESS 决定：
open 模式不校验会话（浏览器 <img> 无法携带自定义头），signed 模式校验链接 token。
"""

import structlog
from fastapi import APIRouter, Depends, Query
from fieldportal.core.exceptions import PortalError
from fieldportal.core.models import SessionClaims
from fieldportal.upstream import JobSource, UpstreamError
from starlette.responses import Response

from ..deps import get_booking_service, get_current_claims, get_job_source, get_link_service
from ..services.attachment_links import AttachmentLinkService
from ..services.booking_service import BookingService

log = structlog.get_logger()

router = APIRouter()

_CACHE_CONTROL = "public, max-age=3600"


@router.get("/api/attachments/booking/{booking_id}")
async def list_booking_attachments(
    booking_id: str,
    claims: SessionClaims = Depends(get_current_claims),
    booking_service: BookingService = Depends(get_booking_service),
):
    """查询预约附件列表，每项附带 downloadUrl / viewUrl"""
    attachments = await booking_service.list_attachments(booking_id)
    return {
        "success": True,
        "attachments": attachments,
        "count": len(attachments),
    }


async def _proxy_attachment(
    attachment_id: str,
    token: str | None,
    job_source: JobSource,
    links: AttachmentLinkService,
    inline: bool,
) -> Response:
    links.authorize(attachment_id, token)

    action = "view" if inline else "download"
    try:
        attachment = await job_source.fetch_attachment(attachment_id)
    except UpstreamError as e:
        log.error(
            "attachment_proxy_failed",
            attachment_id=attachment_id,
            action=action,
            error=str(e),
        )
        raise PortalError(f"Failed to {action} attachment", detail=str(e)) from e

    headers = {"Cache-Control": _CACHE_CONTROL}
    if inline:
        headers["Content-Disposition"] = "inline"

    return Response(
        content=attachment.content,
        media_type=attachment.content_type,
        headers=headers,
    )


@router.get("/api/attachments/{attachment_id}/download")
async def download_attachment(
    attachment_id: str,
    token: str | None = Query(default=None, description="signed 模式下的链接 token"),
    job_source: JobSource = Depends(get_job_source),
    links: AttachmentLinkService = Depends(get_link_service),
):
    """下载附件"""
    return await _proxy_attachment(attachment_id, token, job_source, links, inline=False)


@router.get("/api/attachments/{attachment_id}/view")
async def view_attachment(
    attachment_id: str,
    token: str | None = Query(default=None, description="signed 模式下的链接 token"),
    job_source: JobSource = Depends(get_job_source),
    links: AttachmentLinkService = Depends(get_link_service),
):
    """inline 预览附件"""
    return await _proxy_attachment(attachment_id, token, job_source, links, inline=True)
