"""AttachmentLinkService -- 附件下载/预览链接生成与校验

open 模式：链接不带凭据，下载/预览端点无需会话（浏览器 <img> 可直接加载）。
signed 模式：链接携带短期签名 token，仅对单个附件有效。
"""

from collections.abc import Callable
from datetime import UTC, datetime

import structlog
from fieldportal.core.exceptions import UnauthorizedError
from jose import JWTError, jwt

from ..config import AttachmentAccess

log = structlog.get_logger()

ALGORITHM = "HS256"
_SCOPE = "attachment"


class AttachmentLinkService:
    """附件链接服务"""

    def __init__(
        self,
        access: AttachmentAccess,
        secret: str,
        ttl_s: int = 300,
        clock: Callable[[], datetime] | None = None,
        prefix: str = "/api/attachments",
    ) -> None:
        self._access = access
        self._secret = secret
        self._ttl_s = ttl_s
        self._clock = clock or (lambda: datetime.now(UTC))
        self._prefix = prefix.rstrip("/")

    @property
    def access(self) -> AttachmentAccess:
        return self._access

    def _now_ts(self) -> int:
        return int(self._clock().timestamp())

    def sign(self, attachment_id: str) -> str:
        """签发只对 attachment_id 有效的短期 token"""
        iat = self._now_ts()
        payload = {
            "sub": attachment_id,
            "scope": _SCOPE,
            "iat": iat,
            "exp": iat + self._ttl_s,
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def links_for(self, attachment_id: str) -> dict[str, str]:
        """生成 downloadUrl / viewUrl"""
        download_url = f"{self._prefix}/{attachment_id}/download"
        view_url = f"{self._prefix}/{attachment_id}/view"
        if self._access == "signed":
            query = f"?token={self.sign(attachment_id)}"
            download_url += query
            view_url += query
        return {"downloadUrl": download_url, "viewUrl": view_url}

    def authorize(self, attachment_id: str, token: str | None) -> None:
        """校验附件访问权限；open 模式总是放行

        Raises:
            UnauthorizedError: signed 模式下 token 缺失、无效、过期或不属于该附件
        """
        if self._access == "open":
            return

        if not token:
            raise UnauthorizedError("Attachment link token is required")

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"verify_exp": False},
            )
        except JWTError as e:
            log.info("attachment_link_rejected", reason="invalid_token", error=str(e))
            raise UnauthorizedError("Invalid attachment link", detail=str(e)) from e

        if payload.get("scope") != _SCOPE or payload.get("sub") != attachment_id:
            log.info(
                "attachment_link_rejected",
                reason="wrong_attachment",
                attachment_id=attachment_id,
            )
            raise UnauthorizedError("Invalid attachment link", detail="scope mismatch")

        exp = payload.get("exp")
        if not isinstance(exp, int) or self._now_ts() >= exp:
            log.info("attachment_link_rejected", reason="expired", attachment_id=attachment_id)
            raise UnauthorizedError("Attachment link has expired", detail="expired")
