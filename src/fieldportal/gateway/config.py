"""GatewayConfig -- Gateway 配置加载

从环境变量加载会话签名密钥、监听地址、附件访问策略等配置。
"""

import os
from typing import Literal

import structlog
from pydantic import BaseModel, Field, SecretStr

log = structlog.get_logger()

DEFAULT_SESSION_SECRET = "default_dev_secret_change_in_production"

AttachmentAccess = Literal["open", "signed"]


class GatewayConfig(BaseModel):
    """Gateway 配置 -- 从环境变量加载

    环境变量:
        JWT_SECRET: 会话 token 签名密钥
        PORTAL_SESSION_TTL_HOURS: 会话有效期（小时，默认 24）
        HOST / PORT: 监听地址（默认 0.0.0.0:3001）
        PORTAL_ATTACHMENT_ACCESS: open / signed
        PORTAL_ATTACHMENT_LINK_TTL_S: 签名附件链接有效期（秒，默认 300）
        PORTAL_FILTER_BOOKINGS_BY_CUSTOMER: 是否按客户 email 过滤预约
        PORTAL_ALLOWED_ORIGINS: CORS 允许来源，逗号分隔（默认 *）
    """

    session_secret: SecretStr = Field(
        default=SecretStr(DEFAULT_SESSION_SECRET),
        description="HS256 签名密钥",
    )
    session_ttl_hours: int = Field(default=24, ge=1, description="会话有效期（小时）")
    host: str = Field(default="0.0.0.0", description="监听地址")
    port: int = Field(default=3001, ge=1, le=65535, description="监听端口")
    attachment_access: AttachmentAccess = Field(
        default="open",
        description="open: 下载/预览无需会话（POC，便于 <img> 直接加载）；signed: 需要短期签名链接",
    )
    attachment_link_ttl_s: int = Field(
        default=300,
        ge=1,
        description="签名附件链接有效期（秒）",
    )
    filter_bookings_by_customer: bool = Field(
        default=False,
        description="True 时仅返回联系人 email 与会话 email 一致的预约",
    )
    allowed_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="CORS 允许来源",
    )


def _read_int(env_var: str, kwargs: dict, key: str, default: int) -> None:
    if val := os.environ.get(env_var):
        try:
            kwargs[key] = int(val)
        except ValueError:
            log.warning(
                "invalid_int_config",
                env_var=env_var,
                value=val,
                fallback=default,
            )


def load_gateway_config() -> GatewayConfig:
    """从环境变量加载 Gateway 配置

    Returns:
        GatewayConfig 实例
    """
    kwargs: dict = {}

    if val := os.environ.get("JWT_SECRET"):
        kwargs["session_secret"] = SecretStr(val)
    else:
        log.warning("session_secret_not_set", message="使用默认开发密钥，勿用于生产")

    _read_int("PORTAL_SESSION_TTL_HOURS", kwargs, "session_ttl_hours", 24)
    _read_int("PORT", kwargs, "port", 3001)
    _read_int("PORTAL_ATTACHMENT_LINK_TTL_S", kwargs, "attachment_link_ttl_s", 300)

    if val := os.environ.get("HOST"):
        kwargs["host"] = val

    if val := os.environ.get("PORTAL_ATTACHMENT_ACCESS"):
        kwargs["attachment_access"] = val.lower()

    if val := os.environ.get("PORTAL_FILTER_BOOKINGS_BY_CUSTOMER"):
        kwargs["filter_bookings_by_customer"] = val.lower() in ("1", "true", "yes")

    if val := os.environ.get("PORTAL_ALLOWED_ORIGINS"):
        kwargs["allowed_origins"] = [o.strip() for o in val.split(",") if o.strip()]

    return GatewayConfig(**kwargs)
