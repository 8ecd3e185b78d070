"""UpstreamConfig -- 外部 field-service API 配置加载

从环境变量加载配置。未设置 API key 时自动切换为 demo 模式（固定演示数据）。
"""

import os
from typing import Literal

import structlog
from pydantic import BaseModel, Field, SecretStr

log = structlog.get_logger()

SERVICEM8_BASE_URL = "https://api.servicem8.com/api_1.0"

JobSourceMode = Literal["live", "hybrid", "demo"]


class UpstreamConfig(BaseModel):
    """Upstream 配置 -- 从环境变量加载

    环境变量:
        SERVICEM8_BASE_URL: API 基础地址
        SERVICEM8_API_KEY: 服务端持有的 API key，永不返回给调用方
        PORTAL_JOB_SOURCE_MODE: live / hybrid / demo
        PORTAL_UPSTREAM_TIMEOUT_S: 请求超时（秒，默认 30）
    """

    base_url: str = Field(
        default=SERVICEM8_BASE_URL,
        description="ServiceM8 REST API 基础 URL",
    )
    api_key: SecretStr = Field(
        default=SecretStr(""),
        description="ServiceM8 API key（X-API-Key）",
    )
    mode: JobSourceMode = Field(
        default="demo",
        description="live: 仅真实 API；hybrid: 真实 API + 失败时演示数据；demo: 仅演示数据",
    )
    timeout_s: int = Field(
        default=30,
        ge=1,
        description="上游调用超时（秒）",
    )

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key.get_secret_value())


def load_upstream_config() -> UpstreamConfig:
    """从环境变量加载 Upstream 配置

    环境变量映射:
        SERVICEM8_BASE_URL -> base_url
        SERVICEM8_API_KEY -> api_key (默认 "")
        PORTAL_JOB_SOURCE_MODE -> mode (有 key 时默认 "hybrid"，否则 "demo")
        PORTAL_UPSTREAM_TIMEOUT_S -> timeout_s (默认 30)

    Returns:
        UpstreamConfig 实例
    """
    kwargs: dict = {}

    if val := os.environ.get("SERVICEM8_BASE_URL"):
        kwargs["base_url"] = val.rstrip("/")

    api_key = os.environ.get("SERVICEM8_API_KEY", "")
    if api_key:
        kwargs["api_key"] = SecretStr(api_key)

    mode = os.environ.get("PORTAL_JOB_SOURCE_MODE")
    if mode:
        kwargs["mode"] = mode
    else:
        kwargs["mode"] = "hybrid" if api_key else "demo"

    if kwargs["mode"] != "demo" and not api_key:
        # 无 key 时真实调用必然失败，静默切换为演示数据
        log.warning(
            "upstream_api_key_missing",
            requested_mode=kwargs["mode"],
            effective_mode="demo",
        )
        kwargs["mode"] = "demo"

    if val := os.environ.get("PORTAL_UPSTREAM_TIMEOUT_S"):
        try:
            kwargs["timeout_s"] = int(val)
        except ValueError:
            log.warning(
                "invalid_timeout_config",
                env_var="PORTAL_UPSTREAM_TIMEOUT_S",
                value=val,
                fallback=30,
            )

    return UpstreamConfig(**kwargs)
