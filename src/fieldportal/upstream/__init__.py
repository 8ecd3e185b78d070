"""fieldportal Upstream -- 外部 field-service API 抽象层

packages upstream 的公开接口导出。
"""

# 核心组件
from .client import ServiceM8Client

# 配置
from .config import JobSourceMode, UpstreamConfig, load_upstream_config
from .demo_source import DemoJobSource

# 异常
from .exceptions import UpstreamError, UpstreamResponseError, UpstreamUnreachableError
from .fallback import FallbackJobSource

# 数据模型
from .models import Attachment, AttachmentContent, Job
from .protocols import JobSource

__all__ = [
    "Job",
    "Attachment",
    "AttachmentContent",
    "JobSource",
    "ServiceM8Client",
    "DemoJobSource",
    "FallbackJobSource",
    "JobSourceMode",
    "UpstreamConfig",
    "load_upstream_config",
    "UpstreamError",
    "UpstreamResponseError",
    "UpstreamUnreachableError",
]
