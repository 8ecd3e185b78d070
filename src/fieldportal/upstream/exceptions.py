"""Upstream 异常体系"""


class UpstreamError(Exception):
    """Upstream 包基础异常"""

    def __init__(self, message: str, recoverable: bool = True) -> None:
        """
        Args:
            message: 错误描述（仅用于日志，不直接返回给客户端）
            recoverable: 是否可通过降级数据恢复
        """
        super().__init__(message)
        self.recoverable = recoverable


class UpstreamUnreachableError(UpstreamError):
    """ServiceM8 API 不可达（连接失败、超时、DNS 解析失败等）

    此异常触发 FallbackJobSource 的降级逻辑。
    """

    def __init__(self, base_url: str, original_error: Exception) -> None:
        """
        Args:
            base_url: 尝试连接的 API 地址
            original_error: 原始异常
        """
        super().__init__(
            f"ServiceM8 API 不可达: {base_url} -- {original_error}",
            recoverable=True,
        )
        self.base_url = base_url
        self.original_error = original_error


class UpstreamResponseError(UpstreamError):
    """ServiceM8 API 返回非 2xx 状态（鉴权失败、资源不存在、限流等）"""

    def __init__(self, path: str, status_code: int) -> None:
        super().__init__(
            f"ServiceM8 API 返回 {status_code}: {path}",
            recoverable=True,
        )
        self.path = path
        self.status_code = status_code
