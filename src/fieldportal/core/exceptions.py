"""Portal 异常体系

每个异常携带稳定的 error 分类字符串与 HTTP 状态码，
由 gateway 层统一转换为 {error, message} 响应体。
"""


class PortalError(Exception):
    """Portal 基础异常"""

    error: str = "Server Error"
    status_code: int = 500

    def __init__(self, message: str, detail: str = "") -> None:
        """
        Args:
            message: 面向客户端的可读描述
            detail: 仅用于日志的内部细节，不返回给客户端
        """
        super().__init__(message)
        self.message = message
        self.detail = detail


class InvalidInputError(PortalError):
    """请求输入不合法（缺少登录字段、消息为空或超长等）"""

    error = "Bad Request"
    status_code = 400


class UnauthorizedError(PortalError):
    """会话缺失/无效/过期，或登录凭据不匹配"""

    error = "Unauthorized"
    status_code = 401


class NotFoundError(PortalError):
    """资源不存在"""

    error = "Not Found"
    status_code = 404


class StorageError(PortalError):
    """本地存储读写失败（消息文件损坏、磁盘不可写等）"""

    error = "Server Error"
    status_code = 500
