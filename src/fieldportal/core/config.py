"""配置常量模块 -- 可通过环境变量覆盖

包含数据目录、消息文件路径、客户凭据文件路径及消息长度限制等可配置常量。
"""

import os
from pathlib import Path


def _get_base_dir() -> Path:
    """获取项目 data 基础目录"""
    return Path(os.environ.get("PORTAL_DATA_DIR", "data"))


def get_messages_path() -> Path:
    """获取消息日志 JSON 文件路径"""
    return Path(
        os.environ.get(
            "PORTAL_MESSAGES_PATH",
            str(_get_base_dir() / "messages.json"),
        )
    )


def get_customers_path() -> Path | None:
    """获取客户凭据 JSON 文件路径，未配置时返回 None（使用内置演示客户）"""
    value = os.environ.get("PORTAL_CUSTOMERS_PATH")
    return Path(value) if value else None


# 单条消息最大字符数
MESSAGE_MAX_LENGTH: int = 2000

# 客户姓名为空时的展示名
DEFAULT_CUSTOMER_NAME: str = "Customer"
