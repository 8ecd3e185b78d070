"""fieldportal Core Store -- 客户凭据 + 消息日志

提供工厂函数创建共享配置的 Store 实例组。
"""

from pathlib import Path

from .customer_store import DEMO_CUSTOMERS, StaticCustomerStore, load_customers
from .message_store import JsonMessageStore
from .protocols import CustomerStore, MessageStore


class StoreGroup:
    """Store 实例组 -- 客户凭据 + 消息日志"""

    def __init__(
        self,
        customer_store: CustomerStore,
        message_store: MessageStore,
    ) -> None:
        self.customer_store = customer_store
        self.message_store = message_store


async def create_store_group(
    messages_path: str | Path,
    customers_path: str | Path | None = None,
) -> StoreGroup:
    """创建 Store 实例组

    Args:
        messages_path: 消息 JSON 文件路径（首次访问时惰性创建）
        customers_path: 客户凭据 JSON 文件路径，None 时使用内置演示客户

    Returns:
        StoreGroup 实例
    """
    # 确保消息文件目录存在
    Path(messages_path).parent.mkdir(parents=True, exist_ok=True)

    if customers_path is not None:
        customer_store = StaticCustomerStore(load_customers(customers_path))
    else:
        customer_store = StaticCustomerStore(DEMO_CUSTOMERS)

    return StoreGroup(
        customer_store=customer_store,
        message_store=JsonMessageStore(messages_path),
    )


__all__ = [
    "StoreGroup",
    "create_store_group",
    "CustomerStore",
    "MessageStore",
    "StaticCustomerStore",
    "JsonMessageStore",
    "DEMO_CUSTOMERS",
    "load_customers",
]
