"""Store Protocol 接口定义

定义 CustomerStore、MessageStore 的抽象接口，
使用 Python Protocol 实现结构化子类型（duck typing），便于测试替换 fixture。
"""

from typing import Protocol

from ..models.customer import Customer
from ..models.message import Message, MessageDraft


class CustomerStore(Protocol):
    """客户凭据查询接口"""

    async def find_by_credentials(self, email: str, phone: str) -> Customer | None:
        """按归一化后的 email + phone 精确匹配客户"""
        ...

    async def get_customer(self, customer_id: str) -> Customer | None:
        """根据客户 ID 查询"""
        ...


class MessageStore(Protocol):
    """消息日志接口

    消息 append-only：只允许追加，不允许更新或删除。
    """

    async def append(self, draft: MessageDraft) -> Message:
        """校验并追加消息，返回分配了 id/createdAt 的记录"""
        ...

    async def list_for_booking(self, booking_id: str) -> list[Message]:
        """查询指定预约的消息，按 createdAt 倒序"""
        ...

    async def list_for_customer(self, customer_id: str) -> list[Message]:
        """查询指定客户发出的消息，按 createdAt 倒序"""
        ...
