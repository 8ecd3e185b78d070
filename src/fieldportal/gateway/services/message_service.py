"""MessageService -- 预约消息收发

发送的消息作者取自调用方会话身份，isFromCustomer 恒为 True。
"""

from fieldportal.core.config import DEFAULT_CUSTOMER_NAME
from fieldportal.core.exceptions import InvalidInputError
from fieldportal.core.models import Message, MessageDraft, SessionClaims
from fieldportal.core.store import MessageStore


class MessageService:
    """消息业务服务"""

    def __init__(self, message_store: MessageStore) -> None:
        self._store = message_store

    async def send(
        self,
        booking_id: str,
        content: object,
        claims: SessionClaims,
    ) -> Message:
        """以会话身份向预约发送消息

        Raises:
            InvalidInputError: 内容不是字符串、为空或超长
            StorageError: 消息文件读写失败
        """
        if not isinstance(content, str):
            raise InvalidInputError("Message content is required")

        name = f"{claims.first_name} {claims.last_name}".strip()
        draft = MessageDraft(
            booking_id=booking_id,
            customer_id=claims.customer_id,
            customer_name=name or DEFAULT_CUSTOMER_NAME,
            customer_email=claims.email,
            content=content,
            is_from_customer=True,
        )
        return await self._store.append(draft)

    async def list_for_booking(self, booking_id: str) -> list[Message]:
        return await self._store.list_for_booking(booking_id)

    async def list_for_customer(self, claims: SessionClaims) -> list[Message]:
        return await self._store.list_for_customer(claims.customer_id)
