"""Message Domain Model

客户针对某个预约（booking）发送的文本消息。
消息只追加，不更新、不删除；持久化时使用 camelCase 字段名。
"""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class MessageDraft(BaseModel):
    """待写入的消息草稿 -- id 与 createdAt 由 MessageStore 分配"""

    booking_id: str = Field(description="预约（job）UUID")
    customer_id: str = Field(description="作者客户 ID")
    customer_name: str = Field(description="作者展示名")
    customer_email: str = Field(description="作者 email")
    content: str = Field(description="原始消息文本（未裁剪）")
    is_from_customer: bool = Field(default=True, description="是否由客户发出")


class Message(BaseModel):
    """已持久化的消息记录"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(description="消息 ID（ULID）")
    booking_id: str = Field(description="预约（job）UUID")
    customer_id: str = Field(description="作者客户 ID")
    customer_name: str = Field(description="作者展示名")
    customer_email: str = Field(description="作者 email")
    content: str = Field(description="裁剪后的消息文本")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="服务端写入时间",
    )
    is_from_customer: bool = Field(
        default=True,
        description="区分客户消息与员工回复（目前只有客户写入路径）",
    )

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # 旧记录可能缺少时区，按 UTC 处理以便与新记录比较
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    def to_record(self) -> dict:
        """序列化为落盘/响应用的 camelCase dict"""
        return self.model_dump(by_alias=True, mode="json")
