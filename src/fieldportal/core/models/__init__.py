"""fieldportal Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .customer import Customer, normalize_email, normalize_phone
from .message import Message, MessageDraft
from .session import SessionClaims

__all__ = [
    # Customer
    "Customer",
    "normalize_email",
    "normalize_phone",
    # Message
    "Message",
    "MessageDraft",
    # Session
    "SessionClaims",
]
