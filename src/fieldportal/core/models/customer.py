"""Customer Domain Model

客户为静态参考数据：进程启动时从配置创建，运行期间不可变。
email 按忽略大小写比较，phone 仅保留去除空白/连字符/括号后的形式。
"""

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

_PHONE_STRIP_RE = re.compile(r"[\s\-()]")


def normalize_email(email: str) -> str:
    """email 归一化：去除首尾空白并转小写"""
    return email.strip().lower()


def normalize_phone(phone: str) -> str:
    """phone 归一化：去除空白、连字符和括号"""
    return _PHONE_STRIP_RE.sub("", phone)


class Customer(BaseModel):
    """客户记录"""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str = Field(description="客户 ID")
    email: str = Field(description="登录 email（唯一，忽略大小写）")
    phone: str = Field(description="登录 phone（归一化后）")
    first_name: str = Field(default="", description="名")
    last_name: str = Field(default="", description="姓")

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return normalize_email(value)

    @field_validator("phone")
    @classmethod
    def _normalize_phone(cls, value: str) -> str:
        return normalize_phone(value)

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
