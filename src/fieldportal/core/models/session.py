"""SessionClaims Domain Model

会话 token 中携带的客户身份声明。token 无状态，服务端不保存会话。
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SessionClaims(BaseModel):
    """会话声明 -- 序列化后即 JWT payload"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    customer_id: str = Field(description="客户 ID")
    email: str = Field(description="客户 email")
    first_name: str = Field(default="", description="名")
    last_name: str = Field(default="", description="姓")
    iat: int = Field(description="签发时间（epoch 秒）")
    exp: int = Field(description="过期时间（epoch 秒）")

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)
