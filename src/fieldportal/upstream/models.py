"""数据模型 -- Job + Attachment + AttachmentContent

Job / Attachment 由上游系统拥有，本系统只读。
字段名沿用 ServiceM8 的 snake_case 命名。
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Job(BaseModel):
    """上游 job（即客户看到的 booking）"""

    model_config = ConfigDict(extra="ignore")

    uuid: str = Field(description="Job UUID")
    job_address: str | None = Field(default=None, description="服务地址")
    job_description: str | None = Field(default=None, description="工作描述")
    status: str | None = Field(default=None, description="Quote / Work Order / Completed 等")
    date: str | None = Field(default=None, description="预约日期")
    time: str | None = Field(default=None, description="预约时间")
    generated_job_id: str | None = Field(default=None, description="人类可读的 job 编号")
    total_amount: float = Field(default=0.0, description="总金额")
    work_done_description: str | None = Field(default=None, description="完工说明")
    notes: str | None = Field(default=None, description="备注")
    company_uuid: str | None = Field(default=None, description="所属公司 UUID")

    # 联系人（仅详情接口提供）
    contact_first: str | None = Field(default=None)
    contact_last: str | None = Field(default=None)
    contact_phone: str | None = Field(default=None)
    contact_email: str | None = Field(default=None)

    @field_validator("total_amount", mode="before")
    @classmethod
    def _blank_amount_is_zero(cls, value: Any) -> Any:
        # ServiceM8 以字符串返回金额，空值为 ""
        if value is None or value == "":
            return 0.0
        return value


class Attachment(BaseModel):
    """附件元数据（规范化后的统一形态）"""

    uuid: str = Field(description="附件 UUID")
    file_name: str | None = Field(default=None, description="文件名")
    file_type: str | None = Field(default=None, description="MIME 类型")
    created_date: str | None = Field(default=None, description="创建时间")
    description: str | None = Field(default=None, description="附件说明")

    @classmethod
    def from_upstream(cls, raw: dict[str, Any]) -> "Attachment":
        """将上游异构字段名映射为统一形态

        filename | file_name -> file_name
        content_type | file_type -> file_type
        timestamp | created_date -> created_date
        attachment_name | description -> description
        """
        return cls(
            uuid=raw["uuid"],
            file_name=raw.get("filename") or raw.get("file_name") or "Attachment",
            file_type=(
                raw.get("content_type")
                or raw.get("file_type")
                or "application/octet-stream"
            ),
            created_date=raw.get("timestamp") or raw.get("created_date"),
            description=raw.get("attachment_name") or raw.get("description") or "",
        )


class AttachmentContent(BaseModel):
    """附件二进制内容 -- 按需获取，不缓存不落盘"""

    content: bytes = Field(description="文件字节")
    content_type: str = Field(
        default="application/octet-stream",
        description="上游响应的 Content-Type",
    )
