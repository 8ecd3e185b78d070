"""DemoJobSource -- 固定演示数据源

未配置 ServiceM8 API key 时的数据源，也是 hybrid 模式下的降级后备。
仅提供元数据；附件二进制内容没有演示数据，获取时总是失败。
"""

from .exceptions import UpstreamError
from .models import Attachment, AttachmentContent, Job

_DEMO_JOBS: tuple[dict, ...] = (
    {
        "uuid": "job-001-uuid",
        "job_address": "123 Main Street, Sydney NSW 2000",
        "job_description": "Annual HVAC Maintenance",
        "status": "Completed",
        "date": "2024-11-20",
        "time": "09:00",
        "company_uuid": "company-001",
        "generated_job_id": "JOB-2024-001",
        "total_amount": 250.00,
        "work_done_description": "Completed full system check and filter replacement",
    },
    {
        "uuid": "job-002-uuid",
        "job_address": "456 George Street, Melbourne VIC 3000",
        "job_description": "Emergency Plumbing Repair",
        "status": "Quote",
        "date": "2024-11-25",
        "time": "14:00",
        "company_uuid": "company-001",
        "generated_job_id": "JOB-2024-002",
        "total_amount": 180.00,
        "work_done_description": "",
    },
    {
        "uuid": "job-003-uuid",
        "job_address": "789 Collins Avenue, Brisbane QLD 4000",
        "job_description": "Electrical Safety Inspection",
        "status": "Work Order",
        "date": "2024-11-28",
        "time": "10:30",
        "company_uuid": "company-001",
        "generated_job_id": "JOB-2024-003",
        "total_amount": 320.00,
        "work_done_description": "",
    },
)

# 详情接口额外返回的字段
_DEMO_JOB_DETAIL: dict = {
    "notes": "Customer prefers morning appointments. Gate code is 1234.",
    "contact_first": "John",
    "contact_last": "Smith",
    "contact_phone": "0400 123 456",
    "contact_email": "customer@example.com",
}

_DEMO_ATTACHMENTS: dict[str, tuple[dict, ...]] = {
    "job-001-uuid": (
        {
            "uuid": "attach-001",
            "file_name": "invoice_001.pdf",
            "file_type": "application/pdf",
            "created_date": "2024-11-20",
            "description": "Service Invoice",
        },
        {
            "uuid": "attach-002",
            "file_name": "before_photo.jpg",
            "file_type": "image/jpeg",
            "created_date": "2024-11-20",
            "description": "Before service photo",
        },
    ),
    "job-002-uuid": (
        {
            "uuid": "attach-003",
            "file_name": "quote_002.pdf",
            "file_type": "application/pdf",
            "created_date": "2024-11-22",
            "description": "Service Quote",
        },
    ),
    "job-003-uuid": (),
}


class DemoJobSource:
    """固定演示数据的 JobSource 实现"""

    async def list_jobs(self) -> list[Job]:
        """列出演示 job -- 全部归属演示客户 customer@example.com"""
        contact_email = _DEMO_JOB_DETAIL["contact_email"]
        return [
            Job.model_validate({**job, "contact_email": contact_email})
            for job in _DEMO_JOBS
        ]

    async def get_job(self, job_id: str) -> Job | None:
        """查询演示 job，附带联系人等详情字段"""
        for job in _DEMO_JOBS:
            if job["uuid"] == job_id:
                return Job.model_validate({**job, **_DEMO_JOB_DETAIL})
        return None

    async def list_attachments_for_job(self, job_id: str) -> list[Attachment]:
        return [Attachment.model_validate(a) for a in _DEMO_ATTACHMENTS.get(job_id, ())]

    async def fetch_attachment(self, attachment_id: str) -> AttachmentContent:
        raise UpstreamError(
            f"演示模式没有附件内容: {attachment_id}",
            recoverable=False,
        )
