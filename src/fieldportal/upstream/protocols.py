"""JobSource Protocol 接口定义

live（ServiceM8Client）、demo（DemoJobSource）与组合降级（FallbackJobSource）
均实现此接口，由配置选择。
"""

from typing import Protocol

from .models import Attachment, AttachmentContent, Job


class JobSource(Protocol):
    """Job 数据源接口"""

    async def list_jobs(self) -> list[Job]:
        """列出全部 job"""
        ...

    async def get_job(self, job_id: str) -> Job | None:
        """查询单个 job，不存在时返回 None"""
        ...

    async def list_attachments_for_job(self, job_id: str) -> list[Attachment]:
        """列出 job 关联的附件"""
        ...

    async def fetch_attachment(self, attachment_id: str) -> AttachmentContent:
        """获取附件二进制内容

        Raises:
            UpstreamError: 获取失败（无降级）
        """
        ...
