"""BookingService -- 将上游 job/附件重塑为客户可见的 booking 视图

除字段重塑与默认值外不包含其他业务逻辑。
"""

import structlog
from fieldportal.core.models import SessionClaims, normalize_email
from fieldportal.upstream import Attachment, Job, JobSource

from .attachment_links import AttachmentLinkService

log = structlog.get_logger()


def job_number(job: Job) -> str:
    """人类可读编号：优先上游 generated_job_id，否则 JOB-<uuid 前 8 位>"""
    return job.generated_job_id or f"JOB-{job.uuid[:8]}"


def booking_summary(job: Job) -> dict:
    """预约列表项"""
    return {
        "id": job.uuid,
        "jobNumber": job_number(job),
        "address": job.job_address or "No address provided",
        "description": job.job_description or "No description",
        "status": job.status or "Unknown",
        "date": job.date or None,
        "time": job.time or None,
        "amount": job.total_amount or 0,
    }


def booking_detail(job: Job) -> dict:
    """预约详情 -- 在列表项基础上追加完工说明、备注和联系人"""
    return {
        **booking_summary(job),
        "workDone": job.work_done_description or "",
        "notes": job.notes or "",
        "contact": {
            "firstName": job.contact_first or "",
            "lastName": job.contact_last or "",
            "phone": job.contact_phone or "",
            "email": job.contact_email or "",
        },
    }


class BookingService:
    """预约查询服务"""

    def __init__(
        self,
        job_source: JobSource,
        links: AttachmentLinkService,
        filter_by_customer: bool = False,
    ) -> None:
        self._jobs = job_source
        self._links = links
        self._filter_by_customer = filter_by_customer

    async def list_bookings(self, claims: SessionClaims) -> list[dict]:
        """列出预约

        默认返回全部 job（演示行为：所有已登录客户看到相同列表）；
        filter_by_customer=True 时仅保留联系人 email 与会话 email 一致的 job。
        """
        jobs = await self._jobs.list_jobs()
        if self._filter_by_customer:
            email = normalize_email(claims.email)
            jobs = [
                j for j in jobs
                if j.contact_email and normalize_email(j.contact_email) == email
            ]
        log.info(
            "bookings_listed",
            customer_id=claims.customer_id,
            count=len(jobs),
            filtered=self._filter_by_customer,
        )
        return [booking_summary(j) for j in jobs]

    async def get_booking(self, booking_id: str) -> dict | None:
        job = await self._jobs.get_job(booking_id)
        if job is None:
            return None
        return booking_detail(job)

    async def list_attachments(self, booking_id: str) -> list[dict]:
        attachments = await self._jobs.list_attachments_for_job(booking_id)
        return [self._attachment_view(a) for a in attachments]

    def _attachment_view(self, attachment: Attachment) -> dict:
        return {
            "id": attachment.uuid,
            "fileName": attachment.file_name or "Unnamed file",
            "fileType": attachment.file_type or "application/octet-stream",
            "description": attachment.description or "",
            "createdDate": attachment.created_date or None,
            **self._links.links_for(attachment.uuid),
        }
