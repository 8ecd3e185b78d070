"""FallbackJobSource -- 降级数据源

Lazy probe 策略：每次调用时先尝试 primary，失败则切换到 fallback。
不维护显式的"降级状态"标记。
只读路径（列表/详情/附件列表）允许降级；附件二进制获取不降级。
"""

from collections.abc import Awaitable, Callable
from typing import TypeVar

import structlog

from .exceptions import UpstreamError
from .models import Attachment, AttachmentContent, Job
from .protocols import JobSource

log = structlog.get_logger()

T = TypeVar("T")


class FallbackJobSource:
    """降级数据源

    降级链: ServiceM8Client -> DemoJobSource
    降级只是演示便利：上游故障被演示数据掩盖，生产部署应使用 live 模式。
    """

    def __init__(
        self,
        primary: JobSource,
        fallback: JobSource | None = None,
    ) -> None:
        """初始化降级数据源

        Args:
            primary: 主数据源（ServiceM8Client）
            fallback: 降级数据源（默认 DemoJobSource），None 表示无降级
        """
        self._primary = primary
        self._fallback = fallback

    async def _call_with_fallback(
        self,
        operation: str,
        primary_call: Callable[[JobSource], Awaitable[T]],
        **log_kwargs,
    ) -> T:
        """带降级的调用

        Raises:
            UpstreamError: primary 失败且无 fallback，或 fallback 也失败
        """
        primary_error: Exception | None = None
        try:
            return await primary_call(self._primary)
        except Exception as e:
            primary_error = e
            log.warning(
                "primary_failed_attempting_fallback",
                operation=operation,
                error=str(e),
                **log_kwargs,
            )

        if self._fallback is None:
            raise UpstreamError(
                f"Primary 调用失败且无 fallback 配置: {primary_error}",
                recoverable=False,
            ) from primary_error

        try:
            result = await primary_call(self._fallback)
        except Exception as fallback_error:
            log.error(
                "both_primary_and_fallback_failed",
                operation=operation,
                primary_error=str(primary_error),
                fallback_error=str(fallback_error),
            )
            raise UpstreamError(
                f"Primary 和 Fallback 均失败。Primary: {primary_error}; "
                f"Fallback: {fallback_error}",
                recoverable=False,
            ) from fallback_error

        log.info(
            "fallback_activated",
            operation=operation,
            fallback_reason=str(primary_error),
            **log_kwargs,
        )
        return result

    async def list_jobs(self) -> list[Job]:
        return await self._call_with_fallback(
            "list_jobs",
            lambda source: source.list_jobs(),
        )

    async def get_job(self, job_id: str) -> Job | None:
        """查询单个 job

        primary 返回 None（上游不存在）时同样查询 fallback，
        两者都没有才返回 None。
        """

        async def lookup(source: JobSource) -> Job | None:
            job = await source.get_job(job_id)
            if job is None and source is self._primary and self._fallback is not None:
                job = await self._fallback.get_job(job_id)
            return job

        return await self._call_with_fallback("get_job", lookup, job_id=job_id)

    async def list_attachments_for_job(self, job_id: str) -> list[Attachment]:
        return await self._call_with_fallback(
            "list_attachments_for_job",
            lambda source: source.list_attachments_for_job(job_id),
            job_id=job_id,
        )

    async def fetch_attachment(self, attachment_id: str) -> AttachmentContent:
        """二进制获取直接走 primary，失败原样向上传播"""
        return await self._primary.fetch_attachment(attachment_id)
