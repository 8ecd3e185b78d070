"""ServiceM8Client -- ServiceM8 REST API 调用封装

通过 httpx.AsyncClient 调用上游，使用服务端持有的 X-API-Key 鉴权。
不做缓存、不做重试；失败统一包装为 UpstreamError 子类。
"""

import time

import httpx
import structlog
from pydantic import ValidationError

from .config import SERVICEM8_BASE_URL
from .exceptions import UpstreamError, UpstreamResponseError, UpstreamUnreachableError
from .models import Attachment, AttachmentContent, Job

log = structlog.get_logger()

# 健康检查超时（硬编码，应快速响应）
HEALTH_CHECK_TIMEOUT_S = 5

# 连接类异常类型集合（触发 UpstreamUnreachableError）
_CONNECTION_ERROR_TYPES = (
    ConnectionError,
    OSError,
    TimeoutError,
    httpx.TransportError,
)


class ServiceM8Client:
    """ServiceM8 API 客户端"""

    def __init__(
        self,
        api_key: str,
        base_url: str = SERVICEM8_BASE_URL,
        timeout_s: int = 30,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """初始化 ServiceM8 客户端

        Args:
            api_key: ServiceM8 API key（SERVICEM8_API_KEY）
            base_url: API 基础 URL
            timeout_s: 请求超时（秒）
            transport: 自定义 httpx transport（测试注入 MockTransport）
        """
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout_s = timeout_s
        self._transport = transport

    def _http_client(self, timeout: float | None = None) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            headers={
                "Accept": "application/json",
                "X-API-Key": self._api_key,
            },
            timeout=timeout or self._timeout_s,
            transport=self._transport,
        )

    async def _get(
        self,
        path: str,
        params: dict[str, str] | None = None,
        allow_not_found: bool = False,
    ) -> httpx.Response | None:
        """发送 GET 请求

        Returns:
            成功响应；allow_not_found=True 且上游返回 404 时返回 None

        Raises:
            UpstreamUnreachableError: 连接失败或超时
            UpstreamResponseError: 非 2xx 响应
        """
        start_time = time.monotonic()
        try:
            async with self._http_client() as http_client:
                resp = await http_client.get(path, params=params)
        except _CONNECTION_ERROR_TYPES as e:
            duration_ms = int((time.monotonic() - start_time) * 1000)
            log.error(
                "upstream_call_failed",
                path=path,
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=duration_ms,
            )
            raise UpstreamUnreachableError(
                base_url=self._base_url,
                original_error=e,
            ) from e

        duration_ms = int((time.monotonic() - start_time) * 1000)
        if allow_not_found and resp.status_code == 404:
            log.info("upstream_not_found", path=path, duration_ms=duration_ms)
            return None
        if resp.is_error:
            log.error(
                "upstream_call_failed",
                path=path,
                status_code=resp.status_code,
                duration_ms=duration_ms,
            )
            raise UpstreamResponseError(path=path, status_code=resp.status_code)

        log.debug(
            "upstream_call_completed",
            path=path,
            status_code=resp.status_code,
            duration_ms=duration_ms,
        )
        return resp

    @staticmethod
    def _json(resp: httpx.Response, path: str):
        try:
            return resp.json()
        except ValueError as e:
            raise UpstreamError(f"ServiceM8 返回非 JSON 响应: {path}") from e

    async def list_jobs(self) -> list[Job]:
        """GET /job.json"""
        path = "/job.json"
        resp = await self._get(path)
        data = self._json(resp, path)
        if not isinstance(data, list):
            raise UpstreamError(f"ServiceM8 job 列表格式异常: {path}")
        jobs: list[Job] = []
        for item in data:
            # 单条记录格式异常只跳过该条，不拖垮整个列表
            try:
                jobs.append(Job.model_validate(item))
            except ValidationError as e:
                log.warning(
                    "upstream_job_skipped",
                    job_id=item.get("uuid") if isinstance(item, dict) else None,
                    error_count=e.error_count(),
                )
        log.info("upstream_jobs_listed", count=len(jobs), skipped=len(data) - len(jobs))
        return jobs

    async def get_job(self, job_id: str) -> Job | None:
        """GET /job/{uuid}.json，上游 404 时返回 None"""
        path = f"/job/{job_id}.json"
        resp = await self._get(path, allow_not_found=True)
        if resp is None:
            return None
        try:
            return Job.model_validate(self._json(resp, path))
        except ValidationError as e:
            raise UpstreamError(f"ServiceM8 job 字段格式异常: {e}") from e

    async def list_attachments_for_job(self, job_id: str) -> list[Attachment]:
        """GET /attachment.json，按 related_object_uuid 过滤"""
        path = "/attachment.json"
        resp = await self._get(
            path,
            params={"$filter": f"related_object_uuid eq '{job_id}'"},
        )
        data = self._json(resp, path)
        if not isinstance(data, list):
            raise UpstreamError(f"ServiceM8 附件列表格式异常: {path}")
        try:
            attachments = [Attachment.from_upstream(item) for item in data]
        except (KeyError, TypeError, ValidationError) as e:
            raise UpstreamError(f"ServiceM8 附件字段格式异常: {e}") from e
        log.info("upstream_attachments_listed", job_id=job_id, count=len(attachments))
        return attachments

    async def fetch_attachment(self, attachment_id: str) -> AttachmentContent:
        """GET /attachment/{uuid}.file -- 二进制透传"""
        resp = await self._get(f"/attachment/{attachment_id}.file")
        content_type = resp.headers.get("content-type") or "application/octet-stream"
        log.info(
            "upstream_attachment_fetched",
            attachment_id=attachment_id,
            content_type=content_type,
            size=len(resp.content),
        )
        return AttachmentContent(content=resp.content, content_type=content_type)

    async def health_check(self) -> bool:
        """检查 ServiceM8 API 可达性

        发送 GET {base_url}/job.json?$top=1 请求。

        注意: 此方法不抛出异常，所有异常内部捕获并返回 False。
        """
        try:
            async with self._http_client(timeout=HEALTH_CHECK_TIMEOUT_S) as http_client:
                resp = await http_client.get("/job.json", params={"$top": "1"})
                return resp.status_code == 200
        except Exception as e:
            log.debug("health_check_failed", base_url=self._base_url, error=str(e))
            return False
