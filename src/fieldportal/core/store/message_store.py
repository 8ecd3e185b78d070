"""MessageStore JSON 文件实现

所有消息保存在单个 JSON 数组文件中，每次追加执行完整的
读取全部 -> 内存追加 -> 写回全部 流程。

同一 store 实例内的追加通过 asyncio.Lock 串行化，避免并发请求读到同一快照后
相互覆盖（lost update）。跨进程写入不做保护。
文件 I/O 通过 asyncio.to_thread 执行，不阻塞事件循环。
"""

import asyncio
import json
import os
import tempfile
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from pathlib import Path

import structlog
from pydantic import ValidationError
from ulid import ULID

from ..config import MESSAGE_MAX_LENGTH
from ..exceptions import InvalidInputError, StorageError
from ..models.message import Message, MessageDraft

log = structlog.get_logger()


def _newest_first(messages: Iterable[Message]) -> list[Message]:
    """按 createdAt 倒序；时间相同时后追加的排在前面"""
    return sorted(
        reversed(list(messages)),
        key=lambda m: m.created_at,
        reverse=True,
    )


class JsonMessageStore:
    """MessageStore 的 JSON 文件实现"""

    def __init__(
        self,
        path: str | Path,
        max_length: int = MESSAGE_MAX_LENGTH,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._path = Path(path)
        self._max_length = max_length
        self._clock = clock or (lambda: datetime.now(UTC))
        self._write_lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    async def append(self, draft: MessageDraft) -> Message:
        """校验并追加消息

        Raises:
            InvalidInputError: 内容为空（裁剪后）或超过长度上限，文件不会被修改
            StorageError: 文件读写失败
        """
        content = self._validate_content(draft.content)

        async with self._write_lock:
            messages = await self._read_all()
            message = Message(
                id=str(ULID()),
                booking_id=draft.booking_id,
                customer_id=draft.customer_id,
                customer_name=draft.customer_name,
                customer_email=draft.customer_email,
                content=content,
                created_at=self._clock(),
                is_from_customer=draft.is_from_customer,
            )
            messages.append(message)
            await self._write_all(messages)

        log.info(
            "message_appended",
            message_id=message.id,
            booking_id=message.booking_id,
            customer_id=message.customer_id,
            total_messages=len(messages),
        )
        return message

    async def list_for_booking(self, booking_id: str) -> list[Message]:
        messages = await self._read_all()
        return _newest_first(m for m in messages if m.booking_id == booking_id)

    async def list_for_customer(self, customer_id: str) -> list[Message]:
        messages = await self._read_all()
        return _newest_first(m for m in messages if m.customer_id == customer_id)

    async def list_all(self) -> list[Message]:
        """查询全部消息，按 createdAt 倒序（运维 CLI 使用）"""
        return _newest_first(await self._read_all())

    def _validate_content(self, content: object) -> str:
        if not isinstance(content, str) or not content.strip():
            raise InvalidInputError("Message content is required")
        if len(content) > self._max_length:
            raise InvalidInputError(
                f"Message content cannot exceed {self._max_length} characters"
            )
        return content.strip()

    async def _read_all(self) -> list[Message]:
        records = await asyncio.to_thread(self._read_records)
        try:
            return [Message.model_validate(record) for record in records]
        except ValidationError as e:
            log.error("message_file_invalid_record", path=str(self._path), error=str(e))
            raise StorageError("Failed to read messages", detail=str(e)) from e

    async def _write_all(self, messages: list[Message]) -> None:
        records = [m.to_record() for m in messages]
        await asyncio.to_thread(self._write_records, records)

    def _ensure_file(self) -> None:
        """首次访问时创建目录和空数组文件"""
        if self._path.exists():
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with self._path.open("x", encoding="utf-8") as f:
                f.write("[]")
        except FileExistsError:
            pass
        else:
            log.info("message_file_created", path=str(self._path))

    def _read_records(self) -> list[dict]:
        try:
            self._ensure_file()
            raw = self._path.read_text(encoding="utf-8")
            data = json.loads(raw) if raw.strip() else []
        except (OSError, json.JSONDecodeError) as e:
            log.error("message_file_read_failed", path=str(self._path), error=str(e))
            raise StorageError("Failed to read messages", detail=str(e)) from e

        if not isinstance(data, list):
            log.error("message_file_not_array", path=str(self._path))
            raise StorageError(
                "Failed to read messages",
                detail=f"{self._path} does not contain a JSON array",
            )
        return data

    def _write_records(self, records: list[dict]) -> None:
        """原子写回：先写同目录临时文件，再 os.replace 覆盖"""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(records, f, ensure_ascii=False, indent=2)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            log.error("message_file_write_failed", path=str(self._path), error=str(e))
            raise StorageError("Failed to send message", detail=str(e)) from e
