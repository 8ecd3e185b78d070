"""JsonMessageStore 测试 -- 追加、校验、排序、并发与损坏文件处理"""

import asyncio
import itertools
import json
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from fieldportal.core.exceptions import InvalidInputError, StorageError
from fieldportal.core.models import MessageDraft
from fieldportal.core.store import JsonMessageStore

_START = datetime(2024, 11, 20, 9, 0, tzinfo=UTC)


def _ticking_clock(step_s: int = 1):
    """每次调用前进 step_s 秒的时钟"""
    ticks = itertools.count()
    return lambda: _START + timedelta(seconds=next(ticks) * step_s)


def _draft(
    content: str = "Hello",
    booking_id: str = "job-001-uuid",
    customer_id: str = "cust-001",
) -> MessageDraft:
    return MessageDraft(
        booking_id=booking_id,
        customer_id=customer_id,
        customer_name="John Smith",
        customer_email="customer@example.com",
        content=content,
    )


class TestAppend:
    """消息追加"""

    async def test_append_assigns_id_and_trims(self, messages_path: Path):
        store = JsonMessageStore(messages_path)
        message = await store.append(_draft("  Hello there  "))

        assert len(message.id) == 26  # ULID 长度
        assert message.content == "Hello there"
        assert message.is_from_customer is True
        assert message.created_at.tzinfo is not None

    async def test_append_persists_camel_case_records(self, messages_path: Path):
        store = JsonMessageStore(messages_path)
        message = await store.append(_draft("Persist me"))

        records = json.loads(messages_path.read_text(encoding="utf-8"))
        assert len(records) == 1
        assert records[0]["id"] == message.id
        assert records[0]["bookingId"] == "job-001-uuid"
        assert records[0]["content"] == "Persist me"

    async def test_existing_records_preserved(self, messages_path: Path):
        messages_path.parent.mkdir(parents=True)
        messages_path.write_text(
            json.dumps(
                [
                    {
                        "id": "legacy-1",
                        "bookingId": "job-002-uuid",
                        "customerId": "cust-002",
                        "customerName": "Jane Doe",
                        "customerEmail": "jane.doe@example.com",
                        "content": "Earlier message",
                        "createdAt": "2024-11-01T00:00:00Z",
                        "isFromCustomer": True,
                    }
                ]
            ),
            encoding="utf-8",
        )
        store = JsonMessageStore(messages_path)
        await store.append(_draft())

        records = json.loads(messages_path.read_text(encoding="utf-8"))
        assert [r["id"] for r in records][0] == "legacy-1"
        assert len(records) == 2

    async def test_max_length_accepted(self, messages_path: Path):
        store = JsonMessageStore(messages_path)
        message = await store.append(_draft("x" * 2000))
        assert len(message.content) == 2000


class TestValidation:
    """内容校验失败时不写文件"""

    @pytest.mark.parametrize("content", ["", "   ", "\n\t"])
    async def test_blank_content_rejected(self, messages_path: Path, content):
        store = JsonMessageStore(messages_path)
        with pytest.raises(InvalidInputError, match="Message content is required"):
            await store.append(_draft(content))
        assert not messages_path.exists()

    async def test_too_long_rejected(self, messages_path: Path):
        store = JsonMessageStore(messages_path)
        with pytest.raises(
            InvalidInputError,
            match="Message content cannot exceed 2000 characters",
        ):
            await store.append(_draft("x" * 2001))
        assert not messages_path.exists()

    async def test_rejected_append_leaves_file_untouched(self, messages_path: Path):
        store = JsonMessageStore(messages_path)
        await store.append(_draft("first"))
        before = messages_path.read_text(encoding="utf-8")

        with pytest.raises(InvalidInputError):
            await store.append(_draft("   "))

        assert messages_path.read_text(encoding="utf-8") == before


class TestQueries:
    """查询与排序"""

    async def test_missing_file_created_lazily(self, messages_path: Path):
        store = JsonMessageStore(messages_path)
        assert not messages_path.exists()

        assert await store.list_for_booking("job-001-uuid") == []
        assert json.loads(messages_path.read_text(encoding="utf-8")) == []

    async def test_list_for_booking_newest_first(self, messages_path: Path):
        store = JsonMessageStore(messages_path, clock=_ticking_clock())
        await store.append(_draft("one"))
        await store.append(_draft("two"))
        await store.append(_draft("other booking", booking_id="job-002-uuid"))
        await store.append(_draft("three"))

        messages = await store.list_for_booking("job-001-uuid")
        assert [m.content for m in messages] == ["three", "two", "one"]

    async def test_same_timestamp_later_append_first(self, messages_path: Path):
        store = JsonMessageStore(messages_path, clock=lambda: _START)
        await store.append(_draft("first"))
        await store.append(_draft("second"))

        messages = await store.list_for_booking("job-001-uuid")
        assert [m.content for m in messages] == ["second", "first"]

    async def test_list_for_customer(self, messages_path: Path):
        store = JsonMessageStore(messages_path, clock=_ticking_clock())
        await store.append(_draft("mine", customer_id="cust-001"))
        await store.append(_draft("theirs", customer_id="cust-002"))
        await store.append(_draft("mine again", booking_id="job-003-uuid"))

        messages = await store.list_for_customer("cust-001")
        assert [m.content for m in messages] == ["mine again", "mine"]

    async def test_list_all(self, messages_path: Path):
        store = JsonMessageStore(messages_path, clock=_ticking_clock())
        await store.append(_draft("a"))
        await store.append(_draft("b", booking_id="job-002-uuid"))

        messages = await store.list_all()
        assert [m.content for m in messages] == ["b", "a"]


class TestConcurrency:
    """同一 store 实例的并发追加不丢失"""

    async def test_concurrent_appends_all_persisted(self, messages_path: Path):
        store = JsonMessageStore(messages_path)
        await asyncio.gather(*(store.append(_draft(f"msg-{i}")) for i in range(20)))

        records = json.loads(messages_path.read_text(encoding="utf-8"))
        assert len(records) == 20
        assert {r["content"] for r in records} == {f"msg-{i}" for i in range(20)}
        assert len({r["id"] for r in records}) == 20


class TestCorruptedFile:
    """损坏的消息文件"""

    async def test_invalid_json_raises_storage_error(self, messages_path: Path):
        messages_path.parent.mkdir(parents=True)
        messages_path.write_text("{not json", encoding="utf-8")
        store = JsonMessageStore(messages_path)

        with pytest.raises(StorageError, match="Failed to read messages"):
            await store.list_for_booking("job-001-uuid")

    async def test_non_array_raises_storage_error(self, messages_path: Path):
        messages_path.parent.mkdir(parents=True)
        messages_path.write_text('{"messages": []}', encoding="utf-8")
        store = JsonMessageStore(messages_path)

        with pytest.raises(StorageError):
            await store.append(_draft())
        assert json.loads(messages_path.read_text(encoding="utf-8")) == {"messages": []}

    async def test_naive_timestamp_treated_as_utc(self, messages_path: Path):
        """缺少时区的旧记录按 UTC 处理，可与新记录一起排序"""
        messages_path.parent.mkdir(parents=True)
        messages_path.write_text(
            json.dumps(
                [
                    {
                        "id": "legacy-naive",
                        "bookingId": "job-001-uuid",
                        "customerId": "cust-001",
                        "customerName": "John Smith",
                        "customerEmail": "customer@example.com",
                        "content": "Old message",
                        "createdAt": "2024-11-20T10:00:00",
                        "isFromCustomer": True,
                    }
                ]
            ),
            encoding="utf-8",
        )
        store = JsonMessageStore(
            messages_path,
            clock=lambda: datetime(2024, 11, 21, 9, 0, tzinfo=UTC),
        )
        await store.append(_draft("New message"))

        messages = await store.list_for_booking("job-001-uuid")

        assert [m.content for m in messages] == ["New message", "Old message"]
        assert messages[1].created_at == datetime(2024, 11, 20, 10, 0, tzinfo=UTC)

    async def test_invalid_record_raises_storage_error(self, messages_path: Path):
        messages_path.parent.mkdir(parents=True)
        messages_path.write_text('[{"id": "broken"}]', encoding="utf-8")
        store = JsonMessageStore(messages_path)

        with pytest.raises(StorageError):
            await store.list_all()
