"""Domain Model 单元测试 -- Customer / Message / SessionClaims"""

from datetime import UTC, datetime

import pytest
from fieldportal.core.models import (
    Customer,
    Message,
    SessionClaims,
    normalize_email,
    normalize_phone,
)
from pydantic import ValidationError


class TestNormalization:
    """email / phone 归一化"""

    def test_email_trimmed_and_lowercased(self):
        assert normalize_email("  Customer@Example.COM ") == "customer@example.com"

    @pytest.mark.parametrize(
        "raw",
        ["0400123456", "0400 123 456", "0400-123-456", "(0400) 123 456", " 0400\t123456 "],
    )
    def test_phone_separators_removed(self, raw):
        assert normalize_phone(raw) == "0400123456"

    def test_phone_keeps_plus_prefix(self):
        """只去除空白/连字符/括号，其他字符保留"""
        assert normalize_phone("+61 400 123 456") == "+61400123456"


class TestCustomer:
    """Customer 模型"""

    def test_fields_normalized_on_construction(self):
        customer = Customer(
            id="c1",
            email=" John@Example.com",
            phone="0400 123 456",
            first_name="John",
            last_name="Smith",
        )
        assert customer.email == "john@example.com"
        assert customer.phone == "0400123456"

    def test_accepts_camel_case_fields(self):
        customer = Customer.model_validate(
            {
                "id": "c2",
                "email": "jane@example.com",
                "phone": "0411222333",
                "firstName": "Jane",
                "lastName": "Doe",
            }
        )
        assert customer.first_name == "Jane"
        assert customer.display_name == "Jane Doe"

    def test_display_name_without_last_name(self):
        customer = Customer(id="c3", email="a@b.c", phone="1", first_name="Solo")
        assert customer.display_name == "Solo"

    def test_customer_is_immutable(self):
        customer = Customer(id="c4", email="a@b.c", phone="1")
        with pytest.raises(ValidationError):
            customer.email = "other@b.c"


class TestMessage:
    """Message 模型"""

    def test_record_uses_camel_case_keys(self):
        message = Message(
            id="01HXYZ",
            booking_id="job-001-uuid",
            customer_id="cust-001",
            customer_name="John Smith",
            customer_email="customer@example.com",
            content="Hello",
            created_at=datetime(2024, 11, 20, 9, 0, tzinfo=UTC),
        )
        record = message.to_record()
        assert set(record) == {
            "id",
            "bookingId",
            "customerId",
            "customerName",
            "customerEmail",
            "content",
            "createdAt",
            "isFromCustomer",
        }
        assert record["isFromCustomer"] is True
        assert record["createdAt"].startswith("2024-11-20T09:00:00")

    def test_record_parses_back(self):
        """落盘记录可以重新解析为 Message"""
        record = {
            "id": "m1",
            "bookingId": "job-002-uuid",
            "customerId": "cust-002",
            "customerName": "Jane Doe",
            "customerEmail": "jane.doe@example.com",
            "content": "Running late?",
            "createdAt": "2024-11-25T13:30:00Z",
            "isFromCustomer": True,
        }
        message = Message.model_validate(record)
        assert message.booking_id == "job-002-uuid"
        assert message.created_at.tzinfo is not None


class TestSessionClaims:
    """SessionClaims 模型"""

    def test_payload_uses_camel_case_keys(self):
        claims = SessionClaims(
            customer_id="cust-001",
            email="customer@example.com",
            first_name="John",
            last_name="Smith",
            iat=1000,
            exp=2000,
        )
        assert claims.to_payload() == {
            "customerId": "cust-001",
            "email": "customer@example.com",
            "firstName": "John",
            "lastName": "Smith",
            "iat": 1000,
            "exp": 2000,
        }

    def test_payload_round_trip(self):
        claims = SessionClaims(customer_id="c", email="e@x.com", iat=1, exp=2)
        assert SessionClaims.model_validate(claims.to_payload()) == claims
