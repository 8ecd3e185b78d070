"""AttachmentLinkService 单元测试 -- open / signed 访问策略"""

from datetime import UTC, datetime, timedelta
from urllib.parse import parse_qs, urlsplit

import pytest
from fieldportal.core.exceptions import UnauthorizedError
from fieldportal.gateway.services.attachment_links import AttachmentLinkService

_NOW = datetime(2024, 11, 20, 9, 0, tzinfo=UTC)


def _signed(now: datetime = _NOW, ttl_s: int = 300) -> AttachmentLinkService:
    return AttachmentLinkService(
        access="signed",
        secret="link-secret",
        ttl_s=ttl_s,
        clock=lambda: now,
    )


def _token_of(url: str) -> str:
    return parse_qs(urlsplit(url).query)["token"][0]


class TestOpenAccess:
    def test_plain_links(self):
        service = AttachmentLinkService(access="open", secret="s")
        assert service.links_for("attach-001") == {
            "downloadUrl": "/api/attachments/attach-001/download",
            "viewUrl": "/api/attachments/attach-001/view",
        }

    def test_authorize_without_token(self):
        service = AttachmentLinkService(access="open", secret="s")
        service.authorize("attach-001", None)


class TestSignedAccess:
    def test_links_carry_token(self):
        links = _signed().links_for("attach-001")

        assert links["downloadUrl"].startswith("/api/attachments/attach-001/download?token=")
        assert links["viewUrl"].startswith("/api/attachments/attach-001/view?token=")

    def test_signed_token_authorizes(self):
        service = _signed()
        token = _token_of(service.links_for("attach-001")["downloadUrl"])
        service.authorize("attach-001", token)

    def test_missing_token_rejected(self):
        with pytest.raises(UnauthorizedError, match="Attachment link token is required"):
            _signed().authorize("attach-001", None)

    def test_token_for_other_attachment_rejected(self):
        service = _signed()
        token = service.sign("attach-001")
        with pytest.raises(UnauthorizedError, match="Invalid attachment link"):
            service.authorize("attach-002", token)

    def test_garbage_token_rejected(self):
        with pytest.raises(UnauthorizedError, match="Invalid attachment link"):
            _signed().authorize("attach-001", "garbage")

    def test_expired_link_rejected(self):
        token = _signed().sign("attach-001")
        later = _signed(now=_NOW + timedelta(seconds=300))
        with pytest.raises(UnauthorizedError, match="Attachment link has expired"):
            later.authorize("attach-001", token)

    def test_link_valid_within_ttl(self):
        token = _signed().sign("attach-001")
        _signed(now=_NOW + timedelta(seconds=299)).authorize("attach-001", token)
