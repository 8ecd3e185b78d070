"""端到端流程测试 -- 登录 -> 预约 -> 消息 -> 附件

通过 create_app() + 手动装配的 app 走完整 HTTP 链路（演示数据源）。
"""

from httpx import AsyncClient


class TestCustomerJourney:
    """演示客户完整使用流程"""

    async def test_login_browse_and_message(self, client: AsyncClient):
        login = await client.post(
            "/api/auth/login",
            json={"email": "customer@example.com", "phone": "0400123456"},
        )
        assert login.status_code == 200
        headers = {"Authorization": f"Bearer {login.json()['token']}"}

        bookings = await client.get("/api/bookings", headers=headers)
        assert bookings.status_code == 200
        items = bookings.json()["bookings"]
        assert items
        assert any(b["jobNumber"].startswith("JOB-") for b in items)
        booking_id = items[0]["id"]

        sent = await client.post(
            f"/api/messages/booking/{booking_id}",
            json={"content": "Hello"},
            headers=headers,
        )
        assert sent.status_code == 201
        record = sent.json()["data"]
        assert record["isFromCustomer"] is True

        for_booking = await client.get(f"/api/messages/booking/{booking_id}", headers=headers)
        assert [m["id"] for m in for_booking.json()["messages"]] == [record["id"]]
        mine = await client.get("/api/messages/all", headers=headers)
        assert [m["content"] for m in mine.json()["messages"]] == ["Hello"]

        download = await client.get("/api/attachments/does-not-exist/download")
        assert download.status_code == 500

    async def test_repeated_reads_are_stable(self, client: AsyncClient, auth_headers):
        for content in ("one", "two"):
            await client.post(
                "/api/messages/booking/job-002-uuid",
                json={"content": content},
                headers=auth_headers,
            )

        first = await client.get("/api/messages/booking/job-002-uuid", headers=auth_headers)
        second = await client.get("/api/messages/booking/job-002-uuid", headers=auth_headers)

        assert first.json() == second.json()


class TestRejections:
    async def test_unknown_customer_same_shape_as_wrong_phone(self, client: AsyncClient):
        unknown = await client.post(
            "/api/auth/login", json={"email": "x@x.com", "phone": "000"}
        )
        wrong_phone = await client.post(
            "/api/auth/login",
            json={"email": "customer@example.com", "phone": "000"},
        )
        assert unknown.status_code == wrong_phone.status_code == 401
        assert unknown.json() == wrong_phone.json()

    async def test_unknown_booking_404(self, client: AsyncClient, auth_headers):
        resp = await client.get("/api/bookings/no-such-booking", headers=auth_headers)
        assert resp.status_code == 404
        assert resp.json()["error"] == "Not Found"
