"""全局 pytest 配置 -- 环境隔离 + 临时消息文件 + 测试用 app fixture"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from fieldportal.core.store import StoreGroup, create_store_group
from fieldportal.gateway.config import GatewayConfig
from fieldportal.upstream import DemoJobSource, UpstreamConfig
from httpx import ASGITransport, AsyncClient
from pydantic import SecretStr

TEST_SECRET = "test-session-secret"

_PORTAL_ENV_VARS = (
    "PORTAL_DATA_DIR",
    "PORTAL_MESSAGES_PATH",
    "PORTAL_CUSTOMERS_PATH",
    "SERVICEM8_BASE_URL",
    "SERVICEM8_API_KEY",
    "PORTAL_JOB_SOURCE_MODE",
    "PORTAL_UPSTREAM_TIMEOUT_S",
    "JWT_SECRET",
    "PORTAL_SESSION_TTL_HOURS",
    "PORTAL_ATTACHMENT_ACCESS",
    "PORTAL_ATTACHMENT_LINK_TTL_S",
    "PORTAL_FILTER_BOOKINGS_BY_CUSTOMER",
    "PORTAL_ALLOWED_ORIGINS",
)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    """清除 portal 相关环境变量，避免宿主环境影响测试"""
    for key in _PORTAL_ENV_VARS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("LOGFIRE_SEND_TO_LOGFIRE", "false")


@pytest.fixture
def messages_path(tmp_path: Path) -> Path:
    """临时消息文件路径（文件本身不预先创建）"""
    return tmp_path / "data" / "messages.json"


@pytest.fixture
def gateway_config() -> GatewayConfig:
    """测试用 Gateway 配置（固定签名密钥）"""
    return GatewayConfig(session_secret=SecretStr(TEST_SECRET))


@pytest.fixture
def job_source():
    """默认使用演示数据源"""
    return DemoJobSource()


@pytest_asyncio.fixture
async def store_group(messages_path: Path) -> StoreGroup:
    return await create_store_group(messages_path)


@pytest_asyncio.fixture
async def test_app(gateway_config, store_group, job_source):
    """创建测试用 FastAPI app，手动装配服务（绕过 lifespan）"""
    from fieldportal.gateway.main import configure_services, create_app

    app = create_app(gateway_config)
    configure_services(
        app,
        store_group=store_group,
        job_source=job_source,
        gateway_config=gateway_config,
        upstream_config=UpstreamConfig(),
    )
    yield app


@pytest_asyncio.fixture
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """提供 httpx AsyncClient"""
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def login_as(client: AsyncClient):
    """返回登录函数：login_as(email, phone) -> Authorization 头"""

    async def _login(email: str, phone: str) -> dict[str, str]:
        resp = await client.post("/api/auth/login", json={"email": email, "phone": phone})
        assert resp.status_code == 200, resp.text
        return {"Authorization": f"Bearer {resp.json()['token']}"}

    return _login


@pytest_asyncio.fixture
async def auth_headers(login_as) -> dict[str, str]:
    """演示客户 John Smith 的会话头"""
    return await login_as("customer@example.com", "0400123456")
