"""CustomerStore 内存实现

客户列表在进程启动时确定，之后只读。
未配置 PORTAL_CUSTOMERS_PATH 时使用内置演示客户。
"""

import json
from collections.abc import Iterable
from pathlib import Path

import structlog

from ..models.customer import Customer, normalize_email, normalize_phone

log = structlog.get_logger()

DEMO_CUSTOMERS: tuple[Customer, ...] = (
    Customer(
        id="cust-001",
        email="customer@example.com",
        phone="0400123456",
        first_name="John",
        last_name="Smith",
    ),
    Customer(
        id="cust-002",
        email="jane.doe@example.com",
        phone="0411222333",
        first_name="Jane",
        last_name="Doe",
    ),
)


class StaticCustomerStore:
    """CustomerStore 的静态内存实现"""

    def __init__(self, customers: Iterable[Customer] = DEMO_CUSTOMERS) -> None:
        self._by_email: dict[str, Customer] = {}
        self._by_id: dict[str, Customer] = {}
        for customer in customers:
            if customer.email in self._by_email:
                raise ValueError(f"duplicate customer email: {customer.email}")
            self._by_email[customer.email] = customer
            self._by_id[customer.id] = customer

    def __len__(self) -> int:
        return len(self._by_id)

    async def find_by_credentials(self, email: str, phone: str) -> Customer | None:
        """按归一化后的 email + phone 精确匹配

        email 或 phone 任一不匹配都返回 None，调用方不区分具体原因。
        """
        customer = self._by_email.get(normalize_email(email))
        if customer is None or customer.phone != normalize_phone(phone):
            return None
        return customer

    async def get_customer(self, customer_id: str) -> Customer | None:
        return self._by_id.get(customer_id)


def load_customers(path: str | Path) -> list[Customer]:
    """从 JSON 文件加载客户列表

    文件内容为 JSON 数组，元素字段：id, email, phone, firstName, lastName
    （也接受 snake_case 字段名）。

    Raises:
        ValueError: 文件内容不是 JSON 数组
    """
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise ValueError(f"customers file must contain a JSON array: {path}")
    customers = [Customer.model_validate(item) for item in raw]
    log.info("customers_loaded", path=str(path), count=len(customers))
    return customers
