"""SessionService -- 客户登录与会话 token 签发/校验

token 为 HS256 JWT，payload 即 SessionClaims。
无服务端会话存储：校验只检查签名和过期时间，不支持主动吊销。
"""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import structlog
from fieldportal.core.exceptions import InvalidInputError, UnauthorizedError
from fieldportal.core.models import Customer, SessionClaims
from fieldportal.core.store import CustomerStore
from jose import JWTError, jwt
from pydantic import BaseModel, ValidationError

log = structlog.get_logger()

ALGORITHM = "HS256"


class LoginResult(BaseModel):
    """登录结果"""

    token: str
    customer: Customer
    claims: SessionClaims


class SessionService:
    """会话签发/校验服务"""

    def __init__(
        self,
        customer_store: CustomerStore,
        secret: str,
        ttl: timedelta = timedelta(hours=24),
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """
        Args:
            customer_store: 客户凭据查询接口（可注入测试 fixture）
            secret: 签名密钥
            ttl: token 有效期
            clock: 当前时间来源（测试可注入固定时钟）
        """
        self._customers = customer_store
        self._secret = secret
        self._ttl = ttl
        self._clock = clock or (lambda: datetime.now(UTC))

    def _now_ts(self) -> int:
        return int(self._clock().timestamp())

    async def login(self, email: str | None, phone: str | None) -> LoginResult:
        """email + phone 登录

        Raises:
            InvalidInputError: email 或 phone 缺失
            UnauthorizedError: 不匹配任何客户（不区分是哪个字段错误）
        """
        if not email or not phone or not email.strip() or not phone.strip():
            raise InvalidInputError("Email and phone number are required")

        customer = await self._customers.find_by_credentials(email, phone)
        if customer is None:
            log.info("login_rejected", reason="no_matching_customer")
            raise UnauthorizedError("Invalid email or phone number")

        token, claims = self.issue(customer)
        log.info("login_succeeded", customer_id=customer.id, expires_at=claims.exp)
        return LoginResult(token=token, customer=customer, claims=claims)

    def issue(self, customer: Customer) -> tuple[str, SessionClaims]:
        """为客户签发会话 token"""
        iat = self._now_ts()
        claims = SessionClaims(
            customer_id=customer.id,
            email=customer.email,
            first_name=customer.first_name,
            last_name=customer.last_name,
            iat=iat,
            exp=iat + int(self._ttl.total_seconds()),
        )
        token = jwt.encode(claims.to_payload(), self._secret, algorithm=ALGORITHM)
        return token, claims

    def verify(self, authorization: str | None) -> SessionClaims:
        """校验 Authorization 头（必须为 "Bearer <token>"）

        Raises:
            UnauthorizedError: 缺失、格式错误、过期或签名无效
        """
        if not authorization:
            raise UnauthorizedError("No authorization token provided")

        parts = authorization.split(" ")
        if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
            raise UnauthorizedError("Invalid authorization header format")

        return self.decode(parts[1])

    def decode(self, token: str) -> SessionClaims:
        """校验签名与过期时间，返回声明

        过期判断使用注入的时钟：now >= exp 即视为过期。
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"verify_exp": False},
            )
            claims = SessionClaims.model_validate(payload)
        except (JWTError, ValidationError) as e:
            log.info("session_rejected", reason="invalid_token", error=str(e))
            raise UnauthorizedError("Invalid token", detail=str(e)) from e

        if self._now_ts() >= claims.exp:
            log.info(
                "session_rejected",
                reason="expired",
                customer_id=claims.customer_id,
                exp=claims.exp,
            )
            raise UnauthorizedError("Token has expired", detail="expired")

        return claims
