"""客户认证路由

POST /api/auth/login: email + phone 登录，签发 24 小时会话 token。
GET /api/auth/me: 返回当前会话中的客户声明。
"""

from fastapi import APIRouter, Depends
from fieldportal.core.models import SessionClaims
from pydantic import BaseModel, Field

from ..deps import get_current_claims, get_session_service
from ..services.session_service import SessionService

router = APIRouter()


class LoginRequest(BaseModel):
    """登录请求体 -- 字段缺失由 SessionService 统一返回 400"""

    email: str | None = Field(default=None, description="客户 email")
    phone: str | None = Field(default=None, description="客户电话")


@router.post("/api/auth/login")
async def login(
    body: LoginRequest,
    session_service: SessionService = Depends(get_session_service),
):
    """email + phone 登录

    - 成功返回 token + 客户公开字段
    - 缺少字段返回 400
    - 不匹配返回 401（不区分 email 还是 phone 错误）
    """
    result = await session_service.login(body.email, body.phone)
    customer = result.customer
    return {
        "success": True,
        "message": "Login successful",
        "token": result.token,
        "customer": {
            "id": customer.id,
            "email": customer.email,
            "firstName": customer.first_name,
            "lastName": customer.last_name,
        },
    }


@router.get("/api/auth/me")
async def current_user(claims: SessionClaims = Depends(get_current_claims)):
    """返回当前会话声明"""
    return {
        "success": True,
        "customer": claims.to_payload(),
    }
