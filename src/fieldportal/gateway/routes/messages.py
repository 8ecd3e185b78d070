"""消息路由

GET /api/messages/booking/{booking_id}: 预约消息列表（按时间倒序）。
POST /api/messages/booking/{booking_id}: 以会话身份发送消息，成功返回 201。
GET /api/messages/all: 当前客户发出的全部消息。
"""

from typing import Any

from fastapi import APIRouter, Depends
from fieldportal.core.models import SessionClaims
from pydantic import BaseModel, Field
from starlette.responses import JSONResponse

from ..deps import get_current_claims, get_message_service
from ..services.message_service import MessageService

router = APIRouter()


class MessageRequest(BaseModel):
    """消息发送请求体 -- 内容校验由 MessageStore 负责"""

    content: Any = Field(default=None, description="消息文本（最多 2000 字符）")


@router.get("/api/messages/booking/{booking_id}")
async def list_booking_messages(
    booking_id: str,
    claims: SessionClaims = Depends(get_current_claims),
    message_service: MessageService = Depends(get_message_service),
):
    """查询预约消息"""
    messages = await message_service.list_for_booking(booking_id)
    return {
        "success": True,
        "messages": [m.to_record() for m in messages],
        "count": len(messages),
    }


@router.post("/api/messages/booking/{booking_id}")
async def send_booking_message(
    booking_id: str,
    body: MessageRequest,
    claims: SessionClaims = Depends(get_current_claims),
    message_service: MessageService = Depends(get_message_service),
):
    """发送消息

    - 成功返回 201 + 消息记录
    - 内容为空或超长返回 400
    """
    message = await message_service.send(booking_id, body.content, claims)
    return JSONResponse(
        status_code=201,
        content={
            "success": True,
            "message": "Message sent successfully",
            "data": message.to_record(),
        },
    )


@router.get("/api/messages/all")
async def list_my_messages(
    claims: SessionClaims = Depends(get_current_claims),
    message_service: MessageService = Depends(get_message_service),
):
    """查询当前客户的全部消息"""
    messages = await message_service.list_for_customer(claims)
    return {
        "success": True,
        "messages": [m.to_record() for m in messages],
        "count": len(messages),
    }
