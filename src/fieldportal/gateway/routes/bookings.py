"""预约查询路由

GET /api/bookings: 已登录客户的预约列表。
GET /api/bookings/{booking_id}: 预约详情（含联系人），不存在返回 404。
"""

from fastapi import APIRouter, Depends
from fieldportal.core.exceptions import NotFoundError
from fieldportal.core.models import SessionClaims

from ..deps import get_booking_service, get_current_claims
from ..services.booking_service import BookingService

router = APIRouter()


@router.get("/api/bookings")
async def list_bookings(
    claims: SessionClaims = Depends(get_current_claims),
    booking_service: BookingService = Depends(get_booking_service),
):
    """查询预约列表"""
    bookings = await booking_service.list_bookings(claims)
    return {
        "success": True,
        "bookings": bookings,
        "count": len(bookings),
    }


@router.get("/api/bookings/{booking_id}")
async def get_booking(
    booking_id: str,
    claims: SessionClaims = Depends(get_current_claims),
    booking_service: BookingService = Depends(get_booking_service),
):
    """查询预约详情"""
    booking = await booking_service.get_booking(booking_id)
    if booking is None:
        raise NotFoundError("Booking not found")

    return {
        "success": True,
        "booking": booking,
    }
