"""
预订路由
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.ontology import BookingStatus
from app.models.schemas import BookingCreate, BookingResponse, StatusUpdate, MessageResponse
from app.services.booking_service import BookingService
from app.services.paging import with_total
from app.security.auth import require_authenticated
from core.security.context import SecurityContext

router = APIRouter(prefix="/bookings", tags=["预订管理"])


@router.get("", response_model=List[BookingResponse])
def list_bookings(
    response: Response,
    status: Optional[BookingStatus] = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    db: Session = Depends(get_db),
    ctx: SecurityContext = Depends(require_authenticated)
):
    """获取预订列表（管理员可见全部）"""
    items = BookingService(db).get_bookings(ctx, status=status, page=page, limit=limit)
    return with_total(response, items)


@router.get("/{booking_id}", response_model=BookingResponse)
def get_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    ctx: SecurityContext = Depends(require_authenticated)
):
    """获取预订详情"""
    return BookingService(db).get_booking(booking_id, ctx)


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def create_booking(
    data: BookingCreate,
    db: Session = Depends(get_db),
    ctx: SecurityContext = Depends(require_authenticated)
):
    """创建预订"""
    return BookingService(db).create_booking(ctx.client_id, data)


@router.put("/{booking_id}/status", response_model=BookingResponse)
def update_booking_status(
    booking_id: int,
    data: StatusUpdate,
    db: Session = Depends(get_db),
    ctx: SecurityContext = Depends(require_authenticated)
):
    """变更预订状态"""
    return BookingService(db).update_status(booking_id, ctx, data.status)


@router.delete("/{booking_id}", response_model=MessageResponse)
def delete_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    ctx: SecurityContext = Depends(require_authenticated)
):
    """删除预订"""
    BookingService(db).delete_booking(booking_id, ctx)
    return {"message": "预订已删除"}
