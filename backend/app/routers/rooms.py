"""
房间管理路由
列表、详情与可用性查询公开；创建 / 删除需管理员，更新需管理员或员工
"""
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.ontology import RoomType, RoomStatus
from app.models.schemas import (
    RoomCreate, RoomUpdate, RoomResponse, RoomAvailabilityResponse, MessageResponse
)
from app.services.room_service import RoomService
from app.services.paging import with_total
from app.security.auth import require_admin, require_admin_or_staff
from core.security.context import SecurityContext

router = APIRouter(prefix="/rooms", tags=["房间管理"])


@router.get("", response_model=List[RoomResponse])
def list_rooms(
    response: Response,
    room_type: Optional[RoomType] = None,
    status: Optional[RoomStatus] = None,
    min_price: Optional[Decimal] = Query(default=None, ge=0),
    max_price: Optional[Decimal] = Query(default=None, ge=0),
    min_capacity: Optional[int] = Query(default=None, ge=1),
    search: Optional[str] = None,
    check_in: Optional[datetime] = None,
    check_out: Optional[datetime] = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    db: Session = Depends(get_db)
):
    """获取房间列表，给出入住 / 离店日期时只列出可预订的房间"""
    items = RoomService(db).get_rooms(
        room_type=room_type, status=status,
        min_price=min_price, max_price=max_price,
        min_capacity=min_capacity, search=search,
        check_in=check_in, check_out=check_out,
        page=page, limit=limit
    )
    return with_total(response, items)


@router.get("/{room_id}", response_model=RoomResponse)
def get_room(room_id: int, db: Session = Depends(get_db)):
    """获取房间详情"""
    return RoomService(db).get_room(room_id)


@router.get("/{room_id}/availability", response_model=RoomAvailabilityResponse)
def check_room_availability(
    room_id: int,
    check_in: datetime,
    check_out: datetime,
    db: Session = Depends(get_db)
):
    """查询房间在日期区间内是否可订"""
    return RoomService(db).check_availability(room_id, check_in, check_out)


@router.post("", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
def create_room(
    data: RoomCreate,
    db: Session = Depends(get_db),
    ctx: SecurityContext = Depends(require_admin)
):
    """创建房间"""
    return RoomService(db).create_room(data)


@router.put("/{room_id}", response_model=RoomResponse)
def update_room(
    room_id: int,
    data: RoomUpdate,
    db: Session = Depends(get_db),
    ctx: SecurityContext = Depends(require_admin_or_staff)
):
    """更新房间"""
    return RoomService(db).update_room(room_id, data)


@router.delete("/{room_id}", response_model=MessageResponse)
def delete_room(
    room_id: int,
    db: Session = Depends(get_db),
    ctx: SecurityContext = Depends(require_admin)
):
    """删除房间"""
    RoomService(db).delete_room(room_id)
    return {"message": "房间已删除"}
