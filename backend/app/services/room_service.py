"""
房间服务 - 本体操作层
管理 Room 对象与可用性查询
rating / num_reviews 只由评价服务重算，这里不接受调用方写入
"""
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
import logging
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.ontology import Room, RoomType, RoomStatus
from app.models.schemas import RoomCreate, RoomUpdate
from app.services.availability import AvailabilityChecker
from app.services.paging import paginate
from core.domain.rules.availability_rules import validate_date_range
from core.domain.rules.pricing_rules import count_nights, price_for_stay
from core.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

# 调用方不能写入的派生字段
DERIVED_FIELDS = ("rating", "num_reviews")


class RoomService:
    """房间服务"""

    def __init__(self, db: Session):
        self.db = db

    # ============== 查询 ==============

    def get_rooms(self, room_type: Optional[RoomType] = None,
                  status: Optional[RoomStatus] = None,
                  min_price: Optional[Decimal] = None,
                  max_price: Optional[Decimal] = None,
                  min_capacity: Optional[int] = None,
                  search: Optional[str] = None,
                  check_in: Optional[datetime] = None,
                  check_out: Optional[datetime] = None,
                  page: int = 1, limit: Optional[int] = None) -> List[Room]:
        """
        获取房间列表（最新的在前）

        同时给出 check_in 和 check_out 时只返回该区间内可预订的房间：
        排除维修中的房间，以及有 pending / confirmed 预订与区间重叠的房间

        Raises:
            ValidationError: 只给出一端日期，或日期区间不合法
        """
        query = self.db.query(Room)

        if room_type:
            query = query.filter(Room.room_type == room_type)
        if status:
            query = query.filter(Room.status == status)
        if min_price is not None:
            query = query.filter(Room.price_per_night >= min_price)
        if max_price is not None:
            query = query.filter(Room.price_per_night <= max_price)
        if min_capacity is not None:
            query = query.filter(Room.capacity >= min_capacity)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(or_(
                Room.name.ilike(pattern),
                Room.description.ilike(pattern),
                Room.room_number.ilike(pattern),
            ))
        if check_in is not None or check_out is not None:
            if check_in is None or check_out is None:
                raise ValidationError("按日期筛选需要同时提供入住和离店日期")
            booked = AvailabilityChecker(self.db).booked_room_ids(check_in, check_out)
            query = query.filter(
                Room.status != RoomStatus.MAINTENANCE,
                Room.id.not_in(booked),
            )

        return paginate(query.order_by(Room.created_at.desc(), Room.id.desc()), page, limit)

    def get_room(self, room_id: int) -> Room:
        room = self.db.query(Room).filter(Room.id == room_id).first()
        if not room:
            raise NotFoundError("房间不存在")
        return room

    def get_room_by_number(self, room_number: str) -> Optional[Room]:
        return self.db.query(Room).filter(Room.room_number == room_number).first()

    # ============== 写操作 ==============

    def create_room(self, data: RoomCreate) -> Room:
        """创建房间"""
        if self.get_room_by_number(data.room_number):
            raise ValidationError(f"房间号 {data.room_number} 已存在")

        room = Room(**data.model_dump())
        room.rating = 0.0
        room.num_reviews = 0
        self.db.add(room)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ValidationError(f"房间号 {data.room_number} 已存在")
        self.db.refresh(room)
        logger.info(f"Room {room.room_number} created (id={room.id})")
        return room

    def update_room(self, room_id: int, data: RoomUpdate) -> Room:
        """更新房间"""
        room = self.get_room(room_id)
        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        for key in DERIVED_FIELDS:
            update_data.pop(key, None)

        number = update_data.get("room_number")
        if number and number != room.room_number:
            existing = self.get_room_by_number(number)
            if existing and existing.id != room_id:
                raise ValidationError(f"房间号 {number} 已存在")

        for key, value in update_data.items():
            setattr(room, key, value)

        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ValidationError(f"房间号 {number} 已存在")
        self.db.refresh(room)
        logger.info(f"Room {room.id} updated: {sorted(update_data)}")
        return room

    def delete_room(self, room_id: int) -> None:
        """删除房间，已有预订和评价保留（数据库强制外键时仍被引用则拒绝）"""
        room = self.get_room(room_id)
        self.db.delete(room)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning(f"Room {room_id} still referenced, delete rejected")
            raise ValidationError("该房间仍有关联的预订或评价，无法删除")
        logger.info(f"Room {room_id} deleted")

    # ============== 可用性 ==============

    def check_availability(self, room_id: int, check_in: datetime, check_out: datetime) -> dict:
        """查询房间在日期区间内是否可订，并给出报价"""
        room = self.get_room(room_id)
        start, end = validate_date_range(check_in, check_out)

        available = (
            room.status != RoomStatus.MAINTENANCE
            and AvailabilityChecker(self.db).is_room_available(room.id, start, end)
        )
        return {
            "room_id": room.id,
            "check_in": start,
            "check_out": end,
            "available": available,
            "nights": count_nights(start, end),
            "total_price": price_for_stay(room.price_per_night, start, end),
        }
