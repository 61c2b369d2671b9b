"""
房间可用性检查 - 数据库查询版
判定规则与 core.domain.rules.availability_rules 一致：
existing.check_in <= new.check_out AND existing.check_out >= new.check_in，
仅 pending / confirmed 状态的预订占用房间
"""
from datetime import datetime
from typing import List, Optional
import logging
from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from app.models.ontology import Booking, BookingStatus
from core.domain.rules.availability_rules import BLOCKING_STATUSES, validate_date_range

logger = logging.getLogger(__name__)

_BLOCKING = [BookingStatus(s) for s in BLOCKING_STATUSES]


class AvailabilityChecker:
    """房间可用性检查器"""

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _overlapping(start: datetime, end: datetime) -> tuple:
        """与 [start, end] 重叠且占用房间的预订条件"""
        return (
            Booking.status.in_(_BLOCKING),
            Booking.check_in <= end,
            Booking.check_out >= start,
        )

    def find_conflicts(self, room_id: int, check_in: datetime, check_out: datetime,
                       exclude_booking_id: Optional[int] = None) -> List[Booking]:
        """查找与日期区间冲突的预订"""
        start, end = validate_date_range(check_in, check_out)
        query = self.db.query(Booking).filter(Booking.room_id == room_id, *self._overlapping(start, end))
        if exclude_booking_id is not None:
            query = query.filter(Booking.id != exclude_booking_id)
        return query.all()

    def is_room_available(self, room_id: int, check_in: datetime, check_out: datetime) -> bool:
        """房间在该日期区间内是否可预订"""
        conflicts = self.find_conflicts(room_id, check_in, check_out)
        if conflicts:
            logger.debug(
                f"Room {room_id} unavailable {check_in} -> {check_out}: "
                f"conflicts with bookings {[b.id for b in conflicts]}"
            )
        return not conflicts

    def booked_room_ids(self, check_in: datetime, check_out: datetime) -> Select:
        """日期区间内被占用的房间 ID 子查询，供房间列表过滤"""
        start, end = validate_date_range(check_in, check_out)
        return select(Booking.room_id).where(*self._overlapping(start, end)).distinct()
