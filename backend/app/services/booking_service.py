"""
预订服务 - 预订生命周期管理
创建时校验房间、日期区间与可用性，并由定价规则计算总价；
状态变更走共享生命周期状态机，删除需所有者或管理员

同一房间的“可用性检查 + 写入”在房间锁内完成，并作为一次提交
"""
from typing import List, Optional
import logging
from sqlalchemy.orm import Session

from app.models.ontology import Booking, BookingStatus, Room, RoomStatus
from app.models.schemas import BookingCreate
from app.services.availability import AvailabilityChecker
from app.services.paging import paginate
from core.domain.lifecycle import authorize_transition, booking_lifecycle
from core.domain.rules.availability_rules import validate_date_range
from core.domain.rules.pricing_rules import count_nights, price_for_stay
from core.engine.keyed_lock import room_locks
from core.exceptions import AvailabilityError, NotFoundError, ValidationError
from core.security.checker import access_gate
from core.security.context import SecurityContext

logger = logging.getLogger(__name__)


class BookingService:
    """预订服务"""

    def __init__(self, db: Session):
        self.db = db
        self.availability = AvailabilityChecker(db)

    # ============== 查询 ==============

    def _get(self, booking_id: int) -> Booking:
        booking = self.db.query(Booking).filter(Booking.id == booking_id).first()
        if not booking:
            raise NotFoundError("预订不存在")
        return booking

    def get_booking(self, booking_id: int, caller: SecurityContext) -> Booking:
        """获取单个预订（所有者或管理员）"""
        booking = self._get(booking_id)
        access_gate.check_owner_or_admin(caller, booking.client_id, "查看该预订")
        return booking

    def get_bookings(self, caller: SecurityContext, status: Optional[BookingStatus] = None,
                     page: int = 1, limit: Optional[int] = None) -> List[Booking]:
        """预订列表：管理员看全部，其余只看自己的"""
        query = self.db.query(Booking)
        if not caller.is_admin():
            query = query.filter(Booking.client_id == caller.client_id)
        if status:
            query = query.filter(Booking.status == status)
        return paginate(query.order_by(Booking.created_at.desc(), Booking.id.desc()), page, limit)

    # ============== 创建 ==============

    def create_booking(self, client_id: int, data: BookingCreate) -> Booking:
        """
        创建预订

        Raises:
            NotFoundError: 房间不存在
            ValidationError: 日期区间或入住人数不合法
            AvailabilityError: 房间维修中或日期冲突
        """
        room = self.db.query(Room).filter(Room.id == data.room_id).first()
        if not room:
            raise NotFoundError("房间不存在")

        check_in, check_out = validate_date_range(data.check_in, data.check_out)

        if data.guests < 1:
            raise ValidationError("入住人数至少为 1")
        if data.guests > room.capacity:
            raise ValidationError(f"入住人数超过房间容量 ({room.capacity})")
        if room.status == RoomStatus.MAINTENANCE:
            raise AvailabilityError("房间维修中，暂不可预订")

        total_price = price_for_stay(room.price_per_night, check_in, check_out)

        with room_locks.hold(room.id):
            if not self.availability.is_room_available(room.id, check_in, check_out):
                logger.warning(
                    f"Booking rejected: room {room.id} not available {check_in} -> {check_out}"
                )
                raise AvailabilityError("该房间在所选日期已被预订")

            booking = Booking(
                client_id=client_id,
                room_id=room.id,
                check_in=check_in,
                check_out=check_out,
                guests=data.guests,
                status=BookingStatus(booking_lifecycle.initial_state),
                total_price=total_price,
                special_requests=data.special_requests,
            )
            self.db.add(booking)
            self.db.commit()

        self.db.refresh(booking)
        nights = count_nights(check_in, check_out)
        logger.info(
            f"Booking {booking.id} created: client {client_id}, room {room.id}, "
            f"{nights} nights, total {total_price}"
        )
        return booking

    # ============== 状态变更 ==============

    def update_status(self, booking_id: int, caller: SecurityContext,
                      new_status: BookingStatus) -> Booking:
        """
        变更预订状态

        Raises:
            NotFoundError: 预订不存在
            AuthorizationError: 调用方无权执行该变更
            InvalidTransitionError: 当前状态不允许该变更
        """
        booking = self._get(booking_id)
        old_status = BookingStatus(booking.status)
        new_status = BookingStatus(new_status)

        authorize_transition(booking_lifecycle, caller, booking.client_id, old_status, new_status)

        booking.status = new_status
        self.db.commit()
        self.db.refresh(booking)

        logger.info(
            f"Booking {booking.id} status {old_status.value} -> {new_status.value} "
            f"by client {caller.client_id}"
        )
        return booking

    # ============== 删除 ==============

    def delete_booking(self, booking_id: int, caller: SecurityContext) -> None:
        """删除预订（所有者或管理员），不影响房间评分"""
        booking = self._get(booking_id)
        access_gate.check_owner_or_admin(caller, booking.client_id, "删除该预订")

        self.db.delete(booking)
        self.db.commit()

        logger.info(f"Booking {booking_id} deleted by client {caller.client_id}")
