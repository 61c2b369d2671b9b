"""
服务订单服务
总价 = 服务单价 × 数量；状态变更与预订共用生命周期状态机
"""
from typing import List, Optional
import logging
from sqlalchemy.orm import Session

from app.models.ontology import Service, ServiceOrder, ServiceOrderStatus
from app.models.schemas import ServiceOrderCreate
from app.services.paging import paginate
from core.domain.lifecycle import authorize_transition, service_order_lifecycle
from core.domain.rules.pricing_rules import price_for_order, to_instant
from core.exceptions import AvailabilityError, NotFoundError
from core.security.checker import access_gate
from core.security.context import SecurityContext

logger = logging.getLogger(__name__)


class ServiceOrderService:
    """服务订单服务"""

    def __init__(self, db: Session):
        self.db = db

    def _get(self, order_id: int) -> ServiceOrder:
        order = self.db.query(ServiceOrder).filter(ServiceOrder.id == order_id).first()
        if not order:
            raise NotFoundError("服务订单不存在")
        return order

    def get_order(self, order_id: int, caller: SecurityContext) -> ServiceOrder:
        order = self._get(order_id)
        access_gate.check_owner_or_admin(caller, order.client_id, "查看该订单")
        return order

    def get_orders(self, caller: SecurityContext, status: Optional[ServiceOrderStatus] = None,
                   page: int = 1, limit: Optional[int] = None) -> List[ServiceOrder]:
        """订单列表：管理员看全部，其余只看自己的"""
        query = self.db.query(ServiceOrder)
        if not caller.is_admin():
            query = query.filter(ServiceOrder.client_id == caller.client_id)
        if status:
            query = query.filter(ServiceOrder.status == status)
        return paginate(query.order_by(ServiceOrder.created_at.desc(), ServiceOrder.id.desc()), page, limit)

    def create_order(self, client_id: int, data: ServiceOrderCreate) -> ServiceOrder:
        """
        创建服务订单

        Raises:
            NotFoundError: 服务不存在
            AvailabilityError: 服务当前不可预约
            ValidationError: 数量不合法
        """
        service = self.db.query(Service).filter(Service.id == data.service_id).first()
        if not service:
            raise NotFoundError("服务不存在")
        if not service.is_available:
            raise AvailabilityError("该服务当前不可预约")

        total_price = price_for_order(service.price, data.quantity)

        order = ServiceOrder(
            client_id=client_id,
            service_id=service.id,
            appointment_date=to_instant(data.appointment_date),
            quantity=data.quantity,
            status=ServiceOrderStatus(service_order_lifecycle.initial_state),
            total_price=total_price,
            special_requests=data.special_requests,
        )
        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)

        logger.info(
            f"Service order {order.id} created: client {client_id}, "
            f"service {service.id} x{data.quantity}, total {total_price}"
        )
        return order

    def update_status(self, order_id: int, caller: SecurityContext,
                      new_status: ServiceOrderStatus) -> ServiceOrder:
        """变更订单状态"""
        order = self._get(order_id)
        old_status = ServiceOrderStatus(order.status)
        new_status = ServiceOrderStatus(new_status)

        authorize_transition(service_order_lifecycle, caller, order.client_id, old_status, new_status)

        order.status = new_status
        self.db.commit()
        self.db.refresh(order)

        logger.info(
            f"Service order {order.id} status {old_status.value} -> {new_status.value} "
            f"by client {caller.client_id}"
        )
        return order

    def delete_order(self, order_id: int, caller: SecurityContext) -> None:
        """删除订单（所有者或管理员）"""
        order = self._get(order_id)
        access_gate.check_owner_or_admin(caller, order.client_id, "删除该订单")

        self.db.delete(order)
        self.db.commit()

        logger.info(f"Service order {order_id} deleted by client {caller.client_id}")
