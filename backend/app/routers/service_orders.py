"""
服务订单路由
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.ontology import ServiceOrderStatus
from app.models.schemas import ServiceOrderCreate, ServiceOrderResponse, StatusUpdate, MessageResponse
from app.services.service_order_service import ServiceOrderService
from app.services.paging import with_total
from app.security.auth import require_authenticated
from core.security.context import SecurityContext

router = APIRouter(prefix="/service-orders", tags=["服务订单"])


@router.get("", response_model=List[ServiceOrderResponse])
def list_orders(
    response: Response,
    status: Optional[ServiceOrderStatus] = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    db: Session = Depends(get_db),
    ctx: SecurityContext = Depends(require_authenticated)
):
    """获取服务订单列表（管理员可见全部）"""
    items = ServiceOrderService(db).get_orders(ctx, status=status, page=page, limit=limit)
    return with_total(response, items)


@router.get("/{order_id}", response_model=ServiceOrderResponse)
def get_order(
    order_id: int,
    db: Session = Depends(get_db),
    ctx: SecurityContext = Depends(require_authenticated)
):
    """获取服务订单详情"""
    return ServiceOrderService(db).get_order(order_id, ctx)


@router.post("", response_model=ServiceOrderResponse, status_code=status.HTTP_201_CREATED)
def create_order(
    data: ServiceOrderCreate,
    db: Session = Depends(get_db),
    ctx: SecurityContext = Depends(require_authenticated)
):
    """创建服务订单"""
    return ServiceOrderService(db).create_order(ctx.client_id, data)


@router.put("/{order_id}/status", response_model=ServiceOrderResponse)
def update_order_status(
    order_id: int,
    data: StatusUpdate,
    db: Session = Depends(get_db),
    ctx: SecurityContext = Depends(require_authenticated)
):
    """变更服务订单状态"""
    return ServiceOrderService(db).update_status(order_id, ctx, data.status)


@router.delete("/{order_id}", response_model=MessageResponse)
def delete_order(
    order_id: int,
    db: Session = Depends(get_db),
    ctx: SecurityContext = Depends(require_authenticated)
):
    """删除服务订单"""
    ServiceOrderService(db).delete_order(order_id, ctx)
    return {"message": "服务订单已删除"}
