"""
服务目录 - 管理可下单的服务项目（SPA、餐饮、活动、接送等）
"""
from typing import List, Optional
import logging
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.ontology import Service, ServiceCategory
from app.models.schemas import ServiceCreate, ServiceUpdate
from app.services.paging import paginate
from core.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class CatalogService:
    """服务目录"""

    def __init__(self, db: Session):
        self.db = db

    def get_services(self, category: Optional[ServiceCategory] = None,
                     is_available: Optional[bool] = None,
                     search: Optional[str] = None,
                     page: int = 1, limit: Optional[int] = None) -> List[Service]:
        """获取服务列表"""
        query = self.db.query(Service)
        if category:
            query = query.filter(Service.category == category)
        if is_available is not None:
            query = query.filter(Service.is_available == is_available)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(or_(Service.name.ilike(pattern), Service.description.ilike(pattern)))
        return paginate(query.order_by(Service.created_at.desc(), Service.id.desc()), page, limit)

    def get_service(self, service_id: int) -> Service:
        service = self.db.query(Service).filter(Service.id == service_id).first()
        if not service:
            raise NotFoundError("服务不存在")
        return service

    def create_service(self, data: ServiceCreate) -> Service:
        service = Service(**data.model_dump())
        self.db.add(service)
        self.db.commit()
        self.db.refresh(service)
        logger.info(f"Service '{service.name}' created (id={service.id})")
        return service

    def update_service(self, service_id: int, data: ServiceUpdate) -> Service:
        service = self.get_service(service_id)
        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        for key, value in update_data.items():
            setattr(service, key, value)
        self.db.commit()
        self.db.refresh(service)
        logger.info(f"Service {service.id} updated: {sorted(update_data)}")
        return service

    def delete_service(self, service_id: int) -> None:
        """删除服务，已有订单保留（数据库强制外键时仍被引用则拒绝）"""
        service = self.get_service(service_id)
        self.db.delete(service)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning(f"Service {service_id} still referenced, delete rejected")
            raise ValidationError("该服务仍有关联的订单，无法删除")
        logger.info(f"Service {service_id} deleted")
