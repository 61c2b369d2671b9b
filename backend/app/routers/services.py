"""
服务目录路由
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.ontology import ServiceCategory
from app.models.schemas import ServiceCreate, ServiceUpdate, ServiceResponse, MessageResponse
from app.services.catalog_service import CatalogService
from app.services.paging import with_total
from app.security.auth import require_admin, require_admin_or_staff
from core.security.context import SecurityContext

router = APIRouter(prefix="/services", tags=["服务目录"])


@router.get("", response_model=List[ServiceResponse])
def list_services(
    response: Response,
    category: Optional[ServiceCategory] = None,
    is_available: Optional[bool] = None,
    search: Optional[str] = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    db: Session = Depends(get_db)
):
    """获取服务列表"""
    items = CatalogService(db).get_services(
        category=category, is_available=is_available, search=search, page=page, limit=limit
    )
    return with_total(response, items)


@router.get("/{service_id}", response_model=ServiceResponse)
def get_service(service_id: int, db: Session = Depends(get_db)):
    """获取服务详情"""
    return CatalogService(db).get_service(service_id)


@router.post("", response_model=ServiceResponse, status_code=status.HTTP_201_CREATED)
def create_service(
    data: ServiceCreate,
    db: Session = Depends(get_db),
    ctx: SecurityContext = Depends(require_admin)
):
    """创建服务"""
    return CatalogService(db).create_service(data)


@router.put("/{service_id}", response_model=ServiceResponse)
def update_service(
    service_id: int,
    data: ServiceUpdate,
    db: Session = Depends(get_db),
    ctx: SecurityContext = Depends(require_admin_or_staff)
):
    """更新服务"""
    return CatalogService(db).update_service(service_id, data)


@router.delete("/{service_id}", response_model=MessageResponse)
def delete_service(
    service_id: int,
    db: Session = Depends(get_db),
    ctx: SecurityContext = Depends(require_admin)
):
    """删除服务"""
    CatalogService(db).delete_service(service_id)
    return {"message": "服务已删除"}
