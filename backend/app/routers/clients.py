"""
客户管理路由（管理员）
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.ontology import ClientRole
from app.models.schemas import ClientResponse, ClientAdminUpdate, MessageResponse
from app.services.client_service import ClientService
from app.services.paging import with_total
from app.security.auth import require_admin
from core.security.context import SecurityContext

router = APIRouter(prefix="/clients", tags=["客户管理"])


@router.get("", response_model=List[ClientResponse])
def list_clients(
    response: Response,
    search: Optional[str] = None,
    role: Optional[ClientRole] = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    db: Session = Depends(get_db),
    ctx: SecurityContext = Depends(require_admin)
):
    """获取客户列表"""
    items = ClientService(db).get_clients(search=search, role=role, page=page, limit=limit)
    return with_total(response, items)


@router.get("/{client_id}", response_model=ClientResponse)
def get_client(
    client_id: int,
    db: Session = Depends(get_db),
    ctx: SecurityContext = Depends(require_admin)
):
    """获取客户详情"""
    return ClientService(db).get_client(client_id)


@router.put("/{client_id}", response_model=ClientResponse)
def update_client(
    client_id: int,
    data: ClientAdminUpdate,
    db: Session = Depends(get_db),
    ctx: SecurityContext = Depends(require_admin)
):
    """更新客户（可修改角色）"""
    return ClientService(db).update_client(client_id, data)


@router.delete("/{client_id}", response_model=MessageResponse)
def delete_client(
    client_id: int,
    db: Session = Depends(get_db),
    ctx: SecurityContext = Depends(require_admin)
):
    """删除客户"""
    ClientService(db).delete_client(client_id)
    return {"message": "客户已删除"}
