"""
认证路由
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.ontology import Client
from app.models.schemas import (
    RegisterRequest, LoginRequest, TokenResponse, ClientResponse, ProfileUpdate
)
from app.services.client_service import ClientService
from app.security.auth import get_current_client

router = APIRouter(prefix="/auth", tags=["认证"])


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, db: Session = Depends(get_db)):
    """客户注册"""
    service = ClientService(db)
    client = service.register(data)
    return service.issue_token(client)


@router.post("/login", response_model=TokenResponse)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    """客户登录"""
    return ClientService(db).login(data)


@router.get("/me", response_model=ClientResponse)
def get_me(current_client: Client = Depends(get_current_client)):
    """获取当前客户信息"""
    return current_client


@router.put("/profile", response_model=ClientResponse)
def update_profile(
    data: ProfileUpdate,
    current_client: Client = Depends(get_current_client),
    db: Session = Depends(get_db)
):
    """更新个人资料"""
    return ClientService(db).update_profile(current_client.id, data)
