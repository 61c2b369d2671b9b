"""
客户服务 - 注册、登录、个人资料与管理员客户管理
注册时的角色由 RoleBootstrapPolicy 决定
"""
from typing import List, Optional
import logging
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import settings
from app.models.ontology import Client, ClientRole
from app.models.schemas import RegisterRequest, LoginRequest, ProfileUpdate, ClientAdminUpdate
from app.security.auth import get_password_hash, verify_password, create_access_token
from app.services.paging import paginate
from core.domain.role_policy import RoleBootstrapPolicy
from core.exceptions import AuthenticationError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class ClientService:
    """客户服务"""

    def __init__(self, db: Session, role_policy: Optional[RoleBootstrapPolicy] = None):
        self.db = db
        self.role_policy = role_policy or RoleBootstrapPolicy.from_settings(settings)

    # ============== 查询 ==============

    def get_client(self, client_id: int) -> Client:
        client = self.db.query(Client).filter(Client.id == client_id).first()
        if not client:
            raise NotFoundError("客户不存在")
        return client

    def get_by_email(self, email: str) -> Optional[Client]:
        return self.db.query(Client).filter(Client.email == email.strip().lower()).first()

    def get_clients(self, search: Optional[str] = None, role: Optional[ClientRole] = None,
                    page: int = 1, limit: Optional[int] = None) -> List[Client]:
        """客户列表（管理员）"""
        query = self.db.query(Client)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(or_(
                Client.name.ilike(pattern),
                Client.email.ilike(pattern),
                Client.phone.ilike(pattern),
            ))
        if role:
            query = query.filter(Client.role == role)
        return paginate(query.order_by(Client.created_at.desc(), Client.id.desc()), page, limit)

    # ============== 注册 / 登录 ==============

    def register(self, data: RegisterRequest) -> Client:
        """注册新客户"""
        if self.get_by_email(data.email):
            raise ValidationError("该邮箱已被注册")

        existing_count = self.db.query(Client).count()
        role = self.role_policy.assign_role(data.email, existing_count)

        client = Client(
            name=data.name,
            email=data.email,
            phone=data.phone,
            password_hash=get_password_hash(data.password),
            role=role,
        )
        self.db.add(client)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ValidationError("该邮箱已被注册")
        self.db.refresh(client)

        logger.info(f"Client registered: {client.email} as {role.value}")
        return client

    def authenticate(self, data: LoginRequest) -> Client:
        """校验邮箱和密码"""
        client = self.get_by_email(data.email)
        if not client or not verify_password(data.password, client.password_hash):
            logger.warning(f"Failed login attempt for {data.email}")
            raise AuthenticationError("邮箱或密码错误")
        return client

    def issue_token(self, client: Client) -> dict:
        """签发令牌"""
        return {
            "access_token": create_access_token(client.id, ClientRole(client.role)),
            "token_type": "bearer",
            "client": client,
        }

    def login(self, data: LoginRequest) -> dict:
        return self.issue_token(self.authenticate(data))

    # ============== 资料更新 ==============

    def _apply_update(self, client: Client, update_data: dict) -> Client:
        email = update_data.get("email")
        if email and email != client.email:
            existing = self.get_by_email(email)
            if existing and existing.id != client.id:
                raise ValidationError("该邮箱已被注册")

        for key, value in update_data.items():
            setattr(client, key, value)

        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ValidationError("该邮箱已被注册")
        self.db.refresh(client)
        return client

    def update_profile(self, client_id: int, data: ProfileUpdate) -> Client:
        """更新自己的资料"""
        client = self.get_client(client_id)
        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        return self._apply_update(client, update_data)

    def update_client(self, client_id: int, data: ClientAdminUpdate) -> Client:
        """管理员更新客户（可修改角色）"""
        client = self.get_client(client_id)
        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        client = self._apply_update(client, update_data)
        if "role" in update_data:
            logger.info(f"Client {client.id} role set to {ClientRole(client.role).value}")
        return client

    def delete_client(self, client_id: int) -> None:
        """
        删除客户，引用它的预订/订单/评价不级联删除

        Raises:
            ValidationError: 数据库强制外键约束且客户仍被引用
        """
        client = self.get_client(client_id)
        self.db.delete(client)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning(f"Client {client_id} still referenced, delete rejected")
            raise ValidationError("该客户仍有关联的预订、订单或评价，无法删除")
        logger.info(f"Client {client_id} deleted")
