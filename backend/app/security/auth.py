"""
认证与授权模块
bcrypt 密码哈希 + JWT 令牌；路由通过 SecurityContext 与能力门禁判断权限
"""
import bcrypt
import logging
from datetime import datetime, timedelta, UTC
from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.models.ontology import Client, ClientRole
from core.exceptions import AuthenticationError
from core.security.checker import access_gate
from core.security.context import Capability, SecurityContext

logger = logging.getLogger(__name__)

# auto_error=False: 缺少凭证时统一返回 401
security = HTTPBearer(auto_error=False)


def get_password_hash(password: str) -> str:
    """密码哈希"""
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """验证密码"""
    try:
        return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))
    except ValueError:
        # 存储的哈希格式损坏
        return False


def create_access_token(client_id: int, role: ClientRole,
                        expires_minutes: Optional[int] = None) -> str:
    """创建 JWT token"""
    minutes = expires_minutes if expires_minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    expire = datetime.now(UTC) + timedelta(minutes=minutes)
    to_encode = {
        "sub": str(client_id),
        "role": role.value if isinstance(role, ClientRole) else str(role),
        "exp": expire
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> dict:
    """解码 JWT token"""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise AuthenticationError("无效的认证凭证")


def get_current_client(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> Client:
    """获取当前登录客户"""
    if credentials is None:
        raise AuthenticationError("未提供认证凭证")

    payload = decode_token(credentials.credentials)
    try:
        client_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise AuthenticationError("无效的认证凭证")

    client = db.query(Client).filter(Client.id == client_id).first()
    if not client:
        raise AuthenticationError("用户不存在")
    return client


def build_security_context(client: Client) -> SecurityContext:
    """由客户记录构建 SecurityContext，角色以数据库为准而非令牌中的声明"""
    return SecurityContext(client_id=client.id, role=ClientRole(client.role), email=client.email)


def get_security_context(current_client: Client = Depends(get_current_client)) -> SecurityContext:
    """下游需要 SecurityContext 时使用此依赖"""
    return build_security_context(current_client)


def require_capability(capability: Capability):
    """能力门禁依赖工厂"""
    def capability_checker(ctx: SecurityContext = Depends(get_security_context)) -> SecurityContext:
        return access_gate.check(ctx, capability)
    return capability_checker


# 便捷的能力检查器
require_authenticated = require_capability(Capability.AUTHENTICATED)
require_admin = require_capability(Capability.ADMIN)
require_staff = require_capability(Capability.STAFF)
require_admin_or_staff = require_capability(Capability.ADMIN_OR_STAFF)
