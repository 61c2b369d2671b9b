"""
core/security/context.py

调用方安全上下文 - 角色与能力集合
角色是扁平的标签变体 {user, staff, admin}，权限判断统一通过能力集合完成，
不在各调用点散落字符串比较
"""
from typing import Dict, FrozenSet, Optional
from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    """客户角色"""
    USER = "user"      # 普通客户
    STAFF = "staff"    # 员工
    ADMIN = "admin"    # 管理员


class Capability(str, Enum):
    """角色门禁所检查的能力"""
    AUTHENTICATED = "authenticated"
    ADMIN = "admin"
    STAFF = "staff"
    ADMIN_OR_STAFF = "admin-or-staff"


# 角色 -> 能力集合
# admin 只隐式满足 admin-or-staff，不满足 staff
ROLE_CAPABILITIES: Dict[Role, FrozenSet[Capability]] = {
    Role.USER: frozenset({Capability.AUTHENTICATED}),
    Role.STAFF: frozenset({
        Capability.AUTHENTICATED,
        Capability.STAFF,
        Capability.ADMIN_OR_STAFF,
    }),
    Role.ADMIN: frozenset({
        Capability.AUTHENTICATED,
        Capability.ADMIN,
        Capability.ADMIN_OR_STAFF,
    }),
}


@dataclass(frozen=True)
class SecurityContext:
    """
    安全上下文数据类

    Attributes:
        client_id: 调用方客户 ID
        role: 调用方角色
        email: 调用方邮箱（仅用于日志）
    """

    client_id: int
    role: Role
    email: Optional[str] = None

    @property
    def capabilities(self) -> FrozenSet[Capability]:
        return ROLE_CAPABILITIES.get(Role(self.role), frozenset())

    def has_capability(self, capability: Capability) -> bool:
        """检查是否具备指定能力"""
        return capability in self.capabilities

    def is_admin(self) -> bool:
        return self.has_capability(Capability.ADMIN)

    def is_staff(self) -> bool:
        return self.has_capability(Capability.STAFF)

    def owns(self, owner_id: Optional[int]) -> bool:
        """记录是否属于当前调用方"""
        return owner_id is not None and owner_id == self.client_id

    def to_dict(self) -> dict:
        return {
            "client_id": self.client_id,
            "role": Role(self.role).value,
            "email": self.email,
        }

    def __repr__(self) -> str:
        return f"SecurityContext(client_id={self.client_id}, role={Role(self.role).value!r})"


__all__ = [
    "Role",
    "Capability",
    "ROLE_CAPABILITIES",
    "SecurityContext",
]
