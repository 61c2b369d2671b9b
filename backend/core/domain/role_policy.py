"""
core/domain/role_policy.py

注册时的角色分配策略
"""
from dataclasses import dataclass
import logging

from core.security.context import Role

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoleBootstrapPolicy:
    """
    角色引导策略，可按部署替换

    - 系统中还没有任何客户（且开启 first_client_is_admin）或邮箱匹配管理员后缀 -> admin
    - 邮箱匹配员工后缀 -> staff
    - 其余 -> user

    Attributes:
        admin_email_suffix: 管理员邮箱后缀，空字符串表示禁用
        staff_email_suffix: 员工邮箱后缀，空字符串表示禁用
        first_client_is_admin: 第一个注册的客户是否成为管理员
    """

    admin_email_suffix: str = "@admin.com"
    staff_email_suffix: str = "@staff.com"
    first_client_is_admin: bool = True

    @classmethod
    def from_settings(cls, settings) -> "RoleBootstrapPolicy":
        return cls(
            admin_email_suffix=settings.ADMIN_EMAIL_SUFFIX,
            staff_email_suffix=settings.STAFF_EMAIL_SUFFIX,
            first_client_is_admin=settings.FIRST_CLIENT_IS_ADMIN,
        )

    @staticmethod
    def _matches(email: str, suffix: str) -> bool:
        return bool(suffix) and email.lower().endswith(suffix.lower())

    def assign_role(self, email: str, existing_client_count: int) -> Role:
        """根据邮箱和已有客户数分配角色"""
        email = (email or "").strip()
        if self.first_client_is_admin and existing_client_count == 0:
            logger.info(f"First client {email} bootstrapped as admin")
            return Role.ADMIN
        if self._matches(email, self.admin_email_suffix):
            return Role.ADMIN
        if self._matches(email, self.staff_email_suffix):
            return Role.STAFF
        return Role.USER


__all__ = ["RoleBootstrapPolicy"]
