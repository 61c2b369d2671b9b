"""
core/security/checker.py

访问控制门禁 - 角色能力检查与所有权检查
所有权检查（记录属于调用方或调用方为 admin）是独立于角色门禁的逐操作谓词
"""
from typing import Optional
import logging

from core.exceptions import AuthorizationError
from core.security.context import Capability, SecurityContext

logger = logging.getLogger(__name__)


_CAPABILITY_MESSAGES = {
    Capability.AUTHENTICATED: "需要登录",
    Capability.ADMIN: "需要管理员权限",
    Capability.STAFF: "需要员工权限",
    Capability.ADMIN_OR_STAFF: "需要管理员或员工权限",
}


class AccessGate:
    """
    访问控制门禁

    Example:
        >>> gate = AccessGate()
        >>> gate.check(ctx, Capability.ADMIN)
        >>> gate.check_owner_or_admin(ctx, booking.client_id, "删除预订")
    """

    def allows(self, context: Optional[SecurityContext], capability: Capability) -> bool:
        """判断调用方是否具备能力（不抛异常）"""
        if context is None:
            return False
        return context.has_capability(capability)

    def check(self, context: Optional[SecurityContext], capability: Capability) -> SecurityContext:
        """
        检查能力，失败时抛出 AuthorizationError

        Returns:
            通过检查的安全上下文
        """
        if not self.allows(context, capability):
            logger.warning(f"Access denied: {context!r} lacks capability {capability.value}")
            raise AuthorizationError(_CAPABILITY_MESSAGES[capability])
        return context

    def is_owner_or_admin(self, context: Optional[SecurityContext], owner_id: Optional[int]) -> bool:
        if context is None:
            return False
        return context.owns(owner_id) or context.is_admin()

    def check_owner_or_admin(self, context: Optional[SecurityContext],
                             owner_id: Optional[int], action: str = "操作该记录") -> SecurityContext:
        """记录必须属于调用方，或调用方为 admin"""
        if not self.is_owner_or_admin(context, owner_id):
            logger.warning(f"Ownership check failed: {context!r} on owner {owner_id} ({action})")
            raise AuthorizationError(f"无权{action}")
        return context


# 全局门禁实例
access_gate = AccessGate()


__all__ = [
    "AccessGate",
    "access_gate",
]
