"""
core/security - 安全模块

- context: 角色、能力与调用方安全上下文
- checker: 访问控制门禁（角色能力 + 所有权）

使用方式:
    >>> from core.security import SecurityContext, Role, Capability, access_gate
    >>> ctx = SecurityContext(client_id=1, role=Role.ADMIN)
    >>> access_gate.check(ctx, Capability.ADMIN_OR_STAFF)
"""

from core.security.context import (
    Role,
    Capability,
    ROLE_CAPABILITIES,
    SecurityContext,
)
from core.security.checker import (
    AccessGate,
    access_gate,
)

__all__ = [
    "Role",
    "Capability",
    "ROLE_CAPABILITIES",
    "SecurityContext",
    "AccessGate",
    "access_gate",
]
