"""
core/domain/__init__.py

领域层入口点
"""
from core.domain.lifecycle import (
    LifecycleStatus,
    booking_lifecycle,
    service_order_lifecycle,
    authorize_transition,
)
from core.domain.role_policy import RoleBootstrapPolicy

__all__ = [
    "LifecycleStatus",
    "booking_lifecycle",
    "service_order_lifecycle",
    "authorize_transition",
    "RoleBootstrapPolicy",
]
