"""
core/domain/lifecycle.py

预订 / 服务订单生命周期

两者共用同一形状的状态机：
- pending -> confirmed      仅 admin
- pending -> cancelled      所有者或 admin
- confirmed -> cancelled    所有者或 admin
- confirmed -> completed    admin 或 staff
其余转换一律拒绝
"""
from enum import Enum
from typing import Any, Dict, Optional
import logging

from core.engine.state_machine import (
    StateMachine,
    StateMachineConfig,
    StateTransition,
)
from core.exceptions import AuthorizationError
from core.security.context import Capability, SecurityContext

logger = logging.getLogger(__name__)


class LifecycleStatus(str, Enum):
    """预订 / 服务订单状态"""
    PENDING = "pending"        # 待确认
    CONFIRMED = "confirmed"    # 已确认
    CANCELLED = "cancelled"    # 已取消
    COMPLETED = "completed"    # 已完成


# ============== 守卫条件 ==============

def _caller(context: Dict[str, Any]) -> Optional[SecurityContext]:
    return context.get("caller")


def _is_admin(context: Dict[str, Any]) -> bool:
    caller = _caller(context)
    return caller is not None and caller.is_admin()


def _is_owner_or_admin(context: Dict[str, Any]) -> bool:
    caller = _caller(context)
    return caller is not None and (caller.owns(context.get("owner_id")) or caller.is_admin())


def _is_admin_or_staff(context: Dict[str, Any]) -> bool:
    caller = _caller(context)
    return caller is not None and caller.has_capability(Capability.ADMIN_OR_STAFF)


def build_lifecycle_machine(name: str) -> StateMachine:
    """创建生命周期状态机"""
    pending = LifecycleStatus.PENDING.value
    confirmed = LifecycleStatus.CONFIRMED.value
    cancelled = LifecycleStatus.CANCELLED.value
    completed = LifecycleStatus.COMPLETED.value

    return StateMachine(
        config=StateMachineConfig(
            name=name,
            states=[pending, confirmed, cancelled, completed],
            transitions=[
                StateTransition(
                    from_state=pending,
                    to_state=confirmed,
                    trigger="confirm",
                    condition=_is_admin,
                    denied_message="只有管理员可以确认",
                ),
                StateTransition(
                    from_state=pending,
                    to_state=cancelled,
                    trigger="cancel",
                    condition=_is_owner_or_admin,
                    denied_message="只有所有者或管理员可以取消",
                ),
                StateTransition(
                    from_state=confirmed,
                    to_state=cancelled,
                    trigger="cancel",
                    condition=_is_owner_or_admin,
                    denied_message="只有所有者或管理员可以取消",
                ),
                StateTransition(
                    from_state=confirmed,
                    to_state=completed,
                    trigger="complete",
                    condition=_is_admin_or_staff,
                    denied_message="只有管理员或员工可以标记完成",
                ),
            ],
            initial_state=pending,
        )
    )


booking_lifecycle = build_lifecycle_machine("Booking")
service_order_lifecycle = build_lifecycle_machine("ServiceOrder")


def authorize_transition(machine: StateMachine, caller: SecurityContext, owner_id: Optional[int],
                         current: str, target: str) -> StateTransition:
    """
    校验调用方能否把记录从 current 变更为 target

    与记录无关的调用方（既非所有者，也不是 admin/staff）先被拒绝，
    之后才检查转换本身是否存在

    Raises:
        AuthorizationError: 调用方无权
        InvalidTransitionError: 转换不存在
    """
    current = getattr(current, "value", current)
    target = getattr(target, "value", target)

    participant = (
        caller.owns(owner_id)
        or caller.is_admin()
        or caller.has_capability(Capability.ADMIN_OR_STAFF)
    )
    if not participant:
        raise AuthorizationError("无权修改该记录")

    return machine.validate(current, target, {"caller": caller, "owner_id": owner_id})


__all__ = [
    "LifecycleStatus",
    "build_lifecycle_machine",
    "booking_lifecycle",
    "service_order_lifecycle",
    "authorize_transition",
]
