"""
core/engine - 核心引擎模块

- state_machine: 状态机引擎（状态转换表与守卫条件）
- keyed_lock: 按键串行化（房间级锁）

使用方式:
    >>> from core.engine import room_locks
    >>> from core.engine import StateMachine, StateMachineConfig, StateTransition
"""

# 状态机引擎
from core.engine.state_machine import (
    StateTransition,
    StateMachineConfig,
    StateMachine,
)

# 按键锁
from core.engine.keyed_lock import (
    KeyedLock,
    room_locks,
)

__all__ = [
    # 状态机
    "StateTransition",
    "StateMachineConfig",
    "StateMachine",
    # 锁
    "KeyedLock",
    "room_locks",
]
