"""
core/engine/state_machine.py

状态机引擎 - 状态转换表与守卫条件
状态本身保存在持久化记录上，状态机只负责校验 (当前状态, 目标状态) 是否允许
"""
from typing import Dict, List, Any, Optional, Callable, Tuple
from dataclasses import dataclass
import logging

from core.exceptions import AuthorizationError, InvalidTransitionError

logger = logging.getLogger(__name__)


def _state(value) -> str:
    """枚举状态取其值"""
    return getattr(value, "value", value)


@dataclass
class StateTransition:
    """
    状态转换定义

    Attributes:
        from_state: 源状态
        to_state: 目标状态
        trigger: 触发动作
        condition: 可选的守卫条件，接收上下文字典
        denied_message: 守卫条件不满足时的错误信息
    """

    from_state: str
    to_state: str
    trigger: str
    condition: Optional[Callable[[Dict[str, Any]], bool]] = None
    denied_message: str = "无权执行该状态变更"

    def is_allowed(self, context: Dict[str, Any]) -> bool:
        """检查转换是否被允许"""
        if self.condition is None:
            return True
        try:
            return bool(self.condition(context))
        except Exception as e:
            logger.error(f"Error checking transition condition: {e}")
            return False


@dataclass
class StateMachineConfig:
    """
    状态机配置

    Attributes:
        name: 状态机名称
        states: 所有状态的列表
        transitions: 转换列表
        initial_state: 初始状态
    """

    name: str
    states: List[str]
    transitions: List[StateTransition]
    initial_state: str


class StateMachine:
    """
    状态机引擎

    Example:
        >>> machine = StateMachine(
        ...     config=StateMachineConfig(
        ...         name="Booking",
        ...         states=["pending", "confirmed", "cancelled"],
        ...         transitions=[...],
        ...         initial_state="pending"
        ...     )
        ... )
        >>> machine.validate("pending", "confirmed", {"caller": ctx})
    """

    def __init__(self, config: StateMachineConfig):
        self._config = config
        self._transition_map: Dict[Tuple[str, str], StateTransition] = {}

        for t in config.transitions:
            self._transition_map[(t.from_state, t.to_state)] = t

    @property
    def initial_state(self) -> str:
        return self._config.initial_state

    def find_transition(self, from_state: str, to_state: str) -> Optional[StateTransition]:
        """查找 (源状态, 目标状态) 对应的转换"""
        return self._transition_map.get((_state(from_state), _state(to_state)))

    def validate(self, from_state: str, to_state: str,
                 context: Optional[Dict[str, Any]] = None) -> StateTransition:
        """
        校验状态转换

        Raises:
            InvalidTransitionError: 转换表中不存在该转换
            AuthorizationError: 守卫条件不满足

        Returns:
            匹配的转换定义
        """
        from_state, to_state = _state(from_state), _state(to_state)
        if to_state not in self._config.states:
            raise InvalidTransitionError(f"未知状态: {to_state}")

        transition = self.find_transition(from_state, to_state)
        if transition is None:
            logger.warning(
                f"{self._config.name}: invalid transition {from_state} -> {to_state}"
            )
            raise InvalidTransitionError(f"状态不能从 {from_state} 变更为 {to_state}")

        if not transition.is_allowed(context or {}):
            logger.warning(
                f"{self._config.name}: transition {from_state} -> {to_state} denied"
            )
            raise AuthorizationError(transition.denied_message)

        return transition


__all__ = [
    "StateTransition",
    "StateMachineConfig",
    "StateMachine",
]
