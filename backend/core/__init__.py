"""
core - 度假村管理框架层

与持久化无关的通用组件与纯领域规则：
- exceptions: 领域错误分类
- security: 角色、能力与访问控制门禁
- engine: 状态机引擎、按键锁
- domain: 生命周期、角色引导策略、定价/可用性/评分规则

使用方式:
    >>> from core.domain.rules import price_for_stay, intervals_overlap
    >>> from core.domain import booking_lifecycle, authorize_transition
    >>> from core.security import SecurityContext, Role, access_gate
"""

__version__ = "1.0.0"
