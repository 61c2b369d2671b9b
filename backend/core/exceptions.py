"""
core/exceptions.py

领域错误分类 - 所有业务操作的同步失败都通过这些异常返回给调用方
status_code 仅作为 HTTP 层的映射提示
"""
from typing import Optional


class DomainError(Exception):
    """领域错误基类"""

    status_code: int = 400

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def __str__(self) -> str:
        return self.message


class ValidationError(DomainError):
    """输入不合法（日期区间、评分范围、必填字段等）"""

    status_code = 400


class AuthenticationError(DomainError):
    """认证失败（凭证错误、令牌无效）"""

    status_code = 401


class AuthorizationError(DomainError):
    """调用方缺少所需角色或不是记录的所有者"""

    status_code = 403


class NotFoundError(DomainError):
    """引用的实体不存在"""

    status_code = 404


class AvailabilityError(DomainError):
    """日期冲突或资源不可用"""

    status_code = 409


class DuplicateReviewError(DomainError):
    """客户已经评价过该房间"""

    status_code = 409


class InvalidTransitionError(DomainError):
    """当前状态不允许的状态变更"""

    status_code = 409


__all__ = [
    "DomainError",
    "ValidationError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "AvailabilityError",
    "DuplicateReviewError",
    "InvalidTransitionError",
]
