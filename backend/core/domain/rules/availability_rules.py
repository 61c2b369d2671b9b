"""
core/domain/rules/availability_rules.py

房间可用性规则

重叠判定：existing.check_in <= new.check_out AND existing.check_out >= new.check_in
两端都是闭区间比较，所以首尾相接（旧预订的离店日 == 新预订的入住日）也算冲突
"""
from datetime import datetime
from typing import Iterable, Tuple

from core.domain.rules.pricing_rules import Instant, to_instant
from core.exceptions import ValidationError

# 占用房间的预订状态
BLOCKING_STATUSES = ("pending", "confirmed")


def validate_date_range(check_in: Instant, check_out: Instant) -> Tuple[datetime, datetime]:
    """校验日期区间并统一为无时区 datetime"""
    if check_in is None or check_out is None:
        raise ValidationError("入住和离店日期不能为空")
    start = to_instant(check_in)
    end = to_instant(check_out)
    if end <= start:
        raise ValidationError("离店日期必须晚于入住日期")
    return start, end


def intervals_overlap(existing_in: Instant, existing_out: Instant,
                      new_in: Instant, new_out: Instant) -> bool:
    """两个日期区间是否重叠"""
    return (to_instant(existing_in) <= to_instant(new_out)
            and to_instant(existing_out) >= to_instant(new_in))


def is_blocking(status) -> bool:
    """该状态的预订是否占用房间"""
    return getattr(status, "value", status) in BLOCKING_STATUSES


def has_conflict(existing: Iterable[Tuple[Instant, Instant, str]],
                 new_in: Instant, new_out: Instant) -> bool:
    """
    在已有预订 (check_in, check_out, status) 中查找冲突

    Returns:
        True 如果存在占用状态且区间重叠的预订
    """
    return any(
        is_blocking(status) and intervals_overlap(ci, co, new_in, new_out)
        for ci, co, status in existing
    )


__all__ = [
    "BLOCKING_STATUSES",
    "validate_date_range",
    "intervals_overlap",
    "is_blocking",
    "has_conflict",
]
