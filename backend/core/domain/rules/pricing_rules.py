"""
core/domain/rules/pricing_rules.py

定价规则 - 纯函数，无副作用

- 住宿：nights = ceil((退房时刻 - 入住时刻) / 24h)，总价 = nights × 每晚价格
- 服务：总价 = 单价 × 数量
"""
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Union
import math

from core.exceptions import ValidationError

SECONDS_PER_NIGHT = 24 * 60 * 60
CENT = Decimal("0.01")

Instant = Union[date, datetime]
Money = Union[Decimal, int, float, str]


def to_instant(value: Instant) -> datetime:
    """
    统一为无时区的 UTC datetime

    date 视为当天 00:00；带时区的 datetime 先转换到 UTC
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    raise ValidationError(f"无效的日期: {value!r}")


def to_money(value: Money, field: str = "价格") -> Decimal:
    """转换为 Decimal 金额，拒绝负数"""
    if isinstance(value, bool):
        raise ValidationError(f"{field}必须是数字")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field}必须是数字")
    if not amount.is_finite() or amount < 0:
        raise ValidationError(f"{field}不能为负数")
    return amount


def count_nights(check_in: Instant, check_out: Instant) -> int:
    """计算晚数（不足一晚按一晚计）"""
    seconds = (to_instant(check_out) - to_instant(check_in)).total_seconds()
    nights = math.ceil(seconds / SECONDS_PER_NIGHT)
    if nights <= 0:
        raise ValidationError("离店日期必须晚于入住日期")
    return nights


def price_for_stay(nightly_rate: Money, check_in: Instant, check_out: Instant) -> Decimal:
    """计算住宿总价"""
    rate = to_money(nightly_rate, "每晚价格")
    nights = count_nights(check_in, check_out)
    return (rate * nights).quantize(CENT)


def price_for_order(unit_price: Money, quantity: int) -> Decimal:
    """计算服务订单总价"""
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError("数量必须是整数")
    if quantity <= 0:
        raise ValidationError("数量至少为 1")
    price = to_money(unit_price, "服务价格")
    return (price * quantity).quantize(CENT)


__all__ = [
    "SECONDS_PER_NIGHT",
    "to_instant",
    "to_money",
    "count_nights",
    "price_for_stay",
    "price_for_order",
]
