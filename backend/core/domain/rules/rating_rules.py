"""
core/domain/rules/rating_rules.py

房间聚合评分规则
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Sequence, Tuple

from core.exceptions import ValidationError

MIN_RATING = 1
MAX_RATING = 5


def validate_rating(rating) -> int:
    """评分必须是 1-5 的整数"""
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise ValidationError("评分必须是整数")
    if rating < MIN_RATING or rating > MAX_RATING:
        raise ValidationError(f"评分必须在 {MIN_RATING}-{MAX_RATING} 之间")
    return rating


def aggregate_rating(ratings: Sequence[int]) -> Tuple[float, int]:
    """
    计算聚合评分

    Returns:
        (平均分保留一位小数, 评价数)；没有评价时为 (0.0, 0)
    """
    count = len(ratings)
    if count == 0:
        return 0.0, 0
    mean = Decimal(sum(ratings)) / Decimal(count)
    return float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)), count


__all__ = ["MIN_RATING", "MAX_RATING", "validate_rating", "aggregate_rating"]
