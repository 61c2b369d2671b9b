"""
core/domain/rules - 纯领域规则（定价、可用性、评分）
"""
from core.domain.rules.pricing_rules import (
    count_nights,
    price_for_stay,
    price_for_order,
    to_instant,
)
from core.domain.rules.availability_rules import (
    BLOCKING_STATUSES,
    validate_date_range,
    intervals_overlap,
    has_conflict,
)
from core.domain.rules.rating_rules import (
    validate_rating,
    aggregate_rating,
)

__all__ = [
    "count_nights",
    "price_for_stay",
    "price_for_order",
    "to_instant",
    "BLOCKING_STATUSES",
    "validate_date_range",
    "intervals_overlap",
    "has_conflict",
    "validate_rating",
    "aggregate_rating",
]
