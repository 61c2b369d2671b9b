"""
列表分页
"""
from typing import Optional
from fastapi import Response
from sqlalchemy.orm import Query

from app.config import settings

TOTAL_COUNT_HEADER = "X-Total-Count"


class Page(list):
    """一页结果，total 为分页前符合条件的总数"""

    def __init__(self, items, total: int, page: int, limit: int):
        super().__init__(items)
        self.total = total
        self.page = page
        self.limit = limit


def paginate(query: Query, page: int = 1, limit: Optional[int] = None) -> Page:
    """按页码返回结果，limit 被限制在 [1, MAX_PAGE_SIZE]"""
    limit = limit or settings.DEFAULT_PAGE_SIZE
    limit = max(1, min(limit, settings.MAX_PAGE_SIZE))
    page = max(1, page)
    total = query.order_by(None).count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    return Page(items, total, page, limit)


def with_total(response: Response, page: Page) -> Page:
    """把总数写入响应头，响应体仍是数组"""
    response.headers[TOTAL_COUNT_HEADER] = str(page.total)
    return page
