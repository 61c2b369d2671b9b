"""
评价路由
读取公开；写入需登录，修改 / 删除需所有者或管理员
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.schemas import ReviewCreate, ReviewUpdate, ReviewResponse, MessageResponse
from app.services.review_service import ReviewService
from app.services.paging import with_total
from app.security.auth import require_authenticated
from core.security.context import SecurityContext

router = APIRouter(prefix="/reviews", tags=["评价"])


@router.get("", response_model=List[ReviewResponse])
def list_reviews(
    response: Response,
    room_id: Optional[int] = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    db: Session = Depends(get_db)
):
    """获取评价列表"""
    items = ReviewService(db).get_reviews(room_id=room_id, page=page, limit=limit)
    return with_total(response, items)


@router.get("/room/{room_id}", response_model=List[ReviewResponse])
def list_room_reviews(
    response: Response,
    room_id: int,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    db: Session = Depends(get_db)
):
    """获取某房间的评价"""
    items = ReviewService(db).get_room_reviews(room_id, page=page, limit=limit)
    return with_total(response, items)


@router.get("/{review_id}", response_model=ReviewResponse)
def get_review(review_id: int, db: Session = Depends(get_db)):
    """获取评价详情"""
    return ReviewService(db).get_review(review_id)


@router.post("", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
def create_review(
    data: ReviewCreate,
    db: Session = Depends(get_db),
    ctx: SecurityContext = Depends(require_authenticated)
):
    """创建评价"""
    return ReviewService(db).create_review(ctx.client_id, data)


@router.put("/{review_id}", response_model=ReviewResponse)
def update_review(
    review_id: int,
    data: ReviewUpdate,
    db: Session = Depends(get_db),
    ctx: SecurityContext = Depends(require_authenticated)
):
    """修改评价"""
    return ReviewService(db).update_review(review_id, ctx, data)


@router.delete("/{review_id}", response_model=MessageResponse)
def delete_review(
    review_id: int,
    db: Session = Depends(get_db),
    ctx: SecurityContext = Depends(require_authenticated)
):
    """删除评价"""
    ReviewService(db).delete_review(review_id, ctx)
    return {"message": "评价已删除"}
