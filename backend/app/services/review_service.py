"""
评价服务
每次评价写入（创建 / 更新 / 删除）后在同一事务内重算房间聚合评分：
rating = 全部评价的平均分（保留一位小数），num_reviews = 评价数；无评价时两者归零
"""
from typing import List, Optional, Tuple
import logging
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.ontology import Review, Room
from app.models.schemas import ReviewCreate, ReviewUpdate
from app.services.paging import paginate
from core.domain.rules.rating_rules import aggregate_rating, validate_rating
from core.engine.keyed_lock import room_locks
from core.exceptions import DuplicateReviewError, NotFoundError, ValidationError
from core.security.checker import access_gate
from core.security.context import SecurityContext

logger = logging.getLogger(__name__)


class ReviewService:
    """评价服务"""

    def __init__(self, db: Session):
        self.db = db

    # ============== 查询 ==============

    def get_review(self, review_id: int) -> Review:
        review = self.db.query(Review).filter(Review.id == review_id).first()
        if not review:
            raise NotFoundError("评价不存在")
        return review

    def get_reviews(self, room_id: Optional[int] = None,
                    page: int = 1, limit: Optional[int] = None) -> List[Review]:
        """评价列表（最新的在前）"""
        query = self.db.query(Review)
        if room_id is not None:
            query = query.filter(Review.room_id == room_id)
        return paginate(query.order_by(Review.created_at.desc(), Review.id.desc()), page, limit)

    def get_room_reviews(self, room_id: int, page: int = 1, limit: Optional[int] = None) -> List[Review]:
        """某个房间的评价"""
        if not self.db.query(Room).filter(Room.id == room_id).first():
            raise NotFoundError("房间不存在")
        return self.get_reviews(room_id=room_id, page=page, limit=limit)

    # ============== 聚合评分 ==============

    def recompute_room_rating(self, room_id: int) -> Optional[Tuple[float, int]]:
        """
        重新计算房间评分（不提交，由调用方提交）

        幂等：重复执行得到相同结果
        Returns:
            (rating, num_reviews)；房间已删除时返回 None
        """
        self.db.flush()
        # 覆盖会话中可能过期的房间快照，否则与旧值相同的列不会被写回
        room = self.db.query(Room).populate_existing().filter(Room.id == room_id).first()
        if not room:
            return None

        ratings = [r for (r,) in self.db.query(Review.rating).filter(Review.room_id == room_id).all()]
        rating, count = aggregate_rating(ratings)
        room.rating = rating
        room.num_reviews = count
        logger.info(f"Room {room_id} rating recomputed: {rating} ({count} reviews)")
        return rating, count

    # ============== 写操作 ==============

    def create_review(self, client_id: int, data: ReviewCreate) -> Review:
        """
        创建评价并重算房间评分

        Raises:
            NotFoundError: 房间不存在
            DuplicateReviewError: 该客户已评价过该房间
            ValidationError: 评分或内容不合法
        """
        room = self.db.query(Room).filter(Room.id == data.room_id).first()
        if not room:
            raise NotFoundError("房间不存在")

        rating = validate_rating(data.rating)
        comment = (data.comment or "").strip()
        if not comment:
            raise ValidationError("评价内容不能为空")

        with room_locks.hold(room.id):
            exists = self.db.query(Review).filter(
                Review.client_id == client_id,
                Review.room_id == room.id
            ).first()
            if exists:
                logger.warning(f"Duplicate review rejected: client {client_id}, room {room.id}")
                raise DuplicateReviewError("您已经评价过该房间")

            review = Review(client_id=client_id, room_id=room.id, rating=rating, comment=comment)
            self.db.add(review)
            try:
                self.recompute_room_rating(room.id)
                self.db.commit()
            except IntegrityError:
                self.db.rollback()
                raise DuplicateReviewError("您已经评价过该房间")

        self.db.refresh(review)
        logger.info(f"Review {review.id} created: client {client_id}, room {room.id}, rating {rating}")
        return review

    def update_review(self, review_id: int, caller: SecurityContext, data: ReviewUpdate) -> Review:
        """更新评价（所有者或管理员，仅评分和内容）"""
        review = self.get_review(review_id)
        access_gate.check_owner_or_admin(caller, review.client_id, "修改该评价")

        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        if "rating" in update_data:
            update_data["rating"] = validate_rating(update_data["rating"])
        if "comment" in update_data:
            update_data["comment"] = update_data["comment"].strip()
            if not update_data["comment"]:
                raise ValidationError("评价内容不能为空")

        with room_locks.hold(review.room_id):
            for key, value in update_data.items():
                setattr(review, key, value)
            self.recompute_room_rating(review.room_id)
            self.db.commit()

        self.db.refresh(review)
        logger.info(f"Review {review.id} updated by client {caller.client_id}")
        return review

    def delete_review(self, review_id: int, caller: SecurityContext) -> None:
        """删除评价（所有者或管理员）并重算房间评分"""
        review = self.get_review(review_id)
        access_gate.check_owner_or_admin(caller, review.client_id, "删除该评价")

        room_id = review.room_id
        with room_locks.hold(room_id):
            self.db.delete(review)
            self.recompute_room_rating(room_id)
            self.db.commit()

        logger.info(f"Review {review_id} deleted by client {caller.client_id}")
