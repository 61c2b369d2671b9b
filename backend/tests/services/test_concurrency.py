"""
并发写入测试 - 同一房间的预订与评价在房间锁内串行执行

使用文件数据库，每个线程各自持有会话
"""
import threading
from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.database import Base
from app.models.ontology import Booking, Client, ClientRole, Review, Room, RoomStatus, RoomType
from app.models.schemas import BookingCreate, ReviewCreate
from app.services.booking_service import BookingService
from app.services.review_service import ReviewService
from core.domain.rules.rating_rules import aggregate_rating
from core.exceptions import AvailabilityError, DuplicateReviewError

THREADS = 8


@pytest.fixture
def file_sessions(tmp_path):
    """文件数据库的会话工厂"""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'concurrency.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def seeded(file_sessions):
    """一间房 + THREADS 个客户"""
    db = file_sessions()
    room = Room(
        room_number="201", name="湖景双人间", room_type=RoomType.DOUBLE,
        price_per_night=Decimal("100.00"), capacity=2, status=RoomStatus.AVAILABLE,
        description="湖景",
    )
    clients = [
        Client(name=f"客户{i}", email=f"guest{i}@example.com", phone="13800000000",
               password_hash="x", role=ClientRole.USER)
        for i in range(THREADS)
    ]
    db.add(room)
    db.add_all(clients)
    db.commit()
    ids = room.id, [c.id for c in clients]
    db.close()
    return ids


def _run_concurrently(file_sessions, work):
    """THREADS 个线程同时起跑，各自用独立会话执行 work(db, index)"""
    barrier = threading.Barrier(THREADS)
    outcomes, errors = [], []
    lock = threading.Lock()

    def runner(index):
        db = file_sessions()
        try:
            barrier.wait()
            result = work(db, index)
            with lock:
                outcomes.append(result)
        except Exception as e:
            with lock:
                errors.append(e)
        finally:
            db.close()

    threads = [threading.Thread(target=runner, args=(i,)) for i in range(THREADS)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=60)
    return outcomes, errors


class TestConcurrentBookings:

    def test_same_dates_only_one_wins(self, file_sessions, seeded):
        room_id, client_ids = seeded

        def book(db, index):
            return BookingService(db).create_booking(client_ids[index], BookingCreate(
                room_id=room_id,
                check_in=datetime(2024, 7, 1),
                check_out=datetime(2024, 7, 5),
                guests=1,
            )).id

        created, errors = _run_concurrently(file_sessions, book)

        assert len(created) == 1
        assert len(errors) == THREADS - 1
        assert all(isinstance(e, AvailabilityError) for e in errors)

        db = file_sessions()
        assert db.query(Booking).count() == 1
        db.close()

    def test_disjoint_dates_all_succeed(self, file_sessions, seeded):
        room_id, client_ids = seeded

        def book(db, index):
            # 每个线程订不同的一晚，区间互不相接
            start = datetime(2024, 1, 1 + index * 3)
            end = datetime(2024, 1, 2 + index * 3)
            return BookingService(db).create_booking(client_ids[index], BookingCreate(
                room_id=room_id, check_in=start, check_out=end, guests=1,
            )).id

        created, errors = _run_concurrently(file_sessions, book)

        assert errors == []
        assert len(created) == THREADS


class TestConcurrentReviews:

    def test_rating_counts_every_review(self, file_sessions, seeded):
        room_id, client_ids = seeded
        ratings = [(i % 5) + 1 for i in range(THREADS)]

        def review(db, index):
            return ReviewService(db).create_review(client_ids[index], ReviewCreate(
                room_id=room_id, rating=ratings[index], comment="不错"
            )).id

        created, errors = _run_concurrently(file_sessions, review)

        assert errors == []
        assert len(created) == THREADS

        db = file_sessions()
        room = db.query(Room).filter(Room.id == room_id).one()
        assert (room.rating, room.num_reviews) == aggregate_rating(ratings)
        db.close()

    def test_same_client_reviews_once(self, file_sessions, seeded):
        room_id, client_ids = seeded

        def review(db, index):
            return ReviewService(db).create_review(client_ids[0], ReviewCreate(
                room_id=room_id, rating=4, comment="第二次"
            )).id

        created, errors = _run_concurrently(file_sessions, review)

        assert len(created) == 1
        assert len(errors) == THREADS - 1
        assert all(isinstance(e, DuplicateReviewError) for e in errors)

        db = file_sessions()
        assert db.query(Review).count() == 1
        room = db.query(Room).filter(Room.id == room_id).one()
        assert (room.rating, room.num_reviews) == (4.0, 1)
        db.close()


def test_recompute_overwrites_stale_room_snapshot(db_engine, sample_room, user_client,
                                                  other_user_client, staff_client):
    """会话持有过期的房间快照时，重算结果仍完整写回"""
    factory = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    first, second = factory(), factory()
    try:
        ReviewService(first).create_review(
            user_client.id, ReviewCreate(room_id=sample_room.id, rating=4, comment="好")
        )
        # first 会话里房间快照为 (4.0, 1)
        assert first.query(Room).filter(Room.id == sample_room.id).one().rating == 4.0

        ReviewService(second).create_review(
            other_user_client.id, ReviewCreate(room_id=sample_room.id, rating=5, comment="很好")
        )
        # 库中已是 (4.5, 2)；再加一条 3 分，均值回到 4.0，与 first 的旧快照相同
        ReviewService(first).create_review(
            staff_client.id, ReviewCreate(room_id=sample_room.id, rating=3, comment="一般")
        )

        check = factory()
        room = check.query(Room).filter(Room.id == sample_room.id).one()
        assert (room.rating, room.num_reviews) == (4.0, 3)
        check.close()
    finally:
        first.close()
        second.close()
