"""
RoomService / CatalogService 单元测试
"""
from datetime import datetime
from decimal import Decimal

import pytest

from app.models.ontology import Booking, BookingStatus, RoomStatus, RoomType, ServiceCategory
from app.models.schemas import RoomCreate, RoomUpdate, ServiceCreate, ServiceUpdate
from app.services.catalog_service import CatalogService
from app.services.room_service import RoomService
from core.exceptions import NotFoundError, ValidationError


def _room_data(number="301", **kwargs):
    data = dict(
        room_number=number,
        name="花园单人间",
        room_type=RoomType.SINGLE,
        price_per_night=Decimal("120"),
        capacity=1,
        description="安静的花园景观",
        amenities=["wifi"],
    )
    data.update(kwargs)
    return RoomCreate(**data)


class TestRoomService:

    def test_create(self, db_session):
        room = RoomService(db_session).create_room(_room_data())
        assert room.id is not None
        assert room.rating == 0.0
        assert room.num_reviews == 0
        assert room.status == RoomStatus.AVAILABLE

    def test_duplicate_number(self, db_session, sample_room):
        with pytest.raises(ValidationError):
            RoomService(db_session).create_room(_room_data(number=sample_room.room_number))

    def test_update_ignores_derived_fields(self, db_session, sample_room):
        service = RoomService(db_session)
        room = service.update_room(sample_room.id, RoomUpdate(capacity=3, status=RoomStatus.MAINTENANCE))
        assert room.capacity == 3
        assert room.status == RoomStatus.MAINTENANCE
        assert room.rating == 0.0

    def test_update_duplicate_number(self, db_session, sample_room, sample_room_luxury):
        with pytest.raises(ValidationError):
            RoomService(db_session).update_room(
                sample_room.id, RoomUpdate(room_number=sample_room_luxury.room_number)
            )

    def test_filters(self, db_session, sample_room, sample_room_luxury):
        service = RoomService(db_session)
        assert [r.id for r in service.get_rooms(room_type=RoomType.LUXURY)] == [sample_room_luxury.id]
        assert [r.id for r in service.get_rooms(max_price=Decimal("200"))] == [sample_room.id]
        assert [r.id for r in service.get_rooms(min_capacity=3)] == [sample_room_luxury.id]
        assert [r.id for r in service.get_rooms(search="海景")] == [sample_room.id]

    def test_paging(self, db_session, sample_room, sample_room_luxury):
        service = RoomService(db_session)
        assert len(service.get_rooms(page=1, limit=1)) == 1
        assert len(service.get_rooms(page=2, limit=1)) == 1
        assert service.get_rooms(page=3, limit=1) == []

    def test_page_carries_total(self, db_session, sample_room, sample_room_luxury):
        page = RoomService(db_session).get_rooms(page=2, limit=1)
        assert page.total == 2
        assert (page.page, page.limit) == (2, 1)
        assert RoomService(db_session).get_rooms(page=3, limit=1).total == 2
        assert RoomService(db_session).get_rooms(min_capacity=3).total == 1

    def test_delete(self, db_session, sample_room):
        service = RoomService(db_session)
        service.delete_room(sample_room.id)
        with pytest.raises(NotFoundError):
            service.get_room(sample_room.id)

    def test_check_availability(self, db_session, sample_room, user_client):
        db_session.add(Booking(
            client_id=user_client.id, room_id=sample_room.id,
            check_in=datetime(2024, 7, 1), check_out=datetime(2024, 7, 5),
            guests=1, status=BookingStatus.PENDING, total_price=Decimal("400.00"),
        ))
        db_session.commit()
        service = RoomService(db_session)

        busy = service.check_availability(sample_room.id, datetime(2024, 7, 3), datetime(2024, 7, 6))
        assert busy["available"] is False

        free = service.check_availability(sample_room.id, datetime(2024, 7, 6), datetime(2024, 7, 9))
        assert free["available"] is True
        assert free["nights"] == 3
        assert free["total_price"] == Decimal("300.00")

    def test_list_free_rooms_for_dates(self, db_session, user_client, sample_room,
                                       sample_room_luxury, maintenance_room):
        db_session.add_all([
            Booking(
                client_id=user_client.id, room_id=sample_room.id,
                check_in=datetime(2024, 7, 1), check_out=datetime(2024, 7, 5),
                guests=1, status=BookingStatus.PENDING, total_price=Decimal("400.00"),
            ),
            Booking(
                client_id=user_client.id, room_id=sample_room_luxury.id,
                check_in=datetime(2024, 7, 1), check_out=datetime(2024, 7, 5),
                guests=1, status=BookingStatus.CANCELLED, total_price=Decimal("3552.00"),
            ),
        ])
        db_session.commit()
        service = RoomService(db_session)

        # 取消的预订不占用房间，维修中的房间不列出
        free = service.get_rooms(check_in=datetime(2024, 7, 3), check_out=datetime(2024, 7, 6))
        assert [r.id for r in free] == [sample_room_luxury.id]

        # 首尾相接也算冲突
        touching = service.get_rooms(check_in=datetime(2024, 7, 5), check_out=datetime(2024, 7, 8))
        assert [r.id for r in touching] == [sample_room_luxury.id]

        later = service.get_rooms(check_in=datetime(2024, 7, 6), check_out=datetime(2024, 7, 8))
        assert sorted(r.id for r in later) == sorted([sample_room.id, sample_room_luxury.id])

    def test_list_free_rooms_needs_both_dates(self, db_session, sample_room):
        service = RoomService(db_session)
        with pytest.raises(ValidationError):
            service.get_rooms(check_in=datetime(2024, 7, 3))
        with pytest.raises(ValidationError):
            service.get_rooms(check_in=datetime(2024, 7, 6), check_out=datetime(2024, 7, 3))

    def test_maintenance_unavailable(self, db_session, maintenance_room):
        result = RoomService(db_session).check_availability(
            maintenance_room.id, datetime(2024, 7, 1), datetime(2024, 7, 2)
        )
        assert result["available"] is False

    def test_check_availability_bad_range(self, db_session, sample_room):
        with pytest.raises(ValidationError):
            RoomService(db_session).check_availability(
                sample_room.id, datetime(2024, 7, 2), datetime(2024, 7, 1)
            )


class TestCatalogService:

    def test_crud(self, db_session):
        service = CatalogService(db_session)
        created = service.create_service(ServiceCreate(
            name="机场接送", description="专车接送", price=Decimal("80"),
            category=ServiceCategory.TRANSPORTATION, duration=45,
        ))
        assert created.is_available is True

        updated = service.update_service(created.id, ServiceUpdate(is_available=False))
        assert updated.is_available is False

        service.delete_service(created.id)
        with pytest.raises(NotFoundError):
            service.get_service(created.id)

    def test_filters(self, db_session, sample_service, unavailable_service):
        service = CatalogService(db_session)
        assert [s.id for s in service.get_services(category=ServiceCategory.SPA)] == [sample_service.id]
        assert [s.id for s in service.get_services(is_available=False)] == [unavailable_service.id]
        assert [s.id for s in service.get_services(search="按摩")] == [sample_service.id]
