"""
ClientService 单元测试 - 注册、登录与客户管理
"""
import pytest

from app.models.ontology import Booking, Client, ClientRole, BookingStatus
from app.models.schemas import RegisterRequest, LoginRequest, ProfileUpdate, ClientAdminUpdate
from app.security.auth import decode_token
from app.services.client_service import ClientService
from core.domain.role_policy import RoleBootstrapPolicy
from core.exceptions import AuthenticationError, NotFoundError, ValidationError


def _register(service, email, name="测试客户", password="secret1"):
    return service.register(RegisterRequest(name=name, email=email, password=password))


@pytest.fixture
def service(db_session):
    return ClientService(db_session, role_policy=RoleBootstrapPolicy())


class TestRegister:

    def test_first_client_is_admin(self, service):
        assert _register(service, "first@example.com").role == ClientRole.ADMIN

    def test_subsequent_roles(self, service):
        _register(service, "first@example.com")
        assert _register(service, "guest@example.com").role == ClientRole.USER
        assert _register(service, "boss@admin.com").role == ClientRole.ADMIN
        assert _register(service, "wang@staff.com").role == ClientRole.STAFF

    def test_email_normalized_and_password_hashed(self, service):
        client = _register(service, "  Mixed@Example.COM ")
        assert client.email == "mixed@example.com"
        assert client.password_hash != "secret1"

    def test_duplicate_email(self, service):
        _register(service, "dup@example.com")
        with pytest.raises(ValidationError):
            _register(service, "DUP@example.com")

    def test_custom_policy(self, db_session):
        service = ClientService(
            db_session, role_policy=RoleBootstrapPolicy(first_client_is_admin=False)
        )
        assert _register(service, "first@example.com").role == ClientRole.USER


class TestLogin:

    def test_login_returns_token(self, service):
        client = _register(service, "first@example.com")
        result = service.login(LoginRequest(email="first@example.com", password="secret1"))
        assert result["client"].id == client.id
        payload = decode_token(result["access_token"])
        assert payload["sub"] == str(client.id)
        assert payload["role"] == "admin"

    def test_wrong_password(self, service):
        _register(service, "first@example.com")
        with pytest.raises(AuthenticationError):
            service.login(LoginRequest(email="first@example.com", password="wrong-pass"))

    def test_unknown_email(self, service):
        with pytest.raises(AuthenticationError):
            service.login(LoginRequest(email="nobody@example.com", password="secret1"))


class TestProfileAndAdmin:

    def test_update_profile(self, service, user_client):
        client = service.update_profile(user_client.id, ProfileUpdate(name="张三丰", phone="139"))
        assert client.name == "张三丰"
        assert client.phone == "139"

    def test_update_profile_email_taken(self, service, user_client, other_user_client):
        with pytest.raises(ValidationError):
            service.update_profile(user_client.id, ProfileUpdate(email=other_user_client.email))

    def test_admin_changes_role(self, service, user_client):
        client = service.update_client(user_client.id, ClientAdminUpdate(role=ClientRole.STAFF))
        assert client.role == ClientRole.STAFF

    def test_search(self, service, user_client, other_user_client, admin_client):
        assert [c.id for c in service.get_clients(search="zhang")] == [user_client.id]
        assert len(service.get_clients(role=ClientRole.ADMIN)) == 1

    def test_delete_leaves_bookings_orphaned(self, service, user_client, sample_room, db_session):
        from datetime import datetime
        from decimal import Decimal
        db_session.add(Booking(
            client_id=user_client.id, room_id=sample_room.id,
            check_in=datetime(2024, 6, 1), check_out=datetime(2024, 6, 2),
            guests=1, status=BookingStatus.PENDING, total_price=Decimal("100.00"),
        ))
        db_session.commit()
        client_id = user_client.id

        service.delete_client(client_id)

        assert db_session.query(Client).filter(Client.id == client_id).first() is None
        booking = db_session.query(Booking).one()
        assert booking.client_id == client_id

    def test_get_not_found(self, service):
        with pytest.raises(NotFoundError):
            service.get_client(999)
