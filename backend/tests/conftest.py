"""
Pytest 配置和共享 fixtures
"""
import os

# 应用启动时的 init_db 不落盘
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient
from decimal import Decimal

from app.database import Base, get_db
from app.models import ontology  # noqa: F401
from app.models.ontology import (
    Client, ClientRole, Room, RoomType, RoomStatus, Service, ServiceCategory
)
from app.security.auth import get_password_hash, create_access_token
from app.main import app
from core.security.context import Role, SecurityContext


@pytest.fixture(scope="function")
def db_engine():
    """创建内存数据库引擎"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """创建数据库会话"""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture(scope="function")
def client(db_session):
    """创建测试客户端"""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ============== 客户相关 Fixtures ==============

def _make_client(db, name, email, role):
    record = Client(
        name=name,
        email=email,
        phone="13800000000",
        password_hash=get_password_hash("123456"),
        role=role,
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


@pytest.fixture
def admin_client(db_session):
    """管理员"""
    return _make_client(db_session, "管理员", "boss@admin.com", ClientRole.ADMIN)


@pytest.fixture
def staff_client(db_session):
    """员工"""
    return _make_client(db_session, "前台小王", "wang@staff.com", ClientRole.STAFF)


@pytest.fixture
def user_client(db_session):
    """普通客户"""
    return _make_client(db_session, "张三", "zhang@example.com", ClientRole.USER)


@pytest.fixture
def other_user_client(db_session):
    """另一个普通客户"""
    return _make_client(db_session, "李四", "li@example.com", ClientRole.USER)


@pytest.fixture
def admin_ctx(admin_client):
    return SecurityContext(client_id=admin_client.id, role=Role.ADMIN, email=admin_client.email)


@pytest.fixture
def staff_ctx(staff_client):
    return SecurityContext(client_id=staff_client.id, role=Role.STAFF, email=staff_client.email)


@pytest.fixture
def user_ctx(user_client):
    return SecurityContext(client_id=user_client.id, role=Role.USER, email=user_client.email)


@pytest.fixture
def other_user_ctx(other_user_client):
    return SecurityContext(client_id=other_user_client.id, role=Role.USER, email=other_user_client.email)


@pytest.fixture
def admin_auth_headers(admin_client):
    """返回管理员认证的请求头"""
    token = create_access_token(admin_client.id, admin_client.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def staff_auth_headers(staff_client):
    """返回员工认证的请求头"""
    token = create_access_token(staff_client.id, staff_client.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_auth_headers(user_client):
    """返回普通客户认证的请求头"""
    token = create_access_token(user_client.id, user_client.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_user_auth_headers(other_user_client):
    """返回另一个普通客户认证的请求头"""
    token = create_access_token(other_user_client.id, other_user_client.role)
    return {"Authorization": f"Bearer {token}"}


# ============== 实体相关 Fixtures ==============

@pytest.fixture
def sample_room(db_session):
    """创建测试房间：每晚 100，容纳 2 人"""
    room = Room(
        room_number="101",
        name="海景双人间",
        room_type=RoomType.DOUBLE,
        price_per_night=Decimal("100.00"),
        capacity=2,
        status=RoomStatus.AVAILABLE,
        description="面朝大海的双人间",
        amenities=["wifi", "minibar"],
        images=[],
    )
    db_session.add(room)
    db_session.commit()
    db_session.refresh(room)
    return room


@pytest.fixture
def sample_room_luxury(db_session):
    """创建豪华间"""
    room = Room(
        room_number="801",
        name="总统套房",
        room_type=RoomType.LUXURY,
        price_per_night=Decimal("888.00"),
        capacity=4,
        status=RoomStatus.AVAILABLE,
        description="顶层套房",
        amenities=["wifi", "jacuzzi"],
        images=[],
    )
    db_session.add(room)
    db_session.commit()
    db_session.refresh(room)
    return room


@pytest.fixture
def maintenance_room(db_session):
    """维修中的房间"""
    room = Room(
        room_number="102",
        room_type=RoomType.SINGLE,
        price_per_night=Decimal("80.00"),
        capacity=1,
        status=RoomStatus.MAINTENANCE,
        description="维修中",
    )
    db_session.add(room)
    db_session.commit()
    db_session.refresh(room)
    return room


@pytest.fixture
def sample_service(db_session):
    """创建测试服务：单价 50"""
    service = Service(
        name="精油按摩",
        description="60 分钟全身精油按摩",
        price=Decimal("50.00"),
        category=ServiceCategory.SPA,
        duration=60,
        is_available=True,
    )
    db_session.add(service)
    db_session.commit()
    db_session.refresh(service)
    return service


@pytest.fixture
def unavailable_service(db_session):
    """暂停预约的服务"""
    service = Service(
        name="直升机观光",
        description="暂停中",
        price=Decimal("999.00"),
        category=ServiceCategory.ACTIVITIES,
        duration=30,
        is_available=False,
    )
    db_session.add(service)
    db_session.commit()
    db_session.refresh(service)
    return service
