"""
本体对象定义 (Ontology Objects)
客户、房间、服务、预订、服务订单、评价

派生字段（Room.rating / Room.num_reviews / Booking.total_price / ServiceOrder.total_price）
只由服务层重新计算写入，不接受调用方输入
"""
from datetime import datetime
from enum import Enum
from sqlalchemy import (
    Column, Integer, String, Float, DateTime,
    ForeignKey, Text, Enum as SQLEnum, Boolean, Numeric, JSON, UniqueConstraint
)
from sqlalchemy.orm import relationship
from app.database import Base
from core.domain.lifecycle import LifecycleStatus
from core.security.context import Role


# ============== 枚举定义 ==============

ClientRole = Role

# 预订与服务订单共用同一生命周期
BookingStatus = LifecycleStatus
ServiceOrderStatus = LifecycleStatus


class RoomType(str, Enum):
    """房型"""
    SINGLE = "single"      # 单人间
    DOUBLE = "double"      # 双人间
    LUXURY = "luxury"      # 豪华间


class RoomStatus(str, Enum):
    """房间状态"""
    AVAILABLE = "available"        # 可预订
    BOOKED = "booked"              # 已预订
    MAINTENANCE = "maintenance"    # 维修中


class ServiceCategory(str, Enum):
    """服务类别"""
    SPA = "spa"
    DINING = "dining"
    ACTIVITIES = "activities"
    TRANSPORTATION = "transportation"
    OTHER = "other"


# ============== 本体对象定义 ==============

class Client(Base):
    """
    客户对象 - 身份记录
    删除客户不级联，引用它的预订/订单/评价保留悬空引用
    """
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)                       # 姓名
    email = Column(String(120), unique=True, nullable=False, index=True)
    phone = Column(String(30))                                       # 手机号
    password_hash = Column(String(255), nullable=False)              # 密码哈希
    role = Column(SQLEnum(ClientRole), nullable=False, default=ClientRole.USER)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # 链接
    bookings = relationship("Booking", back_populates="client", passive_deletes="all")
    service_orders = relationship("ServiceOrder", back_populates="client", passive_deletes="all")
    reviews = relationship("Review", back_populates="client", passive_deletes="all")


class Room(Base):
    """
    房间对象 - 可预订单元
    rating / num_reviews 为缓存投影，由评价写入后重新计算
    """
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, index=True)
    room_number = Column(String(20), unique=True, nullable=False)    # 房间号
    name = Column(String(100))                                       # 展示名称
    room_type = Column(SQLEnum(RoomType), nullable=False, default=RoomType.SINGLE)
    price_per_night = Column(Numeric(10, 2), nullable=False)         # 每晚价格
    capacity = Column(Integer, nullable=False)                       # 容纳人数 1-10
    status = Column(SQLEnum(RoomStatus), default=RoomStatus.AVAILABLE)
    description = Column(Text, nullable=False)                       # 描述
    amenities = Column(JSON, default=list)                           # 设施列表
    images = Column(JSON, default=list)                              # 图片 URL 列表
    rating = Column(Float, default=0.0, nullable=False)              # 聚合评分
    num_reviews = Column(Integer, default=0, nullable=False)         # 评价数
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # 链接
    bookings = relationship("Booking", back_populates="room", passive_deletes="all")
    reviews = relationship("Review", back_populates="room", passive_deletes="all")


class Service(Base):
    """服务对象 - 可下单的服务项目"""
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)                       # 服务名称
    description = Column(Text, nullable=False)                       # 描述
    price = Column(Numeric(10, 2), nullable=False)                   # 单价
    category = Column(SQLEnum(ServiceCategory), nullable=False)
    duration = Column(Integer, nullable=False)                       # 时长(分钟)
    is_available = Column(Boolean, default=True)                     # 是否可预约
    image = Column(String(500))                                      # 图片 URL
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # 链接
    orders = relationship("ServiceOrder", back_populates="service", passive_deletes="all")


class Booking(Base):
    """
    预订对象 - 客户对房间一段日期的预订
    total_price = 晚数 × 每晚价格
    """
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False, index=True)
    check_in = Column(DateTime, nullable=False)                      # 入住时间
    check_out = Column(DateTime, nullable=False)                     # 离店时间
    guests = Column(Integer, nullable=False, default=1)              # 入住人数
    status = Column(SQLEnum(BookingStatus), nullable=False, default=BookingStatus.PENDING)
    total_price = Column(Numeric(10, 2), nullable=False)             # 总价
    special_requests = Column(String(500))                           # 特殊要求
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # 链接
    client = relationship("Client", back_populates="bookings")
    room = relationship("Room", back_populates="bookings")


class ServiceOrder(Base):
    """
    服务订单对象
    total_price = 单价 × 数量
    """
    __tablename__ = "service_orders"

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=False, index=True)
    appointment_date = Column(DateTime, nullable=False)              # 预约时间
    quantity = Column(Integer, nullable=False, default=1)            # 数量
    status = Column(SQLEnum(ServiceOrderStatus), nullable=False, default=ServiceOrderStatus.PENDING)
    total_price = Column(Numeric(10, 2), nullable=False)             # 总价
    special_requests = Column(String(500))                           # 特殊要求
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # 链接
    client = relationship("Client", back_populates="service_orders")
    service = relationship("Service", back_populates="orders")


class Review(Base):
    """
    评价对象
    每个 (客户, 房间) 至多一条评价
    """
    __tablename__ = "reviews"
    __table_args__ = (
        UniqueConstraint("client_id", "room_id", name="uq_review_client_room"),
    )

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)                         # 评分 1-5
    comment = Column(Text, nullable=False)                           # 评价内容
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # 链接
    client = relationship("Client", back_populates="reviews")
    room = relationship("Room", back_populates="reviews")
