"""
Pydantic 模式定义
用于 API 请求/响应验证

请求模式中不包含派生字段（rating、num_reviews、total_price、status），
调用方传入的同名字段会被忽略
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field, field_validator, ConfigDict
from app.models.ontology import (
    ClientRole, RoomType, RoomStatus, ServiceCategory, BookingStatus, ServiceOrderStatus
)


def _normalize_email(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip().lower()
    if "@" not in value or value.startswith("@") or value.endswith("@"):
        raise ValueError("邮箱格式不正确")
    return value


def _strip_required(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if not value:
        raise ValueError("不能为空")
    return value


# ============== 认证 / 客户 Schemas ==============

class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., max_length=120)
    phone: Optional[str] = Field(None, max_length=30)
    password: str = Field(..., min_length=6, max_length=128)

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return _normalize_email(v)

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        return _strip_required(v)


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return _normalize_email(v)


class ClientResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    role: ClientRole
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class ClientSummary(BaseModel):
    id: int
    name: str
    model_config = ConfigDict(from_attributes=True)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    client: ClientResponse


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[str] = Field(None, max_length=120)
    phone: Optional[str] = Field(None, max_length=30)

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return _normalize_email(v)


class ClientAdminUpdate(ProfileUpdate):
    """管理员更新客户（可修改角色，不可修改密码）"""
    role: Optional[ClientRole] = None


# ============== 房间 Schemas ==============

class RoomBase(BaseModel):
    room_number: str = Field(..., min_length=1, max_length=20)
    name: Optional[str] = Field(None, max_length=100)
    room_type: RoomType = RoomType.SINGLE
    price_per_night: Decimal = Field(..., ge=0)
    capacity: int = Field(..., ge=1, le=10)
    description: str = Field(..., min_length=1, max_length=500)
    amenities: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)

    @field_validator("room_number")
    @classmethod
    def check_room_number(cls, v):
        return _strip_required(v)


class RoomCreate(RoomBase):
    status: RoomStatus = RoomStatus.AVAILABLE


class RoomUpdate(BaseModel):
    room_number: Optional[str] = Field(None, min_length=1, max_length=20)
    name: Optional[str] = Field(None, max_length=100)
    room_type: Optional[RoomType] = None
    price_per_night: Optional[Decimal] = Field(None, ge=0)
    capacity: Optional[int] = Field(None, ge=1, le=10)
    status: Optional[RoomStatus] = None
    description: Optional[str] = Field(None, min_length=1, max_length=500)
    amenities: Optional[List[str]] = None
    images: Optional[List[str]] = None


class RoomResponse(RoomBase):
    id: int
    status: RoomStatus
    rating: float = 0.0
    num_reviews: int = 0
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class RoomSummary(BaseModel):
    id: int
    room_number: str
    name: Optional[str] = None
    room_type: RoomType
    price_per_night: Decimal
    capacity: int
    model_config = ConfigDict(from_attributes=True)


class RoomAvailabilityResponse(BaseModel):
    room_id: int
    check_in: datetime
    check_out: datetime
    available: bool
    nights: int
    total_price: Decimal


# ============== 服务 Schemas ==============

class ServiceBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=500)
    price: Decimal = Field(..., ge=0)
    category: ServiceCategory
    duration: int = Field(..., gt=0)
    is_available: bool = True
    image: Optional[str] = Field(None, max_length=500)

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        return _strip_required(v)


class ServiceCreate(ServiceBase):
    pass


class ServiceUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1, max_length=500)
    price: Optional[Decimal] = Field(None, ge=0)
    category: Optional[ServiceCategory] = None
    duration: Optional[int] = Field(None, gt=0)
    is_available: Optional[bool] = None
    image: Optional[str] = Field(None, max_length=500)


class ServiceResponse(ServiceBase):
    id: int
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class ServiceSummary(BaseModel):
    id: int
    name: str
    price: Decimal
    category: ServiceCategory
    duration: int
    model_config = ConfigDict(from_attributes=True)


# ============== 预订 Schemas ==============

class BookingCreate(BaseModel):
    room_id: int
    check_in: datetime
    check_out: datetime
    guests: int = Field(default=1, ge=1)
    special_requests: Optional[str] = Field(None, max_length=500)


class StatusUpdate(BaseModel):
    status: BookingStatus


class BookingResponse(BaseModel):
    id: int
    client_id: int
    room_id: int
    check_in: datetime
    check_out: datetime
    guests: int
    status: BookingStatus
    total_price: Decimal
    special_requests: Optional[str] = None
    created_at: datetime
    room: Optional[RoomSummary] = None
    model_config = ConfigDict(from_attributes=True)


# ============== 服务订单 Schemas ==============

class ServiceOrderCreate(BaseModel):
    service_id: int
    appointment_date: datetime
    quantity: int = Field(default=1, ge=1)
    special_requests: Optional[str] = Field(None, max_length=500)


class ServiceOrderResponse(BaseModel):
    id: int
    client_id: int
    service_id: int
    appointment_date: datetime
    quantity: int
    status: ServiceOrderStatus
    total_price: Decimal
    special_requests: Optional[str] = None
    created_at: datetime
    service: Optional[ServiceSummary] = None
    model_config = ConfigDict(from_attributes=True)


# ============== 评价 Schemas ==============

class ReviewCreate(BaseModel):
    room_id: int
    rating: int = Field(..., ge=1, le=5)
    comment: str = Field(..., max_length=2000)

    @field_validator("comment")
    @classmethod
    def check_comment(cls, v):
        return _strip_required(v)


class ReviewUpdate(BaseModel):
    rating: Optional[int] = Field(None, ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=2000)

    @field_validator("comment")
    @classmethod
    def check_comment(cls, v):
        return _strip_required(v)


class ReviewResponse(BaseModel):
    id: int
    client_id: int
    room_id: int
    rating: int
    comment: str
    created_at: datetime
    client: Optional[ClientSummary] = None
    model_config = ConfigDict(from_attributes=True)


# ============== 通用 ==============

class MessageResponse(BaseModel):
    message: str
