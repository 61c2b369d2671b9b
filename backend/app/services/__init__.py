# Business Services
from app.services.client_service import ClientService
from app.services.room_service import RoomService
from app.services.catalog_service import CatalogService
from app.services.availability import AvailabilityChecker
from app.services.booking_service import BookingService
from app.services.service_order_service import ServiceOrderService
from app.services.review_service import ReviewService

__all__ = [
    'ClientService', 'RoomService', 'CatalogService', 'AvailabilityChecker',
    'BookingService', 'ServiceOrderService', 'ReviewService'
]
