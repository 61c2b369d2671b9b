# API Routers
from app.routers import auth, clients, rooms, services, bookings, service_orders, reviews

__all__ = ['auth', 'clients', 'rooms', 'services', 'bookings', 'service_orders', 'reviews']
