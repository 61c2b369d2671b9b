# Ontology Models
from app.models.ontology import (
    Client, Room, Service, Booking, ServiceOrder, Review
)

__all__ = [
    'Client', 'Room', 'Service', 'Booking', 'ServiceOrder', 'Review'
]
