"""
SQLAlchemy models package.
Import all models here to ensure they're registered with Base.metadata.
"""
from barber_api.models.users import User, UserRole
from barber_api.models.barbers import BarberProfile
from barber_api.models.services import Service
from barber_api.models.bookings import Booking, BookingStatus
from barber_api.models.reviews import Review

__all__ = [
    "User",
    "UserRole",
    "BarberProfile",
    "Service",
    "Booking",
    "BookingStatus",
    "Review",
]
