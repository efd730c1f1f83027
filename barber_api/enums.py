"""
Enumerations shared by the ORM models, the API schemas and the client
library. Kept free of SQLAlchemy so the client can import them without
touching the database layer.
"""
import enum


class UserRole(str, enum.Enum):
    """User role enumeration."""
    CLIENT = "CLIENT"
    BARBER = "BARBER"
    ADMIN = "ADMIN"


class BookingStatus(str, enum.Enum):
    """Booking status state machine."""
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELED = "CANCELED"
    NO_SHOW = "NO_SHOW"
