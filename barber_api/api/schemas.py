"""
Request and response schemas shared by the routes, the service layer and
the client library.

All payloads are camelCase on the wire; snake_case field names are also
accepted on input.
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from barber_api.enums import BookingStatus, UserRole


class CamelModel(BaseModel):
    """Base schema with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def _normalize_email(value: str) -> str:
    value = value.strip().lower()
    if not value or "@" not in value:
        raise ValueError("Invalid email address")
    if "." not in value.split("@")[1]:
        raise ValueError("Invalid email domain")
    return value


# Auth / users

class RegisterRequest(CamelModel):
    """Registration payload."""
    email: str = Field(..., max_length=255, examples=["client@example.com"])
    password: str = Field(..., min_length=6, max_length=72)
    full_name: str = Field(..., min_length=1, max_length=255)
    phone: Optional[str] = Field(None, max_length=30)

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        return _normalize_email(value)


class LoginRequest(CamelModel):
    """Login payload."""
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: str) -> str:
        return value.strip().lower()


class UserOut(CamelModel):
    id: UUID
    email: str
    full_name: str
    phone: Optional[str] = None
    role: UserRole


class AuthResponse(CamelModel):
    user: UserOut
    access_token: str


class UserSummary(CamelModel):
    id: UUID
    full_name: str


class ClientContact(CamelModel):
    id: UUID
    full_name: str
    email: str
    phone: Optional[str] = None


# Barbers / services

class BarberProfileRequest(CamelModel):
    """Create-or-update payload for the caller's barber profile."""
    shop_name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    phone: Optional[str] = Field(None, max_length=30)
    address_line1: str = Field(..., min_length=1, max_length=255)
    address_line2: Optional[str] = Field(None, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    province: str = Field(..., min_length=1, max_length=100)
    postal_code: str = Field(..., min_length=1, max_length=20)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)


class ServiceCreateRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    duration_min: int = Field(..., gt=0, le=24 * 60)
    price_cents: int = Field(..., ge=0)
    image_url: Optional[str] = Field(None, max_length=1000)


class ServiceUpdateRequest(CamelModel):
    """Partial update; omitted fields are left unchanged."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    duration_min: Optional[int] = Field(None, gt=0, le=24 * 60)
    price_cents: Optional[int] = Field(None, ge=0)
    image_url: Optional[str] = Field(None, max_length=1000)


class ServiceOut(CamelModel):
    id: UUID
    barber_id: UUID
    name: str
    description: Optional[str] = None
    duration_min: int
    price_cents: int
    image_url: Optional[str] = None


class ReviewOut(CamelModel):
    id: UUID
    barber_id: UUID
    rating: int
    comment: Optional[str] = None
    created_at: datetime
    client: UserSummary


class BarberOut(CamelModel):
    id: UUID
    user_id: UUID
    shop_name: str
    description: Optional[str] = None
    phone: Optional[str] = None
    address_line1: str
    address_line2: Optional[str] = None
    city: str
    province: str
    postal_code: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    user: Optional[UserSummary] = None
    services: List[ServiceOut] = Field(default_factory=list)
    rating_average: Optional[float] = None
    rating_count: int = 0


class BarberDetailOut(BarberOut):
    reviews: List[ReviewOut] = Field(default_factory=list)


class BarberReviewsOut(CamelModel):
    reviews: List[ReviewOut]
    rating_average: Optional[float] = None
    rating_count: int = 0


# Reviews

class ReviewCreateRequest(CamelModel):
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=1000)


class ReviewForBarberRequest(ReviewCreateRequest):
    barber_id: UUID


# Bookings

class BookingCreateRequest(CamelModel):
    barber_id: UUID
    service_id: UUID
    scheduled_at: datetime = Field(..., examples=["2025-11-20T15:30:00.000Z"])


class BookingStatusUpdateRequest(CamelModel):
    status: BookingStatus


class BarberSummary(CamelModel):
    id: UUID
    shop_name: str
    city: str
    province: str
    postal_code: str


class ServiceSummary(CamelModel):
    id: UUID
    name: str
    duration_min: int
    price_cents: int


class BookingOut(CamelModel):
    id: UUID
    client_id: UUID
    barber_id: UUID
    service_id: UUID
    scheduled_at: datetime
    status: BookingStatus
    total_price_cents: int
    stripe_payment_intent_id: Optional[str] = None
    created_at: datetime
    barber: BarberSummary
    service: ServiceSummary
    client: Optional[ClientContact] = None


# Payments

class PaymentIntentOut(CamelModel):
    client_secret: Optional[str] = None
    payment_intent_id: str
