"""
Row factories for tests. Each helper commits its rows and returns detached
instances whose attributes stay loaded.
"""
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from barber_api.lib.db import get_db_context
from barber_api.lib.jwt import create_access_token
from barber_api.lib.security import hash_password
from barber_api.models import BarberProfile, Booking, BookingStatus, Review, Service, User, UserRole


TEST_PASSWORD = "secret123"

# One bcrypt round per test run
_PASSWORD_HASH = hash_password(TEST_PASSWORD)


def make_user(
    email: str = "client@example.com",
    full_name: str = "Test Client",
    role: UserRole = UserRole.CLIENT,
    phone: Optional[str] = None,
) -> User:
    with get_db_context() as db:
        user = User(email=email, password=_PASSWORD_HASH, full_name=full_name, phone=phone, role=role)
        db.add(user)
    return user


def make_barber(
    user: Optional[User] = None,
    shop_name: str = "Fade Master Studio",
    city: str = "Montreal",
    postal_code: str = "H2X 1Y4",
    **fields,
) -> BarberProfile:
    if user is None:
        user = make_user(email=f"{shop_name.lower().replace(' ', '.')}@example.com", full_name=shop_name, role=UserRole.BARBER)

    with get_db_context() as db:
        profile = BarberProfile(
            user_id=user.id,
            shop_name=shop_name,
            address_line1=fields.pop("address_line1", "123 Rue Saint-Urbain"),
            city=city,
            province=fields.pop("province", "QC"),
            postal_code=postal_code,
            **fields,
        )
        db.add(profile)
    return profile


def make_service(
    barber: BarberProfile,
    name: str = "Fade + finishing",
    price_cents: int = 3500,
    duration_min: int = 45,
) -> Service:
    with get_db_context() as db:
        service = Service(barber_id=barber.id, name=name, price_cents=price_cents, duration_min=duration_min)
        db.add(service)
    return service


def make_booking(
    client: User,
    service: Service,
    status: BookingStatus = BookingStatus.PENDING,
    scheduled_at: Optional[datetime] = None,
    total_price_cents: Optional[int] = None,
) -> Booking:
    if scheduled_at is None:
        scheduled_at = datetime.now(timezone.utc) + timedelta(days=1)

    with get_db_context() as db:
        booking = Booking(
            client_id=client.id,
            barber_id=service.barber_id,
            service_id=service.id,
            scheduled_at=scheduled_at,
            status=status,
            total_price_cents=service.price_cents if total_price_cents is None else total_price_cents,
        )
        db.add(booking)
    return booking


def make_review(client: User, barber: BarberProfile, rating: int, comment: Optional[str] = None) -> Review:
    with get_db_context() as db:
        review = Review(client_id=client.id, barber_id=barber.id, rating=rating, comment=comment)
        db.add(review)
    return review


def auth_headers(user: User) -> Dict[str, str]:
    token = create_access_token(user_id=str(user.id), email=user.email, role=user.role.value)
    return {"Authorization": f"Bearer {token}"}
