"""Load demo data: one Montreal barber with three services.

Usage:
    python -m barber_api.seed [--reset]
"""
import argparse

from sqlalchemy import delete, select

from barber_api.lib.db import get_db_context, init_db
from barber_api.lib.logging import get_logger
from barber_api.lib.security import hash_password
from barber_api.models import BarberProfile, Booking, Review, Service, User, UserRole


logger = get_logger(__name__)

DEMO_BARBER_EMAIL = "barber.montreal@example.com"
DEMO_PASSWORD = "barber-demo"

DEMO_SERVICES = [
    {
        "name": "Fade + finishing",
        "description": "Clean fade, sharp lines and a scissor finish.",
        "duration_min": 45,
        "price_cents": 3500,
        "image_url": "https://images.pexels.com/photos/3998426/pexels-photo-3998426.jpeg",
    },
    {
        "name": "Haircut + full beard",
        "description": "Haircut plus full beard trim, outline and razor finish.",
        "duration_min": 60,
        "price_cents": 5000,
        "image_url": "https://images.pexels.com/photos/1453005/pexels-photo-1453005.jpeg",
    },
    {
        "name": "Traditional shave",
        "description": "Old-school hot towel shave.",
        "duration_min": 30,
        "price_cents": 2800,
        "image_url": "https://images.pexels.com/photos/3998405/pexels-photo-3998405.jpeg",
    },
]


def seed(reset: bool = False) -> None:
    init_db()

    with get_db_context() as db:
        if reset:
            for model in (Review, Booking, Service, BarberProfile, User):
                db.execute(delete(model))

        existing = db.execute(
            select(User).where(User.email == DEMO_BARBER_EMAIL)
        ).scalar_one_or_none()
        if existing is not None:
            logger.info("Demo data already present", extra={"user_id": str(existing.id)})
            return

        barber_user = User(
            email=DEMO_BARBER_EMAIL,
            password=hash_password(DEMO_PASSWORD),
            full_name="Fade Master Montreal",
            phone="514-555-1234",
            role=UserRole.BARBER,
        )
        db.add(barber_user)
        db.flush()

        profile = BarberProfile(
            user_id=barber_user.id,
            shop_name="Fade Master Studio",
            description="Barbershop specialized in fades, precise outlines and beard care.",
            phone="514-555-1234",
            address_line1="123 Rue Saint-Urbain",
            city="Montréal",
            province="QC",
            postal_code="H2X 1Y4",
            latitude=45.509,
            longitude=-73.57,
        )
        db.add(profile)
        db.flush()

        for data in DEMO_SERVICES:
            db.add(Service(barber_id=profile.id, **data))

        logger.info("Demo data loaded", extra={"barber_id": str(profile.id)})


def main() -> None:
    parser = argparse.ArgumentParser(description="Load demo barber data")
    parser.add_argument("--reset", action="store_true", help="Delete all rows before seeding")
    args = parser.parse_args()
    seed(reset=args.reset)


if __name__ == "__main__":
    main()
