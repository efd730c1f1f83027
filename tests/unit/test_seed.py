"""Tests for the demo data command."""
import pytest
from sqlalchemy import func, select

from barber_api.lib.db import get_db_context
from barber_api.lib.security import verify_password
from barber_api.models import BarberProfile, Service, User, UserRole
from barber_api.seed import DEMO_BARBER_EMAIL, DEMO_PASSWORD, seed


def _count(model):
    with get_db_context() as db:
        return db.execute(select(func.count()).select_from(model)).scalar_one()


@pytest.mark.unit
def test_seed_loads_demo_barber():
    seed()

    with get_db_context() as db:
        user = db.execute(select(User).where(User.email == DEMO_BARBER_EMAIL)).scalar_one()
        profile = db.execute(select(BarberProfile).where(BarberProfile.user_id == user.id)).scalar_one()
        prices = sorted(db.execute(select(Service.price_cents)).scalars())

    assert user.role == UserRole.BARBER
    assert verify_password(DEMO_PASSWORD, user.password)
    assert profile.postal_code == "H2X 1Y4"
    assert prices == [2800, 3500, 5000]


@pytest.mark.unit
def test_seed_is_idempotent():
    seed()
    seed()

    assert _count(User) == 1
    assert _count(Service) == 3


@pytest.mark.unit
def test_seed_reset_replaces_rows():
    seed()
    with get_db_context() as db:
        db.add(User(email="extra@example.com", password="x", full_name="Extra", role=UserRole.CLIENT))

    seed(reset=True)

    assert _count(User) == 1
    assert _count(BarberProfile) == 1
