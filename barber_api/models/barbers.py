"""
BarberProfile model - the barbershop business entity (1:1 with a User).
"""
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import String, Float, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from barber_api.lib.db import Base


class BarberProfile(Base):
    """
    Barber profile - shop metadata and address of a barber user.
    Latitude/longitude are stored but search is purely string based.
    """
    __tablename__ = "barber_profiles"

    id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid4,
    )

    user_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )

    shop_name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(2000), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)

    # Address
    address_line1: Mapped[str] = mapped_column(String(255), nullable=False)
    address_line2: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    city: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    province: Mapped[str] = mapped_column(String(100), nullable=False)
    # Stored upper-cased so prefix search is case-insensitive
    postal_code: Mapped[str] = mapped_column(String(20), nullable=False, index=True)

    latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    def __repr__(self) -> str:
        return f"<BarberProfile(id={self.id}, shop_name={self.shop_name}, city={self.city})>"
