"""
Service model - bookable offerings owned by a barber profile.
"""
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import String, Integer, ForeignKey, Uuid, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column

from barber_api.lib.db import Base


class Service(Base):
    """
    Service entity - a haircut type or similar with fixed duration and price.
    """
    __tablename__ = "services"

    id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid4,
    )

    # Owner; never reassigned after creation
    barber_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("barber_profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)

    duration_min: Mapped[int] = mapped_column(Integer, nullable=False)
    price_cents: Mapped[int] = mapped_column(Integer, nullable=False)

    image_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)

    __table_args__ = (
        CheckConstraint("price_cents >= 0", name="service_price_non_negative"),
        CheckConstraint("duration_min > 0", name="service_duration_positive"),
    )

    def __repr__(self) -> str:
        return f"<Service(id={self.id}, name={self.name}, price_cents={self.price_cents})>"
