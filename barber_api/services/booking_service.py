"""Booking service: creation, listings and the status state machine.

    PENDING ──> CONFIRMED ──> COMPLETED
       │            │──────> NO_SHOW
       └──> CANCELED <┘

COMPLETED, NO_SHOW and CANCELED are terminal. Every status write is a
single conditional UPDATE on the status that was read, so two concurrent
requests cannot both move the same booking.
"""
from datetime import datetime, timezone
from typing import Dict, FrozenSet, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from barber_api.api.middleware.error_handler import (
    BadRequestException,
    ConflictException,
    ForbiddenException,
    NotFoundException,
)
from barber_api.api.schemas import BarberSummary, BookingOut, ClientContact, ServiceSummary
from barber_api.lib.logging import get_logger
from barber_api.models.barbers import BarberProfile
from barber_api.models.bookings import Booking, BookingStatus
from barber_api.models.services import Service
from barber_api.models.users import User
from barber_api.services.barber_service import get_profile_for_user


logger = get_logger(__name__)

TERMINAL_STATUSES: FrozenSet[BookingStatus] = frozenset({
    BookingStatus.COMPLETED,
    BookingStatus.NO_SHOW,
    BookingStatus.CANCELED,
})

# Targets a barber may request from each non-terminal status
BARBER_TRANSITIONS: Dict[BookingStatus, Tuple[BookingStatus, ...]] = {
    BookingStatus.PENDING: (BookingStatus.CONFIRMED, BookingStatus.CANCELED),
    BookingStatus.CONFIRMED: (BookingStatus.COMPLETED, BookingStatus.NO_SHOW, BookingStatus.CANCELED),
}

CLIENT_CANCELABLE: FrozenSet[BookingStatus] = frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED})


def check_barber_transition(current: BookingStatus, target: BookingStatus) -> None:
    """Validate a status change requested on the operator path.

    Raises:
        ForbiddenException: If the booking is already in a terminal status
        BadRequestException: If `target` is not reachable from `current`
    """
    if current in TERMINAL_STATUSES:
        raise ForbiddenException("This booking is already finalized and can no longer be modified")

    allowed = BARBER_TRANSITIONS.get(current)
    if allowed is None:
        raise BadRequestException(f"Bookings in status {current.value} cannot be modified")

    if target not in allowed:
        names = [status.value for status in allowed]
        raise BadRequestException(
            f"From status {current.value} you can only move to {' or '.join(names)}",
            details={
                "current_status": current.value,
                "requested_status": target.value,
                "allowed_statuses": names,
            },
        )


class BookingService:
    """Reservations between clients and barbers."""

    def __init__(self, session: Session):
        self.session = session

    def create_booking(
        self,
        client_id: UUID,
        barber_id: UUID,
        service_id: UUID,
        scheduled_at: datetime,
    ) -> BookingOut:
        """Book a service, snapshotting its current price.

        Raises:
            NotFoundException: If the service does not exist
            BadRequestException: If the service is not offered by that barber
        """
        service = self.session.get(Service, service_id)
        if service is None:
            raise NotFoundException("Service", str(service_id))

        if service.barber_id != barber_id:
            raise BadRequestException(
                "This service does not belong to the selected barber",
                details={"barber_id": str(barber_id), "service_id": str(service_id)},
            )

        if scheduled_at.tzinfo is None:
            scheduled_at = scheduled_at.replace(tzinfo=timezone.utc)

        booking = Booking(
            client_id=client_id,
            barber_id=barber_id,
            service_id=service_id,
            scheduled_at=scheduled_at,
            status=BookingStatus.PENDING,
            total_price_cents=service.price_cents,
        )
        self.session.add(booking)
        self.session.commit()

        logger.info(
            "Booking created",
            extra={
                "booking_id": str(booking.id),
                "barber_id": str(barber_id),
                "total_price_cents": booking.total_price_cents,
            },
        )
        return self.get_booking(booking.id)

    def get_booking(self, booking_id: UUID, include_client: bool = False) -> BookingOut:
        bookings = self._load(Booking.id == booking_id, include_client=include_client)
        if not bookings:
            raise NotFoundException("Booking", str(booking_id))
        return bookings[0]

    def list_for_client(self, client_id: UUID) -> List[BookingOut]:
        """The client's bookings, soonest first."""
        return self._load(Booking.client_id == client_id)

    def list_for_barber_user(self, user_id: UUID) -> List[BookingOut]:
        """Bookings of the caller's barber profile, with client contact info.

        Raises:
            ForbiddenException: If the caller has no barber profile
        """
        profile = get_profile_for_user(self.session, user_id)
        if profile is None:
            raise ForbiddenException("This account is not set up as a barber")
        return self._load(Booking.barber_id == profile.id, include_client=True)

    def cancel_booking(self, booking_id: UUID, client_id: UUID) -> BookingOut:
        """Cancel one of the client's own non-terminal bookings.

        Raises:
            NotFoundException: If the booking does not exist
            ForbiddenException: If it belongs to another client or is already closed
            ConflictException: If its status changed concurrently
        """
        booking = self.session.get(Booking, booking_id)
        if booking is None:
            raise NotFoundException("Booking", str(booking_id))

        if booking.client_id != client_id:
            raise ForbiddenException("You can only cancel your own bookings")

        if booking.status not in CLIENT_CANCELABLE:
            raise ForbiddenException("This booking can no longer be canceled")

        self._compare_and_set_status(booking, BookingStatus.CANCELED)
        return self.get_booking(booking_id)

    def update_status_for_barber(
        self,
        barber_user_id: UUID,
        booking_id: UUID,
        new_status: BookingStatus,
    ) -> BookingOut:
        """Move a booking of the caller's profile along the state machine.

        Raises:
            NotFoundException: If the caller has no profile or the booking does not exist
            ForbiddenException: If the booking belongs to another barber or is terminal
            BadRequestException: If the transition is not allowed
            ConflictException: If its status changed concurrently
        """
        profile = get_profile_for_user(self.session, barber_user_id)
        if profile is None:
            raise NotFoundException("Barber profile")

        booking = self.session.get(Booking, booking_id)
        if booking is None:
            raise NotFoundException("Booking", str(booking_id))

        if booking.barber_id != profile.id:
            raise ForbiddenException("You can only modify your own appointments")

        check_barber_transition(booking.status, new_status)

        self._compare_and_set_status(booking, new_status)
        return self.get_booking(booking_id, include_client=True)

    def _compare_and_set_status(self, booking: Booking, new_status: BookingStatus) -> None:
        expected = booking.status
        result = self.session.execute(
            update(Booking)
            .where(Booking.id == booking.id, Booking.status == expected)
            .values(status=new_status, updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        self.session.commit()

        if result.rowcount != 1:
            self.session.refresh(booking)
            logger.warning(
                "Concurrent booking status change detected",
                extra={
                    "booking_id": str(booking.id),
                    "expected_status": expected.value,
                    "actual_status": booking.status.value,
                },
            )
            raise ConflictException(
                "Booking status was changed by another request; reload and try again",
                details={"current_status": booking.status.value},
            )

        logger.info(
            "Booking status changed",
            extra={
                "booking_id": str(booking.id),
                "from_status": expected.value,
                "to_status": new_status.value,
            },
        )

    def _load(self, condition, include_client: bool = False) -> List[BookingOut]:
        stmt = (
            select(Booking, BarberProfile, Service, User)
            .join(BarberProfile, BarberProfile.id == Booking.barber_id)
            .join(Service, Service.id == Booking.service_id)
            .join(User, User.id == Booking.client_id)
            .where(condition)
            .order_by(Booking.scheduled_at, Booking.id)
            .execution_options(populate_existing=True)
        )
        return [
            self._to_booking_out(booking, barber, service, client if include_client else None)
            for booking, barber, service, client in self.session.execute(stmt)
        ]

    @staticmethod
    def _to_booking_out(
        booking: Booking,
        barber: BarberProfile,
        service: Service,
        client: Optional[User],
    ) -> BookingOut:
        return BookingOut(
            id=booking.id,
            client_id=booking.client_id,
            barber_id=booking.barber_id,
            service_id=booking.service_id,
            scheduled_at=booking.scheduled_at,
            status=booking.status,
            total_price_cents=booking.total_price_cents,
            stripe_payment_intent_id=booking.stripe_payment_intent_id,
            created_at=booking.created_at,
            barber=BarberSummary.model_validate(barber),
            service=ServiceSummary.model_validate(service),
            client=ClientContact.model_validate(client) if client is not None else None,
        )
