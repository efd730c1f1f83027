"""Payment bridge between bookings and external payment intents.

At most one live intent exists per booking: a non-terminal intent is
reused, a terminal one is replaced. The amount always comes from the
booking's price snapshot, never from the caller.
"""
from typing import Optional
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.orm import Session

from barber_api.api.middleware.error_handler import (
    BadRequestException,
    ForbiddenException,
    NotFoundException,
)
from barber_api.api.schemas import PaymentIntentOut
from barber_api.lib.logging import get_logger
from barber_api.lib.settings import settings
from barber_api.models.bookings import Booking
from barber_api.services.payment_provider import PaymentIntent, PaymentProvider


logger = get_logger(__name__)


class PaymentService:
    """Creates or reuses the payment intent of a booking."""

    def __init__(self, session: Session, provider: PaymentProvider):
        self.session = session
        self.provider = provider

    def create_intent_for_booking(self, booking_id: UUID, user_id: UUID) -> PaymentIntentOut:
        """Return a client-usable payment handle for the booking.

        Raises:
            NotFoundException: If the booking does not exist
            ForbiddenException: If the caller is not the booking's client
            BadRequestException: If the booking amount is not payable
            PaymentProviderException: If the provider call fails
        """
        booking = self.session.get(Booking, booking_id, populate_existing=True)
        if booking is None:
            raise NotFoundException("Booking", str(booking_id))

        if booking.client_id != user_id:
            raise ForbiddenException("You can only pay for your own bookings")

        if booking.total_price_cents <= 0:
            raise BadRequestException("Invalid amount for this booking")

        previous_id = booking.stripe_payment_intent_id
        if previous_id:
            existing = self.provider.retrieve_intent(previous_id)
            if not existing.is_terminal:
                logger.info(
                    "Reusing payment intent",
                    extra={"booking_id": str(booking.id), "payment_intent_id": existing.id},
                )
                return self._to_out(existing)

        intent = self.provider.create_intent(
            amount_cents=booking.total_price_cents,
            currency=settings.stripe_currency,
            metadata={"bookingId": str(booking.id), "clientId": str(booking.client_id)},
        )

        if not self._store_intent_id(booking, previous_id, intent.id):
            # Another request attached its own intent first; keep theirs
            self.provider.cancel_intent(intent.id)
            self.session.refresh(booking)
            logger.warning(
                "Discarded duplicate payment intent",
                extra={
                    "booking_id": str(booking.id),
                    "discarded_intent_id": intent.id,
                    "payment_intent_id": booking.stripe_payment_intent_id,
                },
            )
            return self._to_out(self.provider.retrieve_intent(booking.stripe_payment_intent_id))

        logger.info(
            "Payment intent created",
            extra={
                "booking_id": str(booking.id),
                "payment_intent_id": intent.id,
                "amount_cents": intent.amount,
            },
        )
        return self._to_out(intent)

    def _store_intent_id(self, booking: Booking, previous_id: Optional[str], new_id: str) -> bool:
        if previous_id is None:
            guard = Booking.stripe_payment_intent_id.is_(None)
        else:
            guard = Booking.stripe_payment_intent_id == previous_id

        result = self.session.execute(
            update(Booking)
            .where(Booking.id == booking.id, guard)
            .values(stripe_payment_intent_id=new_id)
            .execution_options(synchronize_session=False)
        )
        self.session.commit()
        return result.rowcount == 1

    @staticmethod
    def _to_out(intent: PaymentIntent) -> PaymentIntentOut:
        return PaymentIntentOut(client_secret=intent.client_secret, payment_intent_id=intent.id)
