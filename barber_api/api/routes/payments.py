"""
Payment routes.
"""
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from barber_api.api.dependencies import get_current_user, get_db, get_provider
from barber_api.api.schemas import PaymentIntentOut
from barber_api.models.users import User
from barber_api.services.payment_provider import PaymentProvider
from barber_api.services.payment_service import PaymentService


router = APIRouter(prefix="/payments", tags=["Payments"])


def get_payment_service(
    db: Session = Depends(get_db),
    provider: PaymentProvider = Depends(get_provider),
) -> PaymentService:
    return PaymentService(db, provider)


@router.post(
    "/bookings/{booking_id}/intent",
    response_model=PaymentIntentOut,
    summary="Create or reuse the payment intent of a booking",
)
def create_intent_for_booking(
    booking_id: UUID,
    user: User = Depends(get_current_user),
    payment_service: PaymentService = Depends(get_payment_service),
):
    """
    Returns the client secret to confirm payment on the device.

    Repeated calls return the same intent while it is still payable.

    Raises:
        403: Not the caller's booking
        404: Booking not found
        502: Payment provider failure
    """
    return payment_service.create_intent_for_booking(booking_id, user.id)
