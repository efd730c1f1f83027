"""
Booking routes.

Clients create, list and cancel their bookings; barbers list the bookings
of their profile and move them along the status state machine.
"""
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from barber_api.api.dependencies import get_current_user, get_db, require_roles
from barber_api.api.schemas import BookingCreateRequest, BookingOut, BookingStatusUpdateRequest
from barber_api.models.users import User, UserRole
from barber_api.services.booking_service import BookingService


router = APIRouter(prefix="/bookings", tags=["Bookings"])


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    return BookingService(db)


@router.post(
    "",
    response_model=BookingOut,
    status_code=status.HTTP_201_CREATED,
    summary="Book a service",
)
def create_booking(
    request: BookingCreateRequest,
    user: User = Depends(get_current_user),
    booking_service: BookingService = Depends(get_booking_service),
):
    """
    Create a PENDING booking for the caller.

    The price is copied from the service at this moment and never changes
    afterwards.

    Raises:
        404: Service not found
        400: Service not offered by that barber
    """
    return booking_service.create_booking(
        client_id=user.id,
        barber_id=request.barber_id,
        service_id=request.service_id,
        scheduled_at=request.scheduled_at,
    )


@router.get("/me", response_model=List[BookingOut], summary="My bookings")
def list_my_bookings(
    user: User = Depends(get_current_user),
    booking_service: BookingService = Depends(get_booking_service),
):
    return booking_service.list_for_client(user.id)


@router.get("/barber/me", response_model=List[BookingOut], summary="Bookings of my barber profile")
def list_barber_bookings(
    user: User = Depends(require_roles(UserRole.BARBER)),
    booking_service: BookingService = Depends(get_booking_service),
):
    """Bookings with client contact info, soonest first."""
    return booking_service.list_for_barber_user(user.id)


@router.patch("/{booking_id}/cancel", response_model=BookingOut, summary="Cancel my booking")
def cancel_booking(
    booking_id: UUID,
    user: User = Depends(get_current_user),
    booking_service: BookingService = Depends(get_booking_service),
):
    """
    Cancel a PENDING or CONFIRMED booking owned by the caller.

    Raises:
        403: Not the caller's booking, or already closed
        404: Booking not found
        409: Status changed concurrently
    """
    return booking_service.cancel_booking(booking_id, user.id)


@router.patch("/{booking_id}/status", response_model=BookingOut, summary="Change booking status")
def update_booking_status(
    booking_id: UUID,
    request: BookingStatusUpdateRequest,
    user: User = Depends(require_roles(UserRole.BARBER)),
    booking_service: BookingService = Depends(get_booking_service),
):
    """
    Allowed moves: PENDING → CONFIRMED | CANCELED,
    CONFIRMED → COMPLETED | NO_SHOW | CANCELED.

    Raises:
        400: Transition not allowed from the current status
        403: Booking of another barber, or already finalized
        404: Booking or barber profile not found
        409: Status changed concurrently
    """
    return booking_service.update_status_for_barber(user.id, booking_id, request.status)
