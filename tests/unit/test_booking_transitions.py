"""Tests for the booking status state machine."""
import pytest

from barber_api.api.middleware.error_handler import BadRequestException, ForbiddenException
from barber_api.models.bookings import BookingStatus
from barber_api.services.booking_service import (
    BARBER_TRANSITIONS,
    TERMINAL_STATUSES,
    check_barber_transition,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    "current, target",
    [
        (BookingStatus.PENDING, BookingStatus.CONFIRMED),
        (BookingStatus.PENDING, BookingStatus.CANCELED),
        (BookingStatus.CONFIRMED, BookingStatus.COMPLETED),
        (BookingStatus.CONFIRMED, BookingStatus.NO_SHOW),
        (BookingStatus.CONFIRMED, BookingStatus.CANCELED),
    ],
)
def test_allowed_transitions(current, target):
    check_barber_transition(current, target)


@pytest.mark.unit
def test_pending_to_completed_is_rejected_with_allowed_list():
    """Skipping confirmation is a bad request listing the reachable states."""
    with pytest.raises(BadRequestException) as exc_info:
        check_barber_transition(BookingStatus.PENDING, BookingStatus.COMPLETED)

    exc = exc_info.value
    assert exc.status_code == 400
    assert exc.message == "From status PENDING you can only move to CONFIRMED or CANCELED"
    assert exc.details["current_status"] == "PENDING"
    assert exc.details["requested_status"] == "COMPLETED"
    assert exc.details["allowed_statuses"] == ["CONFIRMED", "CANCELED"]


@pytest.mark.unit
@pytest.mark.parametrize("target", [BookingStatus.PENDING, BookingStatus.NO_SHOW])
def test_other_disallowed_targets_from_pending(target):
    with pytest.raises(BadRequestException):
        check_barber_transition(BookingStatus.PENDING, target)


@pytest.mark.unit
def test_confirmed_cannot_go_back_to_pending():
    with pytest.raises(BadRequestException) as exc_info:
        check_barber_transition(BookingStatus.CONFIRMED, BookingStatus.PENDING)

    assert exc_info.value.details["allowed_statuses"] == ["COMPLETED", "NO_SHOW", "CANCELED"]


@pytest.mark.unit
@pytest.mark.parametrize("current", sorted(TERMINAL_STATUSES, key=lambda s: s.value))
@pytest.mark.parametrize("target", list(BookingStatus))
def test_terminal_statuses_are_immutable(current, target):
    """Every request against a terminal booking is forbidden, whatever the target."""
    with pytest.raises(ForbiddenException):
        check_barber_transition(current, target)


@pytest.mark.unit
def test_every_status_is_terminal_or_has_transitions():
    for status in BookingStatus:
        assert (status in TERMINAL_STATUSES) != (status in BARBER_TRANSITIONS)
