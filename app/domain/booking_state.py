"""Booking state machine."""

from enum import Enum

from app.core.exceptions import InvalidStateError


class BookingStatus(str, Enum):
    """Booking status, stored by name."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    DENIED = "DENIED"
    CANCELLED = "CANCELLED"


BOOKING_TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.APPROVED, BookingStatus.DENIED},
    BookingStatus.APPROVED: set(),
    BookingStatus.DENIED: set(),
    BookingStatus.CANCELLED: set(),
}


def can_transition(current: BookingStatus, target: BookingStatus) -> bool:
    return target in BOOKING_TRANSITIONS.get(current, set())


def assert_booking_transition(
    current: BookingStatus,
    target: BookingStatus,
    detail: str | None = None,
) -> None:
    if not can_transition(current, target):
        raise InvalidStateError(
            detail or f"Invalid booking transition: {current.value} → {target.value}"
        )
