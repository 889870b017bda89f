"""Booking conflict detection.

A booking request conflicts with an existing booking when both target the
same location and their ``[start, end)`` intervals overlap. Only approved
bookings hold a location; pending, denied and cancelled requests never block
a new one. Intervals that merely touch (one ends exactly when the other
starts) do not conflict.
"""

from collections.abc import Iterable
from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from app.domain.booking_state import BookingStatus

if TYPE_CHECKING:
    from app.schemas.booking import BookingResponse, Event


def intervals_overlap(
    a_start: datetime,
    a_end: datetime,
    b_start: datetime,
    b_end: datetime,
) -> bool:
    """Check whether new interval ``a`` overlaps existing interval ``b``."""
    return (
        # a starts inside b
        (b_start <= a_start < b_end)
        # a ends inside b
        or (b_start < a_end <= b_end)
        # a covers b
        or (a_start <= b_start and a_end >= b_end)
    )


def blocks_location(booking: "BookingResponse") -> bool:
    return booking.status == BookingStatus.APPROVED


def find_conflict(
    event: "Event",
    bookings: Iterable["BookingResponse"],
    exclude_id: UUID | None = None,
) -> "BookingResponse | None":
    """Return the first approved booking that the event would collide with.

    Args:
        event: Requested event (location and interval)
        bookings: Candidate existing bookings
        exclude_id: Booking to ignore, used when re-checking an edited booking

    Returns:
        The blocking booking, or None if the slot is free
    """
    for existing in bookings:
        if exclude_id is not None and existing.id == exclude_id:
            continue
        if not blocks_location(existing):
            continue
        if existing.event.location_id != event.location_id:
            continue
        if intervals_overlap(event.start, event.end, existing.event.start, existing.event.end):
            return existing
    return None
