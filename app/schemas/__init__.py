"""Pydantic schemas for request/response validation."""

from app.schemas.booking import (
    BookingCreate,
    BookingDeleteResponse,
    BookingResponse,
    BookingUpdate,
    Contact,
    ContactUpdate,
    Event,
    EventUpdate,
)

__all__ = [
    # Booking
    "BookingCreate",
    "BookingDeleteResponse",
    "BookingResponse",
    "BookingUpdate",
    "Contact",
    "ContactUpdate",
    "Event",
    "EventUpdate",
]
