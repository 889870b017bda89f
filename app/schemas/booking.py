"""Booking-related Pydantic schemas."""

from datetime import UTC, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from app.domain.booking_state import BookingStatus


def as_utc(value: datetime) -> datetime:
    """Treat naive timestamps as UTC and normalize aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class CamelModel(BaseModel):
    """Base schema serialized with camelCase keys, accepting either casing on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Contact(CamelModel):
    """Person who requested the booking."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name must not be blank")
        return v


class Event(CamelModel):
    """Event to be held at a location over ``[start, end)``."""

    title: str = Field(..., min_length=1, max_length=255)
    location_id: UUID
    start: datetime
    end: datetime
    details: str = ""

    @field_validator("start", "end")
    @classmethod
    def normalize_timestamp(cls, v: datetime) -> datetime:
        return as_utc(v)

    @model_validator(mode="after")
    def validate_interval(self) -> "Event":
        if self.start >= self.end:
            raise ValueError("event start must precede event end")
        return self


class BookingCreate(CamelModel):
    """Schema for creating a booking."""

    org_id: UUID
    contact: Contact
    event: Event
    request_note: str | None = Field(None, max_length=2000)


class ContactUpdate(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    email: EmailStr | None = None


class EventUpdate(CamelModel):
    title: str | None = Field(None, min_length=1, max_length=255)
    location_id: UUID | None = None
    start: datetime | None = None
    end: datetime | None = None
    details: str | None = None

    @field_validator("start", "end")
    @classmethod
    def normalize_timestamp(cls, v: datetime | None) -> datetime | None:
        return as_utc(v) if v is not None else None


class BookingUpdate(CamelModel):
    """Schema for partially editing a booking."""

    contact: ContactUpdate | None = None
    event: EventUpdate | None = None
    request_note: str | None = Field(None, max_length=2000)


class BookingResponse(CamelModel):
    """Booking entity as returned by the store and the API."""

    id: UUID
    created_at: datetime
    updated_at: datetime
    org_id: UUID
    status: BookingStatus
    contact: Contact
    event: Event
    request_note: str | None = None


class BookingDeleteResponse(CamelModel):
    """Schema for a deleted booking."""

    deleted_id: UUID
