"""Booking store adapter.

Maps between the flattened ``bookings`` row and the nested booking entity.
Every mutating call is a single-row write committed on its own; no business
rules live here.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.booking_state import BookingStatus
from app.models.booking import Booking
from app.schemas.booking import BookingCreate, BookingResponse, Contact, Event


def _utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def row_to_booking(row: Booking) -> BookingResponse:
    """Map a database row to the booking entity."""
    return BookingResponse(
        id=row.id,
        created_at=_utc(row.created_at),
        updated_at=_utc(row.updated_at),
        org_id=row.org_id,
        status=BookingStatus(row.status),
        contact=Contact(name=row.contact_name, email=row.contact_email),
        event=Event(
            title=row.event_title,
            location_id=row.event_location_id,
            start=_utc(row.event_start),
            end=_utc(row.event_end),
            details=row.event_details,
        ),
        request_note=row.request_note or None,
    )


def _contact_columns(contact: Contact) -> dict[str, Any]:
    return {"contact_name": contact.name, "contact_email": contact.email}


def _event_columns(event: Event) -> dict[str, Any]:
    return {
        "event_title": event.title,
        "event_location_id": event.location_id,
        "event_start": event.start,
        "event_end": event.end,
        "event_details": event.details,
    }


class BookingStore:
    """SQLAlchemy-backed persistence for bookings."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _get_row(self, booking_id: UUID) -> Booking | None:
        result = await self.db.execute(select(Booking).where(Booking.id == booking_id))
        return result.scalar_one_or_none()

    async def get(self, booking_id: UUID) -> BookingResponse | None:
        row = await self._get_row(booking_id)
        return row_to_booking(row) if row else None

    async def list(
        self,
        status: BookingStatus | None = None,
        location_id: UUID | None = None,
    ) -> list[BookingResponse]:
        """List bookings ordered by creation time, oldest first."""
        query = select(Booking)
        if status is not None:
            query = query.where(Booking.status == status.value)
        if location_id is not None:
            query = query.where(Booking.event_location_id == location_id)
        query = query.order_by(Booking.created_at.asc(), Booking.id.asc())

        result = await self.db.execute(query)
        return [row_to_booking(row) for row in result.scalars().all()]

    async def insert(self, draft: BookingCreate, status: BookingStatus) -> BookingResponse:
        """Persist a new booking, assigning id and timestamps."""
        now = datetime.now(UTC)
        row = Booking(
            org_id=draft.org_id,
            status=status.value,
            request_note=draft.request_note,
            created_at=now,
            updated_at=now,
            **_contact_columns(draft.contact),
            **_event_columns(draft.event),
        )
        self.db.add(row)
        await self.db.commit()
        return row_to_booking(row)

    async def update(
        self,
        booking_id: UUID,
        *,
        status: BookingStatus | None = None,
        contact: Contact | None = None,
        event: Event | None = None,
        request_note: str | None = None,
    ) -> BookingResponse | None:
        """Apply entity-shaped changes to one row and refresh ``updated_at``."""
        row = await self._get_row(booking_id)
        if row is None:
            return None

        values: dict[str, Any] = {}
        if status is not None:
            values["status"] = status.value
        if contact is not None:
            values.update(_contact_columns(contact))
        if event is not None:
            values.update(_event_columns(event))
        if request_note is not None:
            values["request_note"] = request_note
        values["updated_at"] = datetime.now(UTC)

        for column, value in values.items():
            setattr(row, column, value)
        await self.db.commit()
        return row_to_booking(row)

    async def delete(self, booking_id: UUID) -> UUID | None:
        """Hard delete one row, returning its id."""
        row = await self._get_row(booking_id)
        if row is None:
            return None
        await self.db.delete(row)
        await self.db.commit()
        return booking_id
