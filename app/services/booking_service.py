"""Booking lifecycle service.

Owns the rules around a booking: creation-time validation and conflict
detection, the approval state machine, edits and deletion. Persistence and
email delivery are injected so the service can be driven with test doubles.
"""

import logging
from collections.abc import Mapping
from typing import Any, TypeVar
from uuid import UUID

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from app.core.exceptions import InvalidStateError, NotFoundError, NotificationError, ValidationError
from app.domain.booking_conflicts import find_conflict
from app.domain.booking_state import BookingStatus, assert_booking_transition
from app.schemas.booking import BookingCreate, BookingResponse, BookingUpdate, Contact, Event
from app.services.booking_store import BookingStore
from app.services.notification_service import ApprovalNotifier

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _parse(model: type[ModelT], data: ModelT | Mapping[str, Any]) -> ModelT:
    """Validate raw input into ``model``, raising the API validation error."""
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(
            "Validation failed",
            errors=e.errors(include_url=False, include_context=False),
        ) from e


class BookingService:
    """Create, approve, edit and delete bookings."""

    def __init__(self, store: BookingStore, notifier: ApprovalNotifier) -> None:
        self.store = store
        self.notifier = notifier

    async def list_bookings(self) -> list[BookingResponse]:
        return await self.store.list()

    async def get_booking(self, booking_id: UUID) -> BookingResponse:
        booking = await self.store.get(booking_id)
        if booking is None:
            raise NotFoundError("Booking", str(booking_id))
        return booking

    async def create_booking(self, draft: BookingCreate | Mapping[str, Any]) -> BookingResponse:
        """Record a booking request.

        A request overlapping an approved booking at the same location is
        still stored, but as DENIED rather than rejected.

        Args:
            draft: Booking request, validated or raw

        Returns:
            BookingResponse: The persisted booking

        Raises:
            ValidationError: If the request is malformed
        """
        data = _parse(BookingCreate, draft)

        conflict = await self._find_conflict(data.event)
        status = BookingStatus.DENIED if conflict else BookingStatus.PENDING
        booking = await self.store.insert(data, status)

        if conflict:
            logger.info(
                f"Booking recorded as denied, overlaps approved booking {conflict.id}",
                extra={
                    "booking_id": str(booking.id),
                    "status": booking.status.value,
                    "location_id": str(data.event.location_id),
                },
            )
        else:
            logger.info(
                "Booking created",
                extra={"booking_id": str(booking.id), "status": booking.status.value},
            )
        return booking

    async def approve_booking(self, booking_id: UUID) -> BookingResponse:
        """Approve a pending booking and email the requester.

        The approval is committed before the email is attempted; a failed
        email raises NotificationError but leaves the booking APPROVED.

        Raises:
            NotFoundError: If the booking does not exist
            InvalidStateError: If the booking is not pending or overlaps
                an approved booking at the same location
            NotificationError: If the approval email could not be sent
        """
        booking = await self.get_booking(booking_id)
        assert_booking_transition(
            booking.status,
            BookingStatus.APPROVED,
            detail="Cannot approve booking: not pending",
        )
        conflict = await self._find_conflict(booking.event, exclude_id=booking.id)
        if conflict is not None:
            logger.info(
                f"Approval refused, overlaps approved booking {conflict.id}",
                extra={"booking_id": str(booking_id), "location_id": str(booking.event.location_id)},
            )
            raise InvalidStateError("Cannot approve booking: overlaps an approved booking")

        approved = await self.store.update(booking_id, status=BookingStatus.APPROVED)
        if approved is None:
            raise NotFoundError("Booking", str(booking_id))
        logger.info("Booking approved", extra={"booking_id": str(booking_id), "status": approved.status.value})

        detail = "Booking approved but the approval email could not be sent"
        try:
            sent = await self.notifier.send_approval(approved)
        except Exception as e:
            logger.exception("Approval notification raised", extra={"booking_id": str(booking_id)})
            raise NotificationError(detail, booking=approved) from e
        if not sent:
            logger.error("Approval notification failed", extra={"booking_id": str(booking_id)})
            raise NotificationError(detail, booking=approved)

        return approved

    async def edit_booking(
        self,
        booking_id: UUID,
        changes: BookingUpdate | Mapping[str, Any],
    ) -> BookingResponse:
        """Partially update contact, event or request note.

        Event changes are only allowed while the booking is pending, and a
        pending booking moved onto an approved slot becomes DENIED.

        Raises:
            NotFoundError: If the booking does not exist
            ValidationError: If the merged booking is malformed
            InvalidStateError: If the event is edited on a non-pending booking
        """
        update = _parse(BookingUpdate, changes)
        booking = await self.get_booking(booking_id)

        contact = None
        if update.contact is not None:
            contact = _parse(
                Contact,
                {**booking.contact.model_dump(), **update.contact.model_dump(exclude_unset=True)},
            )

        event = None
        status = None
        if update.event is not None:
            if booking.status != BookingStatus.PENDING:
                raise InvalidStateError("Cannot change event: booking is not pending")
            event = _parse(
                Event,
                {**booking.event.model_dump(), **update.event.model_dump(exclude_unset=True)},
            )
            conflict = await self._find_conflict(event, exclude_id=booking.id)
            if conflict is not None:
                assert_booking_transition(booking.status, BookingStatus.DENIED)
                status = BookingStatus.DENIED
                logger.info(
                    f"Edited booking overlaps approved booking {conflict.id}, marking denied",
                    extra={"booking_id": str(booking_id), "location_id": str(event.location_id)},
                )

        updated = await self.store.update(
            booking_id,
            status=status,
            contact=contact,
            event=event,
            request_note=update.request_note,
        )
        if updated is None:
            raise NotFoundError("Booking", str(booking_id))
        logger.info("Booking edited", extra={"booking_id": str(booking_id), "status": updated.status.value})
        return updated

    async def delete_booking(self, booking_id: UUID) -> UUID:
        """Hard delete a booking regardless of status."""
        deleted_id = await self.store.delete(booking_id)
        if deleted_id is None:
            raise NotFoundError("Booking", str(booking_id))
        logger.info("Booking deleted", extra={"booking_id": str(booking_id)})
        return deleted_id

    async def _find_conflict(
        self,
        event: Event,
        exclude_id: UUID | None = None,
    ) -> BookingResponse | None:
        approved = await self.store.list(status=BookingStatus.APPROVED, location_id=event.location_id)
        return find_conflict(event, approved, exclude_id=exclude_id)
