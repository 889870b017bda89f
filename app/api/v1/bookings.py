"""Booking endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status

from app.api.deps import get_booking_service
from app.schemas.booking import (
    BookingCreate,
    BookingDeleteResponse,
    BookingResponse,
    BookingUpdate,
)
from app.services.booking_service import BookingService

router = APIRouter()

Service = Annotated[BookingService, Depends(get_booking_service)]


@router.get("/", response_model=list[BookingResponse])
async def list_bookings(service: Service) -> list[BookingResponse]:
    """List all bookings, oldest first."""
    return await service.list_bookings()


@router.post("/", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(booking_data: BookingCreate, service: Service) -> BookingResponse:
    """Create a booking request.

    Requests that overlap an approved booking at the same location are
    recorded with status DENIED.
    """
    return await service.create_booking(booking_data)


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(booking_id: UUID, service: Service) -> BookingResponse:
    """Get a booking by ID."""
    return await service.get_booking(booking_id)


@router.patch("/{booking_id}", response_model=BookingResponse)
async def edit_booking(
    booking_id: UUID,
    changes: BookingUpdate,
    service: Service,
) -> BookingResponse:
    """Edit contact, event or request note of a booking."""
    return await service.edit_booking(booking_id, changes)


@router.post("/{booking_id}/approve", response_model=BookingResponse)
async def approve_booking(booking_id: UUID, service: Service) -> BookingResponse:
    """Approve a pending booking and email the requester."""
    return await service.approve_booking(booking_id)


@router.delete("/{booking_id}", response_model=BookingDeleteResponse)
async def delete_booking(booking_id: UUID, service: Service) -> BookingDeleteResponse:
    """Delete a booking permanently."""
    deleted_id = await service.delete_booking(booking_id)
    return BookingDeleteResponse(deleted_id=deleted_id)
