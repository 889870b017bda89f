"""API dependencies wiring the booking service to its collaborators."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.services.booking_service import BookingService
from app.services.booking_store import BookingStore
from app.services.notification_service import ApprovalNotifier, notification_service


def get_notifier() -> ApprovalNotifier:
    """Shared notifier; overridden in tests."""
    return notification_service


async def get_booking_store(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BookingStore:
    return BookingStore(db)


async def get_booking_service(
    store: Annotated[BookingStore, Depends(get_booking_store)],
    notifier: Annotated[ApprovalNotifier, Depends(get_notifier)],
) -> BookingService:
    """Build a booking service bound to the request's session."""
    return BookingService(store=store, notifier=notifier)
