"""Booking lifecycle service tests."""

import uuid

import httpx
import pytest

from app.core.exceptions import InvalidStateError, NotFoundError, NotificationError, ValidationError
from app.domain.booking_state import BookingStatus
from tests.conftest import at


async def approved_booking(service, make_draft, **kwargs):
    booking = await service.create_booking(make_draft(**kwargs))
    return await service.approve_booking(booking.id)


# ==================== CREATE ====================


async def test_create_without_conflict_is_pending(service, make_draft):
    booking = await service.create_booking(make_draft())

    assert booking.status == BookingStatus.PENDING
    assert booking.created_at == booking.updated_at


async def test_create_overlapping_approved_booking_is_denied_but_stored(service, make_draft):
    await approved_booking(service, make_draft, start=at(10), end=at(11))

    booking = await service.create_booking(make_draft(start=at(10, 30), end=at(11, 30)))

    assert booking.status == BookingStatus.DENIED
    fetched = await service.get_booking(booking.id)
    assert fetched.status == BookingStatus.DENIED


async def test_create_touching_approved_booking_is_pending(service, make_draft):
    await approved_booking(service, make_draft, start=at(10), end=at(11))

    booking = await service.create_booking(make_draft(start=at(11), end=at(12)))

    assert booking.status == BookingStatus.PENDING


async def test_pending_bookings_do_not_block(service, make_draft):
    await service.create_booking(make_draft(start=at(10), end=at(11)))

    booking = await service.create_booking(make_draft(start=at(10), end=at(11)))

    assert booking.status == BookingStatus.PENDING


async def test_other_location_does_not_block(service, make_draft):
    await approved_booking(service, make_draft, start=at(10), end=at(11))

    booking = await service.create_booking(
        make_draft(start=at(10), end=at(11), location_id=uuid.uuid4())
    )

    assert booking.status == BookingStatus.PENDING


@pytest.mark.parametrize(
    "mutate",
    [
        lambda d: d["contact"].update(email="not-an-email"),
        lambda d: d["contact"].update(name=""),
        lambda d: d["event"].update(start=at(12).isoformat()),
        lambda d: d.pop("orgId"),
    ],
    ids=["bad-email", "empty-name", "start-after-end", "missing-org"],
)
async def test_create_rejects_malformed_drafts(service, store, make_draft, mutate):
    draft = make_draft()
    mutate(draft)

    with pytest.raises(ValidationError) as exc_info:
        await service.create_booking(draft)

    assert exc_info.value.status_code == 400
    assert exc_info.value.errors
    assert await store.list() == []


# ==================== APPROVE ====================


async def test_approve_pending_booking_notifies_once(service, notifier, make_draft):
    booking = await service.create_booking(make_draft())

    approved = await service.approve_booking(booking.id)

    assert approved.status == BookingStatus.APPROVED
    assert approved.updated_at > booking.updated_at
    assert notifier.sent == [approved]


async def test_approve_denied_booking_fails_and_keeps_status(service, notifier, make_draft):
    await approved_booking(service, make_draft, start=at(10), end=at(11))
    denied = await service.create_booking(make_draft(start=at(10), end=at(11)))
    notifier.sent.clear()

    with pytest.raises(InvalidStateError, match="not pending"):
        await service.approve_booking(denied.id)

    assert (await service.get_booking(denied.id)).status == BookingStatus.DENIED
    assert notifier.sent == []


async def test_approve_twice_fails(service, make_draft):
    booking = await approved_booking(service, make_draft)

    with pytest.raises(InvalidStateError):
        await service.approve_booking(booking.id)


async def test_approve_overlapping_pending_booking_fails(service, store, notifier, make_draft):
    """Two overlapping PENDING requests cannot both end up APPROVED."""
    first = await service.create_booking(make_draft(start=at(10), end=at(11)))
    second = await service.create_booking(make_draft(start=at(10, 30), end=at(11, 30)))
    assert second.status == BookingStatus.PENDING

    await service.approve_booking(first.id)
    notifier.sent.clear()

    with pytest.raises(InvalidStateError, match="overlaps an approved booking"):
        await service.approve_booking(second.id)

    assert (await service.get_booking(second.id)).status == BookingStatus.PENDING
    assert notifier.sent == []
    approved = await store.list(status=BookingStatus.APPROVED, location_id=first.event.location_id)
    assert [b.id for b in approved] == [first.id]


async def test_approve_pending_booking_touching_approved_one(service, make_draft):
    first = await service.create_booking(make_draft(start=at(10), end=at(11)))
    second = await service.create_booking(make_draft(start=at(11), end=at(12)))

    await service.approve_booking(first.id)
    approved = await service.approve_booking(second.id)

    assert approved.status == BookingStatus.APPROVED


async def test_approve_unknown_booking(service):
    with pytest.raises(NotFoundError):
        await service.approve_booking(uuid.uuid4())


async def test_failed_notification_keeps_approval(service, notifier, make_draft):
    booking = await service.create_booking(make_draft())
    notifier.result = False

    with pytest.raises(NotificationError) as exc_info:
        await service.approve_booking(booking.id)

    assert exc_info.value.status_code == 502
    assert exc_info.value.booking.status == BookingStatus.APPROVED
    assert (await service.get_booking(booking.id)).status == BookingStatus.APPROVED


async def test_notifier_transport_error_becomes_notification_error(service, notifier, make_draft):
    booking = await service.create_booking(make_draft())
    notifier.error = httpx.ConnectTimeout("timed out")

    with pytest.raises(NotificationError):
        await service.approve_booking(booking.id)

    assert (await service.get_booking(booking.id)).status == BookingStatus.APPROVED
    assert len(notifier.sent) == 1


# ==================== EDIT ====================


async def test_edit_contact_and_note(service, make_draft):
    booking = await approved_booking(service, make_draft)

    edited = await service.edit_booking(
        booking.id,
        {"contact": {"email": "new@example.com"}, "requestNote": "Bring a projector"},
    )

    assert edited.contact.email == "new@example.com"
    assert edited.contact.name == booking.contact.name
    assert edited.request_note == "Bring a projector"
    assert edited.status == BookingStatus.APPROVED
    assert edited.updated_at > booking.updated_at


async def test_edit_empty_note_clears_it(service, make_draft):
    booking = await service.create_booking(make_draft())
    assert booking.request_note == "Need the stage lights"

    edited = await service.edit_booking(booking.id, {"requestNote": ""})

    assert edited.request_note is None
    assert (await service.get_booking(booking.id)).request_note is None


async def test_edit_event_onto_approved_slot_denies(service, make_draft):
    await approved_booking(service, make_draft, start=at(10), end=at(11))
    booking = await service.create_booking(make_draft(start=at(12), end=at(13)))

    edited = await service.edit_booking(
        booking.id,
        {"event": {"start": at(10, 30).isoformat(), "end": at(11, 30).isoformat()}},
    )

    assert edited.status == BookingStatus.DENIED
    assert edited.event.start == at(10, 30)
    assert edited.event.title == booking.event.title


async def test_edit_event_to_free_slot_stays_pending(service, make_draft):
    booking = await service.create_booking(make_draft(start=at(12), end=at(13)))

    edited = await service.edit_booking(booking.id, {"event": {"end": at(14).isoformat()}})

    assert edited.status == BookingStatus.PENDING
    assert edited.event.end == at(14)


async def test_edit_event_of_approved_booking_fails(service, make_draft):
    booking = await approved_booking(service, make_draft)

    with pytest.raises(InvalidStateError):
        await service.edit_booking(booking.id, {"event": {"title": "Renamed"}})


async def test_edit_rejects_inverted_interval(service, make_draft):
    booking = await service.create_booking(make_draft(start=at(10), end=at(11)))

    with pytest.raises(ValidationError):
        await service.edit_booking(booking.id, {"event": {"start": at(11, 30).isoformat()}})


async def test_edit_unknown_booking(service):
    with pytest.raises(NotFoundError):
        await service.edit_booking(uuid.uuid4(), {"requestNote": "hello"})


# ==================== LIST / DELETE ====================


async def test_list_bookings_in_creation_order(service, make_draft):
    assert await service.list_bookings() == []

    first = await service.create_booking(make_draft())
    second = await service.create_booking(make_draft(start=at(14), end=at(15)))

    assert [b.id for b in await service.list_bookings()] == [first.id, second.id]


async def test_delete_any_status(service, make_draft):
    booking = await approved_booking(service, make_draft)

    assert await service.delete_booking(booking.id) == booking.id

    with pytest.raises(NotFoundError):
        await service.get_booking(booking.id)


async def test_delete_unknown_booking(service):
    with pytest.raises(NotFoundError):
        await service.delete_booking(uuid.uuid4())
