"""Tests for the booking ledger."""

from datetime import date, datetime, timedelta, timezone

import pytest
from sqlalchemy import select

from fixsewa.exceptions import InvalidInput, InvalidState, NotFound, Unauthorized
from fixsewa.models.booking import Booking, BookingStatus, BookingStatusHistory
from fixsewa.models.user import User, UserRole
from fixsewa.schemas.booking import BookingCreate
from fixsewa.services.assignment_service import AssignmentService
from fixsewa.services.booking_service import BookingService
from fixsewa.services.notification_service import NotificationService


async def test_create_booking_is_pending_with_contact_snapshot(booking, customer):
    assert booking.status == BookingStatus.PENDING
    assert booking.worker_id is None
    assert booking.worker_assigned_at is None
    assert booking.customer_id == customer.id
    assert booking.customer_email == customer.email
    assert booking.customer_name == "Sita Sharma"
    assert booking.work_text == "Plumbing"
    assert booking.location_text == "Kathmandu"


async def test_timestamps_are_naive_utc(booking):
    now = datetime.now(timezone.utc).replace(tzinfo=None)

    assert booking.created_at.tzinfo is None
    assert abs(now - booking.created_at) < timedelta(minutes=1)


async def test_contact_snapshot_does_not_follow_user_changes(db, booking, customer):
    user = await db.get(User, customer.id)
    user.name = "Sita Karki"
    user.phone = "9822222222"
    await db.commit()

    await db.refresh(booking)
    assert booking.customer_name == "Sita Sharma"
    assert booking.customer_phone == "9800000000"


async def test_create_booking_records_history(db, booking):
    history = (await db.execute(
        select(BookingStatusHistory).where(BookingStatusHistory.booking_id == booking.id)
    )).scalars().all()

    assert [(h.from_status, h.to_status) for h in history] == [(None, "pending")]


async def test_explicit_display_texts_are_kept(db, customer):
    booking = await BookingService(db).create_booking(
        customer,
        BookingCreate(
            location="ward-4",
            location_text="Baneshwor, Ward 4",
            work="cleaning",
            work_text="Deep kitchen cleaning",
            date=date(2026, 11, 2),
        ),
    )
    assert booking.location_text == "Baneshwor, Ward 4"
    assert booking.work_text == "Deep kitchen cleaning"
    assert booking.date == "2026-11-02"


async def test_workers_cannot_book(db, worker, booking_data):
    with pytest.raises(Unauthorized):
        await BookingService(db).create_booking(worker, booking_data)


async def test_unknown_service_rejected(db, customer):
    with pytest.raises(InvalidInput):
        await BookingService(db).create_booking(
            customer,
            BookingCreate(location="kathmandu", work="rocket_repair", date=date(2026, 11, 2)),
        )


async def test_customer_listing_is_newest_first_with_worker_name(db, customer, worker, booking_data):
    service = BookingService(db)
    first = await service.create_booking(customer, booking_data)
    second = await service.create_booking(customer, booking_data)
    await AssignmentService(db).assign(worker, first.id)

    rows = await service.list_bookings_for_customer(customer.id)

    assert [b.id for b, _ in rows] == [second.id, first.id]
    assert dict((b.id, name) for b, name in rows) == {second.id: None, first.id: "Ram Thapa"}


async def test_customer_listing_only_shows_own_bookings(db, make_user, booking, booking_data):
    neighbour = await make_user(UserRole.CUSTOMER, name="Maya Tamang")
    await BookingService(db).create_booking(neighbour, booking_data)

    rows = await BookingService(db).list_bookings_for_customer(neighbour.id)
    assert len(rows) == 1
    assert rows[0][0].customer_id == neighbour.id


async def test_all_bookings_listing_and_status_filter(db, make_user, customer, worker, booking_data):
    neighbour = await make_user(UserRole.CUSTOMER, name="Maya Tamang")
    service = BookingService(db)
    mine = await service.create_booking(customer, booking_data)
    theirs = await service.create_booking(neighbour, booking_data)
    await AssignmentService(db).assign(worker, theirs.id)

    rows = await service.list_all_bookings()
    assert {b.id for b, _ in rows} == {mine.id, theirs.id}

    pending = await service.list_all_bookings(BookingStatus.PENDING)
    assert [b.id for b, _ in pending] == [mine.id]


async def test_customer_can_cancel_pending_booking(db, customer, booking):
    cancelled = await BookingService(db).cancel_booking(customer, booking.id, "Fixed it myself")

    assert cancelled.status == BookingStatus.CANCELLED
    assert cancelled.cancelled_at is not None


async def test_cancel_notifies_assigned_worker(db, customer, worker, booking):
    await AssignmentService(db).assign(worker, booking.id)
    await BookingService(db).cancel_booking(customer, booking.id)

    alerts = await NotificationService(db).list_notifications(worker)
    assert [n.trigger_event for n in alerts] == ["booking_cancelled"]


async def test_cannot_cancel_completed_booking(db, customer, worker, booking):
    await AssignmentService(db).assign(worker, booking.id)
    await AssignmentService(db).update_status(worker, booking.id, "completed")

    with pytest.raises(InvalidInput):
        await BookingService(db).cancel_booking(customer, booking.id)


async def test_owner_can_delete_pending_booking(db, customer, booking):
    booking_id = booking.id
    service = BookingService(db)
    await service.delete_booking(customer, booking_id)

    assert await service.get_booking(booking_id) is None
    history = (await db.execute(
        select(BookingStatusHistory).where(BookingStatusHistory.booking_id == booking_id)
    )).scalars().all()
    assert history == []


async def test_worker_cannot_delete_booking(db, worker, booking):
    with pytest.raises(Unauthorized):
        await BookingService(db).delete_booking(worker, booking.id)

    assert await db.get(Booking, booking.id) is not None


async def test_other_customer_cannot_delete_booking(db, make_user, booking):
    stranger = await make_user(UserRole.CUSTOMER, name="Bikash Shrestha")

    with pytest.raises(NotFound):
        await BookingService(db).delete_booking(stranger, booking.id)


async def test_assigned_booking_cannot_be_deleted(db, customer, worker, booking):
    await AssignmentService(db).assign(worker, booking.id)

    with pytest.raises(InvalidState):
        await BookingService(db).delete_booking(customer, booking.id)
