"""Booking service - the booking ledger."""

import logging
from typing import Optional, List, Tuple
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from fixsewa.catalog import SERVICES, service_name, location_name
from fixsewa.clock import utcnow
from fixsewa.database import commit_or_raise
from fixsewa.exceptions import InvalidInput, InvalidState, NotFound, Unauthorized
from fixsewa.lifecycle import check_transition
from fixsewa.models.booking import Booking, BookingStatus, BookingStatusHistory
from fixsewa.models.notification import NotificationType
from fixsewa.models.user import User
from fixsewa.principal import Principal
from fixsewa.schemas.booking import BookingCreate
from fixsewa.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

# Bookings the owning customer may delete outright
DELETABLE_STATUSES = {BookingStatus.PENDING, BookingStatus.CANCELLED}


def record_transition(
    db: AsyncSession,
    booking: Booking,
    from_status: Optional[BookingStatus],
    to_status: BookingStatus,
    principal: Optional[Principal] = None,
    reason: Optional[str] = None,
) -> BookingStatusHistory:
    """Add a status history row to the current transaction."""
    history = BookingStatusHistory(
        booking_id=booking.id,
        from_status=from_status.value if from_status else None,
        to_status=to_status.value,
        changed_by_id=principal.id if principal else None,
        changed_by_role=principal.role.value if principal else "system",
        reason=reason,
    )
    db.add(history)
    return history


class BookingService:
    """Service for booking operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_booking(self, booking_id: int) -> Optional[Booking]:
        """Get booking by ID."""
        return await self.db.get(Booking, booking_id)

    async def create_booking(self, principal: Principal, data: BookingCreate) -> Booking:
        """
        Create a pending booking for the calling customer.
        Contact details are copied from the principal, not referenced.
        """
        if not principal.is_customer:
            raise Unauthorized("Only customers can book services")

        if data.work not in SERVICES:
            raise InvalidInput(f"Unknown service: {data.work}")

        booking = Booking(
            customer_id=principal.id,
            customer_email=principal.email,
            customer_name=principal.name,
            customer_phone=principal.phone,
            location=data.location,
            location_text=data.location_text or location_name(data.location) or data.location,
            work=data.work,
            work_text=data.work_text or service_name(data.work),
            date=data.date.isoformat(),
            status=BookingStatus.PENDING,
        )
        self.db.add(booking)
        await self.db.flush()

        record_transition(self.db, booking, None, BookingStatus.PENDING, principal, "Booking created")

        await commit_or_raise(self.db, "create booking")
        await self.db.refresh(booking)

        logger.info("Customer %s booked %s (booking %s)", principal.id, booking.work, booking.id)
        return booking

    def _with_worker_name(self):
        worker = aliased(User)
        query = (
            select(Booking, worker.name)
            .outerjoin(worker, Booking.worker_id == worker.id)
            .order_by(Booking.created_at.desc(), Booking.id.desc())
        )
        return query

    async def list_bookings_for_customer(self, customer_id: int) -> List[Tuple[Booking, Optional[str]]]:
        """Customer's bookings, newest first, with the assigned worker's name."""
        query = self._with_worker_name().where(Booking.customer_id == customer_id)
        result = await self.db.execute(query)
        return [tuple(row) for row in result.all()]

    async def list_all_bookings(
        self,
        status: Optional[BookingStatus] = None,
    ) -> List[Tuple[Booking, Optional[str]]]:
        """Every booking, newest first. Readable by any worker."""
        query = self._with_worker_name()
        if status:
            query = query.where(Booking.status == status)
        result = await self.db.execute(query)
        return [tuple(row) for row in result.all()]

    async def _get_owned(self, principal: Principal, booking_id: int) -> Booking:
        if not principal.is_customer:
            raise Unauthorized("Only the customer who made the booking can do this")

        result = await self.db.execute(
            select(Booking).where(
                Booking.id == booking_id,
                Booking.customer_id == principal.id,
            )
        )
        booking = result.scalar_one_or_none()
        if not booking:
            raise NotFound("Booking not found")
        return booking

    async def cancel_booking(
        self,
        principal: Principal,
        booking_id: int,
        reason: Optional[str] = None,
    ) -> Booking:
        """Owning customer withdraws a pending or assigned booking."""
        booking = await self._get_owned(principal, booking_id)

        old_status = booking.status
        check_transition(old_status, BookingStatus.CANCELLED)

        booking.status = BookingStatus.CANCELLED
        booking.cancelled_at = utcnow()
        record_transition(
            self.db, booking, old_status, BookingStatus.CANCELLED, principal,
            reason or "Cancelled by customer",
        )

        notifications = NotificationService(self.db)
        if booking.worker_id:
            await notifications.notify_user(
                user_id=booking.worker_id,
                title="Booking cancelled",
                message=f"{booking.customer_name} cancelled the {booking.work_text} booking for {booking.date}.",
                type=NotificationType.WARNING,
                booking_id=booking.id,
                trigger_event="booking_cancelled",
            )

        await commit_or_raise(self.db, "cancel booking")
        await self.db.refresh(booking)
        await notifications.send_queued_sms()

        logger.info("Customer %s cancelled booking %s", principal.id, booking.id)
        return booking

    async def delete_booking(self, principal: Principal, booking_id: int) -> None:
        """
        Remove a booking. Only its customer may, and only before a worker
        has taken it on or after it was cancelled.
        """
        booking = await self._get_owned(principal, booking_id)

        if booking.status not in DELETABLE_STATUSES:
            raise InvalidState(f"Cannot delete a {booking.status.value} booking")

        await self.db.delete(booking)
        await commit_or_raise(self.db, "delete booking")

        logger.info("Customer %s deleted booking %s", principal.id, booking_id)
