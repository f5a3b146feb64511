"""Assignment service - worker assignment and booking status changes."""

import logging
from typing import Optional, List
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from fixsewa.clock import utcnow
from fixsewa.database import commit_or_raise
from fixsewa.exceptions import InvalidInput, NotFound, Unauthorized
from fixsewa.lifecycle import check_transition, parse_status, sources_for
from fixsewa.models.booking import Booking, BookingStatus, BookingStatusHistory
from fixsewa.models.notification import NotificationType
from fixsewa.models.user import User, UserRole
from fixsewa.principal import Principal
from fixsewa.services.booking_service import record_transition
from fixsewa.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

# Customer alerts sent on worker-driven status changes
STATUS_ALERTS = {
    BookingStatus.COMPLETED: (
        "Booking completed",
        "Your {work} booking has been marked completed. You can now review your worker.",
        NotificationType.SUCCESS,
    ),
    BookingStatus.CANCELLED: (
        "Booking cancelled",
        "Your {work} booking for {date} was cancelled by the worker.",
        NotificationType.WARNING,
    ),
}


class AssignmentService:
    """Service for worker-side booking mutations. Every call requires a worker."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.notifications = NotificationService(db)

    def _require_worker(self, principal: Principal) -> None:
        if not principal.is_worker:
            raise Unauthorized("Worker access required")

    async def _resolve_worker(self, principal: Principal, worker_id: Optional[int]) -> tuple:
        """Return (id, name) of the worker being assigned."""
        if worker_id is None or worker_id == principal.id:
            return principal.id, principal.name

        worker = await self.db.get(User, worker_id)
        if not worker or worker.role != UserRole.WORKER:
            raise InvalidInput(f"User {worker_id} is not a worker")
        return worker.id, worker.name

    async def assign(
        self,
        principal: Principal,
        booking_id: int,
        worker_id: Optional[int] = None,
    ) -> Booking:
        """
        Assign a worker (the caller by default) to a booking.

        Pending and assigned bookings can be (re-)assigned; a second
        assignment silently replaces the first. Completed and cancelled
        bookings are rejected.
        """
        self._require_worker(principal)
        target_id, target_name = await self._resolve_worker(principal, worker_id)

        booking = await self.db.get(Booking, booking_id)
        if not booking:
            raise NotFound("Booking not found")

        old_status = booking.status
        check_transition(old_status, BookingStatus.ASSIGNED)

        now = utcnow()
        result = await self.db.execute(
            update(Booking)
            .where(
                Booking.id == booking_id,
                Booking.status.in_(list(sources_for(BookingStatus.ASSIGNED))),
            )
            .values(
                worker_id=target_id,
                status=BookingStatus.ASSIGNED,
                worker_assigned_at=now,
                updated_at=now,
            )
        )
        if result.rowcount == 0:
            # Completed or cancelled between the read and the write
            await self.db.rollback()
            raise InvalidInput("Booking can no longer be assigned")

        record_transition(
            self.db, booking, old_status, BookingStatus.ASSIGNED, principal,
            f"Assigned to worker {target_id}",
        )
        await self.notifications.notify_user(
            user_id=booking.customer_id,
            title="Worker assigned",
            message=f"{target_name} will handle your {booking.work_text} booking on {booking.date}.",
            type=NotificationType.SUCCESS,
            booking_id=booking.id,
            trigger_event="worker_assigned",
            phone=booking.customer_phone,
        )

        await commit_or_raise(self.db, "assign worker")
        await self.db.refresh(booking)
        await self.notifications.send_queued_sms()

        logger.info(
            "Booking %s assigned to worker %s by %s (was %s)",
            booking_id, target_id, principal.id, old_status.value,
        )
        return booking

    async def _get_assigned(self, principal: Principal, booking_id: int) -> Optional[Booking]:
        result = await self.db.execute(
            select(Booking).where(
                Booking.id == booking_id,
                Booking.worker_id == principal.id,
            )
        )
        return result.scalar_one_or_none()

    async def update_status(
        self,
        principal: Principal,
        booking_id: int,
        new_status: str,
        reason: Optional[str] = None,
    ) -> int:
        """
        Move a booking to ``new_status``. Only the assigned worker's call has
        any effect; anyone else gets 0 rows affected and the row is untouched.
        """
        self._require_worker(principal)
        target = parse_status(new_status)
        if target == BookingStatus.ASSIGNED:
            raise InvalidInput("Use assign to (re-)assign a booking")

        booking = await self._get_assigned(principal, booking_id)
        if not booking:
            logger.info("Worker %s is not assigned to booking %s; status unchanged", principal.id, booking_id)
            return 0

        old_status = booking.status
        check_transition(old_status, target)

        now = utcnow()
        values = {"status": target, "updated_at": now}
        if target == BookingStatus.COMPLETED:
            values["completed_at"] = now
        elif target == BookingStatus.CANCELLED:
            values["cancelled_at"] = now

        result = await self.db.execute(
            update(Booking)
            .where(
                Booking.id == booking_id,
                Booking.worker_id == principal.id,
                Booking.status == old_status,
            )
            .values(**values)
        )
        rows = result.rowcount
        if rows == 0:
            await self.db.rollback()
            return 0

        record_transition(self.db, booking, old_status, target, principal, reason)

        alert = STATUS_ALERTS.get(target)
        if alert:
            title, template, kind = alert
            await self.notifications.notify_user(
                user_id=booking.customer_id,
                title=title,
                message=template.format(work=booking.work_text, date=booking.date),
                type=kind,
                booking_id=booking.id,
                trigger_event=f"booking_{target.value}",
                phone=booking.customer_phone,
            )

        await commit_or_raise(self.db, "update booking status")
        await self.db.refresh(booking)
        await self.notifications.send_queued_sms()

        logger.info(
            "Booking %s: %s -> %s by worker %s",
            booking_id, old_status.value, target.value, principal.id,
        )
        return rows

    async def update_details(
        self,
        principal: Principal,
        booking_id: int,
        estimated_price: Optional[float],
        notes: Optional[str],
    ) -> int:
        """
        Overwrite price estimate and notes together. Assigned worker only.

        Status is not checked: the worker may still correct the final price
        and notes after a booking is completed or cancelled.
        """
        self._require_worker(principal)
        if estimated_price is not None and estimated_price < 0:
            raise InvalidInput("Estimated price cannot be negative")

        result = await self.db.execute(
            update(Booking)
            .where(
                Booking.id == booking_id,
                Booking.worker_id == principal.id,
            )
            .values(
                estimated_price=estimated_price,
                notes=notes or None,
                updated_at=utcnow(),
            )
        )
        rows = result.rowcount
        await commit_or_raise(self.db, "update booking details")

        if rows:
            booking = await self.db.get(Booking, booking_id)
            if booking:
                await self.db.refresh(booking)
        logger.info("Worker %s updated details of booking %s (%s rows)", principal.id, booking_id, rows)
        return rows

    async def booking_history(self, booking_id: int) -> List[BookingStatusHistory]:
        """Status changes for a booking, oldest first."""
        if not await self.db.get(Booking, booking_id):
            raise NotFound("Booking not found")

        result = await self.db.execute(
            select(BookingStatusHistory)
            .where(BookingStatusHistory.booking_id == booking_id)
            .order_by(BookingStatusHistory.id)
        )
        return list(result.scalars())
