"""Notification service - in-app alerts with optional SMS mirror."""

import logging
from typing import Optional, List, Tuple
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from fixsewa.clock import utcnow
from fixsewa.config import get_settings
from fixsewa.exceptions import NotFound
from fixsewa.integrations.twilio_client import TwilioClient, SmsDeliveryError
from fixsewa.models.notification import Notification, NotificationType, SmsStatus
from fixsewa.principal import Principal

settings = get_settings()
logger = logging.getLogger(__name__)


class NotificationService:
    """Service for creating and reading user notifications."""

    def __init__(self, db: AsyncSession, twilio: Optional[TwilioClient] = None):
        self.db = db
        self.twilio = twilio
        self._outbox: List[Tuple[Notification, Optional[str]]] = []

    async def notify_user(
        self,
        user_id: int,
        title: str,
        message: str,
        type: NotificationType = NotificationType.INFO,
        booking_id: Optional[int] = None,
        trigger_event: str = "general",
        phone: Optional[str] = None,
    ) -> Notification:
        """
        Record a notification in the caller's transaction.
        Does not commit; the caller's lifecycle change and the alert land together.
        The SMS mirror is only queued here, see ``send_queued_sms``.
        """
        notification = Notification(
            user_id=user_id,
            booking_id=booking_id,
            trigger_event=trigger_event,
            title=title,
            message=message,
            type=type,
            is_read=False,
        )
        self.db.add(notification)
        await self.db.flush()

        if settings.SMS_NOTIFICATIONS_ENABLED:
            self._outbox.append((notification, phone))

        return notification

    async def send_queued_sms(self) -> None:
        """
        Send the SMS mirror of every queued notification.

        Call only after the caller's commit succeeded. Delivery results are
        stored on the notifications; nothing here raises into the caller.
        """
        if not self._outbox:
            return

        outbox, self._outbox = self._outbox, []
        for notification, phone in outbox:
            await self._send_sms(notification, phone)

        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Could not record SMS delivery status: %s", e)

    async def _send_sms(self, notification: Notification, phone: Optional[str]) -> None:
        """Mirror a notification to SMS. Failures are recorded, not raised."""
        if not phone:
            notification.sms_status = SmsStatus.SKIPPED
            notification.sms_error = "No phone number available"
            return

        if self.twilio is None:
            self.twilio = TwilioClient()

        try:
            result = await self.twilio.send_sms(phone, f"{notification.title}: {notification.message}")
            notification.sms_status = SmsStatus.SENT
            notification.sms_external_id = result.get("sid")
        except SmsDeliveryError as e:
            logger.warning("SMS for notification %s failed: %s", notification.id, e)
            notification.sms_status = SmsStatus.FAILED
            notification.sms_error = str(e)

    async def list_notifications(
        self,
        principal: Principal,
        unread_only: bool = False,
    ) -> List[Notification]:
        """Caller's notifications, newest first."""
        query = select(Notification).where(Notification.user_id == principal.id)
        if unread_only:
            query = query.where(Notification.is_read == False)
        query = query.order_by(Notification.created_at.desc(), Notification.id.desc())

        result = await self.db.execute(query)
        return list(result.scalars())

    async def mark_read(self, principal: Principal, notification_id: int) -> Notification:
        result = await self.db.execute(
            select(Notification).where(
                Notification.id == notification_id,
                Notification.user_id == principal.id,
            )
        )
        notification = result.scalar_one_or_none()
        if not notification:
            raise NotFound("Notification not found")

        if not notification.is_read:
            notification.is_read = True
            notification.read_at = utcnow()
            await self.db.commit()
            await self.db.refresh(notification)

        return notification
