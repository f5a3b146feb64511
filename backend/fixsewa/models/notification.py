"""In-app notification models."""

from enum import Enum as PyEnum
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, Boolean, Enum
from fixsewa.clock import utcnow
from fixsewa.database import Base


class NotificationType(str, PyEnum):
    """Severity shown in the customer's alert list."""
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"


class SmsStatus(str, PyEnum):
    """SMS delivery status for the mirrored text message."""
    SENT = "sent"
    FAILED = "failed"
    SKIPPED = "skipped"


class Notification(Base):
    """
    Alert shown to a user about one of their bookings.
    Optionally mirrored to SMS; the outcome is kept in sms_status.
    """

    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # What triggered this notification
    booking_id = Column(Integer, ForeignKey("bookings.id", ondelete="SET NULL"))
    trigger_event = Column(String(100))  # 'worker_assigned', 'booking_completed', ...

    # Content
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(Enum(NotificationType), default=NotificationType.INFO, nullable=False)

    # State
    is_read = Column(Boolean, default=False, nullable=False)
    read_at = Column(DateTime)

    # SMS mirror
    sms_status = Column(Enum(SmsStatus))
    sms_external_id = Column(String(100))  # Twilio SID
    sms_error = Column(Text)

    created_at = Column(DateTime, default=utcnow)

    def __repr__(self):
        return f"<Notification {self.trigger_event} to {self.user_id}>"
