"""SQLAlchemy models."""

from fixsewa.models.user import User, UserRole, WorkerProfile
from fixsewa.models.booking import Booking, BookingStatus, BookingStatusHistory
from fixsewa.models.review import Review
from fixsewa.models.notification import Notification, NotificationType, SmsStatus

__all__ = [
    "User",
    "UserRole",
    "WorkerProfile",
    "Booking",
    "BookingStatus",
    "BookingStatusHistory",
    "Review",
    "Notification",
    "NotificationType",
    "SmsStatus",
]
