"""Business logic services."""

from fixsewa.services.identity_service import IdentityService
from fixsewa.services.booking_service import BookingService
from fixsewa.services.assignment_service import AssignmentService
from fixsewa.services.review_service import ReviewService
from fixsewa.services.notification_service import NotificationService

__all__ = [
    "IdentityService",
    "BookingService",
    "AssignmentService",
    "ReviewService",
    "NotificationService",
]
