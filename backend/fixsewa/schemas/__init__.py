"""Pydantic schemas for API request/response validation."""

from fixsewa.schemas.user import (
    SignupRequest,
    LoginRequest,
    TokenResponse,
    UserResponse,
    WorkerResponse,
)
from fixsewa.schemas.booking import (
    BookingCreate,
    BookingResponse,
    BookingCreatedResponse,
    AssignRequest,
    StatusUpdateRequest,
    DetailsUpdateRequest,
    CancelRequest,
    ActionResult,
    StatusHistoryResponse,
    ReviewableBookingResponse,
    ReviewableBookingList,
)
from fixsewa.schemas.review import ReviewCreate, ReviewResponse, WorkerRating
from fixsewa.schemas.notification import NotificationResponse

__all__ = [
    # Accounts
    "SignupRequest",
    "LoginRequest",
    "TokenResponse",
    "UserResponse",
    "WorkerResponse",
    # Bookings
    "BookingCreate",
    "BookingResponse",
    "BookingCreatedResponse",
    "AssignRequest",
    "StatusUpdateRequest",
    "DetailsUpdateRequest",
    "CancelRequest",
    "ActionResult",
    "StatusHistoryResponse",
    "ReviewableBookingResponse",
    "ReviewableBookingList",
    # Reviews
    "ReviewCreate",
    "ReviewResponse",
    "WorkerRating",
    # Notifications
    "NotificationResponse",
]
