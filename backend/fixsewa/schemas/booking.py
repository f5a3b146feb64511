"""Booking-related Pydantic schemas."""

from datetime import date as Date, datetime
from typing import Optional, List
from pydantic import BaseModel, Field

from fixsewa.models.booking import BookingStatus


class BookingCreate(BaseModel):
    """Schema for creating a booking (customer)."""

    location: str = Field(..., min_length=1, max_length=100)
    work: str = Field(..., min_length=1, max_length=100)
    date: Date
    location_text: Optional[str] = Field(None, max_length=255)
    work_text: Optional[str] = Field(None, max_length=255)


class BookingResponse(BaseModel):
    """Full booking response schema."""

    id: int
    customer_id: int
    customer_email: str
    customer_name: str
    customer_phone: str

    location: str
    location_text: str
    work: str
    work_text: str
    date: str

    status: BookingStatus
    worker_id: Optional[int]
    worker_name: Optional[str] = None
    worker_assigned_at: Optional[datetime]
    estimated_price: Optional[float]
    notes: Optional[str]

    created_at: datetime
    completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @classmethod
    def from_booking(cls, booking, worker_name: Optional[str] = None) -> "BookingResponse":
        response = cls.model_validate(booking)
        response.worker_name = worker_name
        return response


class BookingCreatedResponse(BaseModel):
    success: bool = True
    message: str = "Booking created successfully"
    booking_id: int
    status: BookingStatus


class AssignRequest(BaseModel):
    """Assign a booking. Defaults to the calling worker."""

    worker_id: Optional[int] = None


class StatusUpdateRequest(BaseModel):
    """Status change by the assigned worker. Validated by the engine."""

    status: str
    reason: Optional[str] = None


class DetailsUpdateRequest(BaseModel):
    """Price estimate and notes; both are always written."""

    estimated_price: Optional[float] = None
    notes: Optional[str] = None


class CancelRequest(BaseModel):
    reason: Optional[str] = None


class ActionResult(BaseModel):
    """Outcome of a scoped update."""

    success: bool
    message: str
    rows_affected: int


class StatusHistoryResponse(BaseModel):
    id: int
    from_status: Optional[str]
    to_status: str
    changed_by_id: Optional[int]
    changed_by_role: Optional[str]
    reason: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True


class ReviewableBookingResponse(BaseModel):
    """Completed booking with its derived review flag."""

    id: int
    work_text: str
    location_text: str
    date: str
    estimated_price: Optional[float]
    created_at: datetime
    worker_id: int
    worker_name: Optional[str]
    already_reviewed: bool


class ReviewableBookingList(BaseModel):
    success: bool = True
    bookings: List[ReviewableBookingResponse]
