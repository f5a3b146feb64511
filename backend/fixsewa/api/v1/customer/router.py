"""Customer API routes: bookings and reviews."""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from fixsewa.database import get_db
from fixsewa.api.deps import require_customer
from fixsewa.principal import Principal
from fixsewa.schemas.booking import (
    BookingCreate,
    BookingCreatedResponse,
    BookingResponse,
    CancelRequest,
    ReviewableBookingList,
)
from fixsewa.schemas.review import ReviewCreate, ReviewResponse
from fixsewa.services.booking_service import BookingService
from fixsewa.services.review_service import ReviewService

router = APIRouter()


# =============================================================================
# Bookings
# =============================================================================

@router.post("/bookings", response_model=BookingCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    data: BookingCreate,
    db: AsyncSession = Depends(get_db),
    customer: Principal = Depends(require_customer),
):
    """Book a service. Starts out pending with no worker."""
    booking = await BookingService(db).create_booking(customer, data)
    return BookingCreatedResponse(booking_id=booking.id, status=booking.status)


@router.get("/bookings", response_model=List[BookingResponse])
async def my_bookings(
    db: AsyncSession = Depends(get_db),
    customer: Principal = Depends(require_customer),
):
    """Get the current customer's bookings, newest first."""
    rows = await BookingService(db).list_bookings_for_customer(customer.id)
    return [BookingResponse.from_booking(booking, worker_name) for booking, worker_name in rows]


@router.post("/bookings/{booking_id}/cancel", response_model=BookingResponse)
async def cancel_booking(
    booking_id: int,
    data: Optional[CancelRequest] = None,
    db: AsyncSession = Depends(get_db),
    customer: Principal = Depends(require_customer),
):
    """Cancel a pending or assigned booking."""
    booking = await BookingService(db).cancel_booking(
        customer, booking_id, data.reason if data else None
    )
    return BookingResponse.from_booking(booking)


@router.delete("/bookings/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_booking(
    booking_id: int,
    db: AsyncSession = Depends(get_db),
    customer: Principal = Depends(require_customer),
):
    """Delete one of your pending or cancelled bookings."""
    await BookingService(db).delete_booking(customer, booking_id)


# =============================================================================
# Reviews
# =============================================================================

@router.get("/completed-bookings", response_model=ReviewableBookingList)
async def completed_bookings(
    include_reviewed: bool = Query(False),
    db: AsyncSession = Depends(get_db),
    customer: Principal = Depends(require_customer),
):
    """Completed bookings that can be reviewed."""
    bookings = await ReviewService(db).list_reviewable_bookings(customer.id, include_reviewed)
    return ReviewableBookingList(bookings=bookings)


@router.post("/reviews", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
async def submit_review(
    data: ReviewCreate,
    db: AsyncSession = Depends(get_db),
    customer: Principal = Depends(require_customer),
):
    """Rate the worker of a completed booking (once per booking)."""
    return await ReviewService(db).submit_review(
        customer,
        booking_id=data.booking_id,
        rating=data.rating,
        review_text=data.review_text,
    )
