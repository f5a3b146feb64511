"""Worker API routes: the booking board and lifecycle actions."""

from typing import Optional, List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from fixsewa.database import get_db
from fixsewa.api.deps import require_worker
from fixsewa.lifecycle import parse_status
from fixsewa.principal import Principal
from fixsewa.schemas.booking import (
    ActionResult,
    AssignRequest,
    BookingResponse,
    DetailsUpdateRequest,
    StatusHistoryResponse,
    StatusUpdateRequest,
)
from fixsewa.services.assignment_service import AssignmentService
from fixsewa.services.booking_service import BookingService

router = APIRouter()


# =============================================================================
# Booking Board
# =============================================================================

@router.get("/bookings", response_model=List[BookingResponse])
async def all_bookings(
    db: AsyncSession = Depends(get_db),
    worker: Principal = Depends(require_worker),
    status_filter: Optional[str] = Query(None, alias="status"),
):
    """Every booking, newest first, with the assigned worker's name."""
    status = parse_status(status_filter) if status_filter else None
    rows = await BookingService(db).list_all_bookings(status)
    return [BookingResponse.from_booking(booking, worker_name) for booking, worker_name in rows]


# =============================================================================
# Booking Actions
# =============================================================================

@router.post("/bookings/{booking_id}/assign", response_model=BookingResponse)
async def assign_booking(
    booking_id: int,
    data: Optional[AssignRequest] = None,
    db: AsyncSession = Depends(get_db),
    worker: Principal = Depends(require_worker),
):
    """Take a booking (or hand it to another worker)."""
    booking = await AssignmentService(db).assign(
        worker, booking_id, data.worker_id if data else None
    )
    return BookingResponse.from_booking(booking)


@router.post("/bookings/{booking_id}/status", response_model=ActionResult)
async def update_booking_status(
    booking_id: int,
    data: StatusUpdateRequest,
    db: AsyncSession = Depends(get_db),
    worker: Principal = Depends(require_worker),
):
    """Move one of your bookings to completed or cancelled."""
    rows = await AssignmentService(db).update_status(
        worker, booking_id, data.status, data.reason
    )
    return ActionResult(
        success=rows > 0,
        message="Status updated successfully" if rows else "Booking not assigned to you; nothing changed",
        rows_affected=rows,
    )


@router.post("/bookings/{booking_id}/details", response_model=ActionResult)
async def update_booking_details(
    booking_id: int,
    data: DetailsUpdateRequest,
    db: AsyncSession = Depends(get_db),
    worker: Principal = Depends(require_worker),
):
    """Set the price estimate and notes on one of your bookings."""
    rows = await AssignmentService(db).update_details(
        worker, booking_id, data.estimated_price, data.notes
    )
    return ActionResult(
        success=rows > 0,
        message="Details updated successfully" if rows else "Booking not assigned to you; nothing changed",
        rows_affected=rows,
    )


@router.get("/bookings/{booking_id}/history", response_model=List[StatusHistoryResponse])
async def booking_history(
    booking_id: int,
    db: AsyncSession = Depends(get_db),
    worker: Principal = Depends(require_worker),
):
    """Status changes for a booking, oldest first."""
    return await AssignmentService(db).booking_history(booking_id)
