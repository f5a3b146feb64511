"""Review schemas."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class ReviewCreate(BaseModel):
    """Rating is range-checked by the review service, not here."""

    booking_id: Optional[int] = None
    rating: int
    review_text: Optional[str] = None


class ReviewResponse(BaseModel):
    id: int
    worker_id: int
    customer_id: int
    booking_id: int
    rating: int
    review_text: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True


class WorkerRating(BaseModel):
    worker_id: int
    average: Optional[float]
    count: int
