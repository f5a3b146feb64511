"""Review service - customer ratings of workers after completed bookings."""

import logging
from typing import Optional, List, Dict
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import aliased

from fixsewa.exceptions import (
    Conflict,
    InvalidInput,
    InvalidState,
    NotFound,
    StoreError,
    Unauthorized,
)
from fixsewa.models.booking import Booking, BookingStatus
from fixsewa.models.review import Review
from fixsewa.models.user import User
from fixsewa.principal import Principal

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


class ReviewService:
    """Service for review operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def submit_review(
        self,
        principal: Principal,
        booking_id: Optional[int],
        rating: int,
        review_text: Optional[str] = None,
    ) -> Review:
        """
        Record the customer's review of the worker on a completed booking.

        Checks run in a fixed order: role, input, completed-booking lookup,
        worker presence, duplicate review. A booking that is not completed
        is reported as NotFound because the lookup filters it out.
        """
        if not principal.is_customer:
            raise Unauthorized("Only customers can submit reviews")

        if (
            not booking_id
            or isinstance(rating, bool)
            or not isinstance(rating, int)
            or not MIN_RATING <= rating <= MAX_RATING
        ):
            raise InvalidInput("Valid booking ID and rating (1-5) are required")

        result = await self.db.execute(
            select(Booking).where(
                Booking.id == booking_id,
                Booking.customer_id == principal.id,
                Booking.status == BookingStatus.COMPLETED,
            )
        )
        booking = result.scalar_one_or_none()
        if not booking:
            raise NotFound("Completed booking not found or not yours")

        if booking.worker_id is None:
            raise InvalidState("No worker assigned to this booking")

        if await self._find(booking.worker_id, principal.id, booking.id):
            raise Conflict("You have already reviewed this booking")

        review = Review(
            worker_id=booking.worker_id,
            customer_id=principal.id,
            booking_id=booking.id,
            rating=rating,
            review_text=review_text or None,
        )
        self.db.add(review)

        try:
            await self.db.commit()
        except IntegrityError:
            # A concurrent submission won the unique constraint
            await self.db.rollback()
            raise Conflict("You have already reviewed this booking")
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Could not store review for booking %s: %s", booking_id, e)
            raise StoreError("Could not submit review")

        await self.db.refresh(review)
        logger.info(
            "Customer %s rated worker %s %s/5 (booking %s)",
            principal.id, review.worker_id, rating, booking.id,
        )
        return review

    async def _find(self, worker_id: int, customer_id: int, booking_id: int) -> Optional[Review]:
        result = await self.db.execute(
            select(Review).where(
                Review.worker_id == worker_id,
                Review.customer_id == customer_id,
                Review.booking_id == booking_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_reviewable_bookings(
        self,
        customer_id: int,
        include_reviewed: bool = False,
    ) -> List[dict]:
        """
        Completed bookings with a worker, newest first, each carrying a
        derived ``already_reviewed`` flag. Reviewed ones are left out
        unless ``include_reviewed`` is set.
        """
        worker = aliased(User)
        reviewed = (
            select(Review.id)
            .where(
                Review.booking_id == Booking.id,
                Review.customer_id == customer_id,
            )
            .correlate(Booking)
            .exists()
        )

        query = (
            select(Booking, worker.name, reviewed.label("already_reviewed"))
            .outerjoin(worker, Booking.worker_id == worker.id)
            .where(
                Booking.customer_id == customer_id,
                Booking.status == BookingStatus.COMPLETED,
                Booking.worker_id.is_not(None),
            )
            .order_by(Booking.created_at.desc(), Booking.id.desc())
        )
        if not include_reviewed:
            query = query.where(~reviewed)

        result = await self.db.execute(query)
        return [
            {
                "id": booking.id,
                "work_text": booking.work_text,
                "location_text": booking.location_text,
                "date": booking.date,
                "estimated_price": booking.estimated_price,
                "created_at": booking.created_at,
                "worker_id": booking.worker_id,
                "worker_name": worker_name,
                "already_reviewed": bool(already_reviewed),
            }
            for booking, worker_name, already_reviewed in result.all()
        ]

    async def list_worker_reviews(self, worker_id: int) -> List[Review]:
        """Reviews received by a worker, newest first."""
        result = await self.db.execute(
            select(Review)
            .where(Review.worker_id == worker_id)
            .order_by(Review.created_at.desc(), Review.id.desc())
        )
        return list(result.scalars())

    async def worker_rating(self, worker_id: int) -> dict:
        """Average rating and review count for one worker."""
        ratings = await self.ratings_for_workers([worker_id])
        return ratings.get(worker_id, {"average": None, "count": 0})

    async def ratings_for_workers(self, worker_ids: List[int]) -> Dict[int, dict]:
        """Average rating and review count keyed by worker id."""
        if not worker_ids:
            return {}

        result = await self.db.execute(
            select(Review.worker_id, func.avg(Review.rating), func.count(Review.id))
            .where(Review.worker_id.in_(worker_ids))
            .group_by(Review.worker_id)
        )
        return {
            worker_id: {
                "average": round(float(average), 2) if average is not None else None,
                "count": count,
            }
            for worker_id, average, count in result.all()
        }
