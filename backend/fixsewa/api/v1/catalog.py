"""Service catalog and worker directory."""

from typing import Optional, List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from fixsewa.catalog import SERVICES, LOCATIONS
from fixsewa.database import get_db
from fixsewa.models.user import UserRole
from fixsewa.schemas.review import ReviewResponse, WorkerRating
from fixsewa.schemas.user import WorkerResponse
from fixsewa.services.identity_service import IdentityService
from fixsewa.services.review_service import ReviewService

router = APIRouter()


@router.get("/services")
async def list_services():
    """Bookable services and locations."""
    return {
        "services": [{"code": code, "name": name} for code, name in SERVICES.items()],
        "locations": [{"code": code, "name": name} for code, name in LOCATIONS.items()],
    }


@router.get("/workers", response_model=List[WorkerResponse])
async def list_workers(
    service: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    """Worker directory with rating summaries."""
    pairs = await IdentityService(db).list_workers(service)
    ratings = await ReviewService(db).ratings_for_workers([user.id for user, _ in pairs])

    return [
        WorkerResponse(
            id=user.id,
            name=user.name,
            phone=user.phone,
            service=profile.service,
            experience=profile.experience,
            average_rating=ratings.get(user.id, {}).get("average"),
            review_count=ratings.get(user.id, {}).get("count", 0),
        )
        for user, profile in pairs
    ]


async def _get_worker_or_404(db: AsyncSession, worker_id: int):
    user = await IdentityService(db).get_user(worker_id)
    if not user or user.role != UserRole.WORKER:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Worker not found",
        )
    return user


@router.get("/workers/{worker_id}/reviews", response_model=List[ReviewResponse])
async def worker_reviews(
    worker_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Reviews a worker has received, newest first."""
    await _get_worker_or_404(db, worker_id)
    return await ReviewService(db).list_worker_reviews(worker_id)


@router.get("/workers/{worker_id}/rating", response_model=WorkerRating)
async def worker_rating(
    worker_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Average rating and review count."""
    await _get_worker_or_404(db, worker_id)
    summary = await ReviewService(db).worker_rating(worker_id)
    return WorkerRating(worker_id=worker_id, **summary)
