"""Notification endpoints (any signed-in user)."""

from typing import List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from fixsewa.database import get_db
from fixsewa.api.deps import get_principal
from fixsewa.principal import Principal
from fixsewa.schemas.notification import NotificationResponse
from fixsewa.services.notification_service import NotificationService

router = APIRouter()


@router.get("", response_model=List[NotificationResponse])
async def my_notifications(
    unread_only: bool = Query(False),
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    """Get your notifications, newest first."""
    return await NotificationService(db).list_notifications(principal, unread_only)


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read(
    notification_id: int,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    """Mark a notification as read."""
    return await NotificationService(db).mark_read(principal, notification_id)
