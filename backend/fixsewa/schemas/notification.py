"""Notification schemas."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from fixsewa.models.notification import NotificationType


class NotificationResponse(BaseModel):
    id: int
    booking_id: Optional[int]
    title: str
    message: str
    type: NotificationType
    trigger_event: str
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True
