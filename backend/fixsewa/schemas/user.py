"""Account-related Pydantic schemas."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field

from fixsewa.models.user import UserRole


class SignupRequest(BaseModel):
    """Customer or worker signup."""

    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)
    role: UserRole
    name: str = Field(..., min_length=1, max_length=255)
    phone: str = Field(..., min_length=1, max_length=20)

    # Workers only
    service: Optional[str] = Field(None, max_length=100)
    experience: Optional[str] = None


class LoginRequest(BaseModel):
    """Email/password login request."""

    email: EmailStr
    password: str
    role: Optional[UserRole] = None  # Login page the user came from


class TokenResponse(BaseModel):
    """Token response for both roles."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user_id: int
    user_name: str
    role: UserRole


class UserResponse(BaseModel):
    """Public account info."""

    id: int
    email: str
    role: UserRole
    name: str
    phone: str
    created_at: datetime

    class Config:
        from_attributes = True


class WorkerResponse(BaseModel):
    """Worker directory entry."""

    id: int
    name: str
    phone: str
    service: str
    experience: str
    average_rating: Optional[float] = None
    review_count: int = 0
