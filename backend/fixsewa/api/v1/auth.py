"""Authentication endpoints for customers and workers."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from fixsewa.database import get_db
from fixsewa.api.deps import get_current_user
from fixsewa.config import get_settings
from fixsewa.models.user import User
from fixsewa.schemas.user import LoginRequest, SignupRequest, TokenResponse, UserResponse
from fixsewa.security import create_access_token
from fixsewa.services.identity_service import IdentityService

settings = get_settings()
router = APIRouter()


def _token_for(user: User) -> TokenResponse:
    access_token = create_access_token(
        subject=str(user.id),
        role=user.role.value,
    )
    return TokenResponse(
        access_token=access_token,
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        user_id=user.id,
        user_name=user.name,
        role=user.role,
    )


@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    data: SignupRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Create a customer or worker account.
    Workers must also give their service and experience.
    """
    return await IdentityService(db).create_user(data)


@router.post("/login", response_model=TokenResponse)
async def login(
    data: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Login with email and password.
    An optional role restricts the login to that kind of account.
    """
    user = await IdentityService(db).authenticate(data.email, data.password, data.role)
    return _token_for(user)


@router.get("/me", response_model=UserResponse)
async def me(user: User = Depends(get_current_user)):
    """Get current user info from token."""
    return user
