"""API dependencies for dependency injection and authentication."""

from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from jose import JWTError

from fixsewa.database import get_db
from fixsewa.models.user import User, UserRole
from fixsewa.principal import Principal
from fixsewa.security import decode_token

security = HTTPBearer(auto_error=False)


def _auth_error(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


# =============================================================================
# Principal Resolution
# =============================================================================

async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Get the authenticated user from the bearer token."""
    if not credentials:
        raise _auth_error("Not authenticated")

    try:
        payload = decode_token(credentials.credentials)
        user_id = int(payload.get("sub"))
    except (JWTError, TypeError, ValueError):
        raise _auth_error("Invalid token")

    user = await db.get(User, user_id)
    if user is None:
        raise _auth_error("User not found")

    return user


async def get_principal(user: User = Depends(get_current_user)) -> Principal:
    """Authenticated caller for the service layer."""
    return Principal.from_user(user)


# =============================================================================
# Role-Based Dependencies
# =============================================================================

async def require_customer(principal: Principal = Depends(get_principal)) -> Principal:
    """Require the current user to be a customer."""
    if principal.role != UserRole.CUSTOMER:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Customer access required",
        )
    return principal


async def require_worker(principal: Principal = Depends(get_principal)) -> Principal:
    """Require the current user to be a worker."""
    if principal.role != UserRole.WORKER:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Worker access required",
        )
    return principal
