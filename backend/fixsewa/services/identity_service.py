"""Identity service - accounts, worker profiles and credential checks."""

import logging
from typing import Optional, List
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from fixsewa.catalog import SERVICES
from fixsewa.exceptions import (
    DuplicateEmail,
    InvalidCredentials,
    InvalidInput,
    NotFound,
    StoreError,
)
from fixsewa.models.user import User, UserRole, WorkerProfile
from fixsewa.schemas.user import SignupRequest
from fixsewa.security import hash_password, verify_password

logger = logging.getLogger(__name__)


class IdentityService:
    """Service for account operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        return await self.db.get(User, user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(User.email == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def create_user(self, data: SignupRequest) -> User:
        """
        Create an account. Workers get their profile in the same transaction,
        so a failed profile write leaves no user row behind.
        """
        email = data.email.strip().lower()

        if data.role == UserRole.WORKER:
            if not data.service or not data.experience:
                raise InvalidInput("Workers must specify service and experience")
            if data.service not in SERVICES:
                raise InvalidInput(f"Unknown service: {data.service}")

        if await self.get_by_email(email):
            raise DuplicateEmail("Email already exists")

        user = User(
            email=email,
            password_hash=hash_password(data.password),
            role=data.role,
            name=data.name,
            phone=data.phone,
        )
        self.db.add(user)

        try:
            await self.db.flush()

            if data.role == UserRole.WORKER:
                self.db.add(
                    WorkerProfile(
                        user_id=user.id,
                        service=data.service,
                        experience=data.experience,
                    )
                )

            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            # Lost a race with a concurrent signup for the same email
            if await self.get_by_email(email):
                raise DuplicateEmail("Email already exists")
            logger.error("Signup failed for %s: %s", email, e)
            raise StoreError("Could not create account")
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Signup failed for %s: %s", email, e)
            raise StoreError("Could not create account")

        await self.db.refresh(user)
        logger.info("Created %s account %s (id=%s)", user.role.value, email, user.id)
        return user

    async def authenticate(
        self,
        email: str,
        password: str,
        role: Optional[UserRole] = None,
    ) -> User:
        """
        Check credentials. Unknown email is NotFound; a bad password or a
        role hint that does not match the account is InvalidCredentials.
        """
        user = await self.get_by_email(email)
        if not user:
            raise NotFound("User not found")

        if not verify_password(password, user.password_hash):
            logger.info("Rejected login for %s: bad password", user.email)
            raise InvalidCredentials("Invalid email or password")

        if role is not None and user.role != role:
            logger.info("Rejected login for %s: not a %s account", user.email, role.value)
            raise InvalidCredentials("Invalid email or password")

        return user

    async def get_worker_profile(self, user_id: int) -> Optional[WorkerProfile]:
        result = await self.db.execute(
            select(WorkerProfile).where(WorkerProfile.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def list_workers(self, service: Optional[str] = None) -> List[tuple]:
        """List (User, WorkerProfile) pairs, optionally for one service."""
        query = (
            select(User, WorkerProfile)
            .join(WorkerProfile, WorkerProfile.user_id == User.id)
            .where(User.role == UserRole.WORKER)
        )
        if service:
            query = query.where(WorkerProfile.service == service)
        query = query.order_by(User.name)

        result = await self.db.execute(query)
        return [tuple(row) for row in result.all()]
