"""User accounts and worker profiles."""

from enum import Enum as PyEnum
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum, Text
from sqlalchemy.orm import relationship
from fixsewa.clock import utcnow
from fixsewa.database import Base


class UserRole(str, PyEnum):
    """Account roles for access control."""
    CUSTOMER = "customer"  # Books services and reviews workers
    WORKER = "worker"      # Picks up and completes bookings


class User(Base):
    """User entity - customers and workers share one table."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Auth
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(Enum(UserRole), nullable=False)

    # Profile
    name = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=utcnow)

    # Relationships
    worker_profile = relationship("WorkerProfile", back_populates="user", uselist=False)

    def __repr__(self):
        return f"<User {self.email} ({self.role.value})>"


class WorkerProfile(Base):
    """Trade and experience details for a worker account."""

    __tablename__ = "workers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True)

    service = Column(String(100), nullable=False)  # catalog code: 'plumbing', 'electrical', ...
    experience = Column(Text, nullable=False)

    created_at = Column(DateTime, default=utcnow)

    user = relationship("User", back_populates="worker_profile")

    def __repr__(self):
        return f"<WorkerProfile {self.user_id} {self.service}>"
