"""Booking models - the core entity of the system."""

from enum import Enum as PyEnum
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, Float, Enum, Index
from sqlalchemy.orm import relationship
from fixsewa.clock import utcnow
from fixsewa.database import Base


class BookingStatus(str, PyEnum):
    """Booking status enumeration."""
    PENDING = "pending"        # Created, awaiting a worker
    ASSIGNED = "assigned"      # Worker picked it up
    COMPLETED = "completed"    # Work finished, reviewable
    CANCELLED = "cancelled"    # Withdrawn by customer or worker


class Booking(Base):
    """Booking entity - a customer's request for a service visit."""

    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    customer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Customer contact, copied when the booking is made
    customer_email = Column(String(255), nullable=False)
    customer_name = Column(String(255), nullable=False)
    customer_phone = Column(String(20), nullable=False)

    # Request
    location = Column(String(100), nullable=False)
    location_text = Column(String(255), nullable=False)
    work = Column(String(100), nullable=False)
    work_text = Column(String(255), nullable=False)
    date = Column(String(20), nullable=False)  # ISO date as chosen by the customer

    # Lifecycle
    status = Column(Enum(BookingStatus), default=BookingStatus.PENDING, nullable=False)
    worker_id = Column(Integer, ForeignKey("users.id"))
    worker_assigned_at = Column(DateTime)

    # Filled in by the assigned worker
    estimated_price = Column(Float)
    notes = Column(Text)

    # Timestamps
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
    completed_at = Column(DateTime)
    cancelled_at = Column(DateTime)

    # Relationships
    customer = relationship("User", foreign_keys=[customer_id])
    worker = relationship("User", foreign_keys=[worker_id])
    status_history = relationship(
        "BookingStatusHistory",
        back_populates="booking",
        cascade="all, delete-orphan",
        order_by="BookingStatusHistory.id",
    )

    __table_args__ = (
        Index("ix_bookings_worker_status", "worker_id", "status"),
    )

    def __repr__(self):
        return f"<Booking {self.id} {self.status.value if self.status else None}>"


class BookingStatusHistory(Base):
    """Track all status changes for auditing."""

    __tablename__ = "booking_status_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=False, index=True)

    # Status change
    from_status = Column(String(20))
    to_status = Column(String(20), nullable=False)

    # Who made the change
    changed_by_id = Column(Integer)
    changed_by_role = Column(String(20))  # 'customer', 'worker'

    reason = Column(Text)

    created_at = Column(DateTime, default=utcnow)

    booking = relationship("Booking", back_populates="status_history")

    def __repr__(self):
        return f"<BookingStatusHistory {self.from_status} -> {self.to_status}>"
