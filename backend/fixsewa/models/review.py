"""Worker reviews left by customers after completed bookings."""

from sqlalchemy import Column, Integer, DateTime, ForeignKey, Text, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import relationship
from fixsewa.clock import utcnow
from fixsewa.database import Base


class Review(Base):
    """One rating per (worker, customer, booking)."""

    __tablename__ = "worker_reviews"

    id = Column(Integer, primary_key=True, autoincrement=True)
    worker_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    customer_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=False)

    rating = Column(Integer, nullable=False)
    review_text = Column(Text)

    created_at = Column(DateTime, default=utcnow)

    booking = relationship("Booking")
    customer = relationship("User", foreign_keys=[customer_id])

    __table_args__ = (
        UniqueConstraint("worker_id", "customer_id", "booking_id", name="uq_review_triple"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_review_rating"),
    )

    def __repr__(self):
        return f"<Review booking={self.booking_id} rating={self.rating}>"
