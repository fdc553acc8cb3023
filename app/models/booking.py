# app/models/booking.py
from sqlalchemy import Column, String, Text, Date, DateTime, Index
from sqlalchemy.sql import func
import enum
import uuid

from app.models.base import Base


class BookingStatus(str, enum.Enum):
    """Lifecycle states of a booking request."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"


# Statuses that hold a slot
BLOCKING_STATUSES = (BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value)


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Client info
    full_name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    phone = Column(String, nullable=False)

    # Appointment details
    service = Column(Text, nullable=False)
    # No foreign key: removing a staff member must not touch existing bookings
    staff_id = Column(String(36), nullable=True)
    staff_name = Column(String, nullable=True)
    date = Column(Date, nullable=False)
    time = Column(String(5), nullable=False)  # HH:MM, one of SLOT_CATALOG
    duration = Column(String, nullable=False, default="90")  # minutes, text encoded
    notes = Column(Text, nullable=True)

    # Status tracking
    status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value)
    rejection_reason = Column(Text, nullable=True)

    # Calendar sync
    calendar_event_id = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index("idx_bookings_date_status", "date", "status"),
        Index("idx_bookings_staff", "staff_id"),
    )

    @property
    def duration_minutes(self):
        """Duration as an int, or None when the stored text is not a positive number."""
        try:
            minutes = int(self.duration)
        except (TypeError, ValueError):
            return None
        return minutes if minutes > 0 else None

    def __repr__(self):
        return f"<Booking {self.id} {self.date} {self.time} {self.status}>"
