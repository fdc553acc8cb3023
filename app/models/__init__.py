# app/models/__init__.py
from .base import Base
from .booking import Booking, BookingStatus, BLOCKING_STATUSES
from .staff import Staff, ServiceCategory
from .user import AdminUser

__all__ = [
    "Base",
    "Booking",
    "BookingStatus",
    "BLOCKING_STATUSES",
    "Staff",
    "ServiceCategory",
    "AdminUser",
]
