# app/schemas/__init__.py
from .booking import (
    CamelModel,
    BookingCreate,
    BookingModify,
    BookingReject,
    BookingRead,
    AvailabilityResponse,
    DeleteResponse,
    parse_booking_date,
)

from .staff import (
    StaffCreate,
    StaffUpdate,
    StaffRead,
)

from .auth import (
    LoginRequest,
    LoginResponse,
    AdminUserRead,
    AuthCheckResponse,
)

__all__ = [
    # Booking schemas
    "CamelModel",
    "BookingCreate",
    "BookingModify",
    "BookingReject",
    "BookingRead",
    "AvailabilityResponse",
    "DeleteResponse",
    "parse_booking_date",
    # Staff schemas
    "StaffCreate",
    "StaffUpdate",
    "StaffRead",
    # Auth schemas
    "LoginRequest",
    "LoginResponse",
    "AdminUserRead",
    "AuthCheckResponse",
]
