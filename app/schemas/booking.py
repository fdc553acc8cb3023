# app/schemas/booking.py
from __future__ import annotations

import re
from datetime import date as date_type, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from app.config.settings import get_settings
from app.models.booking import BookingStatus
from app.services.booking.slot_catalog import MAX_DURATION_MINUTES, is_catalog_slot

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_booking_date(value) -> date_type:
    """Parse a YYYY-MM-DD calendar date. Datetimes and other formats are rejected."""
    if isinstance(value, datetime):
        raise ValueError("Date must not carry a time component")
    if isinstance(value, date_type):
        return value
    if not isinstance(value, str) or not _DATE_PATTERN.match(value):
        raise ValueError("Date must be in YYYY-MM-DD format")
    try:
        return date_type.fromisoformat(value)
    except ValueError:
        raise ValueError(f"Invalid calendar date: {value}") from None


def _normalize_duration(value) -> str:
    if isinstance(value, bool):
        raise ValueError("Duration must be a whole number of minutes")
    try:
        minutes = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValueError("Duration must be a whole number of minutes") from None
    if minutes <= 0:
        raise ValueError("Duration must be positive")
    if minutes > MAX_DURATION_MINUTES:
        raise ValueError(f"Duration must be at most {MAX_DURATION_MINUTES} minutes")
    return str(minutes)


def _check_slot(value: str) -> str:
    if not is_catalog_slot(value):
        raise ValueError(f"Time {value!r} is not a bookable slot")
    return value


class CamelModel(BaseModel):
    """Base model exposing camelCase keys while accepting snake_case too"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class BookingCreate(CamelModel):
    """Booking request submitted from the public booking form"""
    full_name: str = Field(..., min_length=1, max_length=200, description="Client full name")
    email: EmailStr = Field(..., description="Client email")
    phone: str = Field(..., min_length=3, max_length=50, description="Client phone number")
    service: str = Field(..., min_length=1, description="Requested service")
    staff_id: Optional[str] = Field(None, description="Requested specialist")
    staff_name: Optional[str] = Field(None, description="Specialist display name")
    date: date_type = Field(..., description="Appointment date, YYYY-MM-DD")
    time: str = Field(..., description="Slot start, HH:MM")
    duration: str = Field(
        default_factory=lambda: get_settings().DEFAULT_BOOKING_DURATION,
        description="Duration in minutes",
    )
    notes: Optional[str] = Field(None, max_length=2000)

    @field_validator("full_name", "phone", "service", mode="before")
    @classmethod
    def strip_required(cls, v):
        if isinstance(v, str):
            v = v.strip()
        return v

    @field_validator("staff_id", "staff_name", "notes", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("date", mode="before")
    @classmethod
    def validate_date(cls, v):
        return parse_booking_date(v)

    @field_validator("time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        return _check_slot(v)

    @field_validator("duration", mode="before")
    @classmethod
    def validate_duration(cls, v):
        return _normalize_duration(v)


class BookingModify(CamelModel):
    """Admin change of time and/or duration"""
    time: Optional[str] = None
    duration: Optional[str] = None

    @field_validator("time")
    @classmethod
    def validate_time(cls, v: Optional[str]) -> Optional[str]:
        return _check_slot(v) if v is not None else v

    @field_validator("duration", mode="before")
    @classmethod
    def validate_duration(cls, v):
        return _normalize_duration(v) if v is not None else v

    @model_validator(mode="after")
    def require_change(self):
        if self.time is None and self.duration is None:
            raise ValueError("Provide time and/or duration")
        return self


class BookingReject(CamelModel):
    reason: Optional[str] = Field(None, max_length=500)

    @field_validator("reason", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class BookingRead(CamelModel):
    """Booking as returned by the API"""
    id: str
    full_name: str
    email: str
    phone: str
    service: str
    staff_id: Optional[str] = None
    staff_name: Optional[str] = None
    date: date_type
    time: str
    duration: str
    status: BookingStatus
    rejection_reason: Optional[str] = None
    notes: Optional[str] = None
    calendar_event_id: Optional[str] = None
    created_at: Optional[datetime] = None


class AvailabilityResponse(CamelModel):
    date: date_type
    booked_times: List[str] = Field(default_factory=list, description="Blocked slots")
    available_times: List[str] = Field(default_factory=list, description="Free slots")


class DeleteResponse(BaseModel):
    success: bool
    message: str
