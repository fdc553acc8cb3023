# app/schemas/staff.py
from __future__ import annotations

from typing import Optional

from pydantic import Field, field_validator

from app.models.staff import ServiceCategory
from app.schemas.booking import CamelModel


class StaffBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    service_category: ServiceCategory
    calendar_id: Optional[str] = Field(None, description="External calendar identifier")
    display_order: int = Field(0, ge=0)

    @field_validator("calendar_id", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class StaffCreate(StaffBase):
    pass


class StaffUpdate(CamelModel):
    """Partial update, only the given fields change"""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    service_category: Optional[ServiceCategory] = None
    calendar_id: Optional[str] = None
    display_order: Optional[int] = Field(None, ge=0)

    @field_validator("calendar_id", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class StaffRead(StaffBase):
    id: str
