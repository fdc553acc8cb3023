# app/models/staff.py
from sqlalchemy import Column, String, Integer, DateTime
from sqlalchemy.sql import func
import enum
import uuid

from app.models.base import Base


class ServiceCategory(str, enum.Enum):
    NAILS = "nails"
    EPILATION = "epilation"
    COSMETOLOGY = "cosmetology"


class Staff(Base):
    """A bookable specialist"""
    __tablename__ = "staff"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(200), nullable=False)
    service_category = Column(String(50), nullable=False, index=True)

    # External calendar identifier; several staff entries may share one calendar
    calendar_id = Column(String, nullable=True)
    display_order = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
