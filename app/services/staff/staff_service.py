# ============================================================================
# app/services/staff/staff_service.py
# ============================================================================
"""Service for managing bookable specialists"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import StaffNotFoundError
from app.models.staff import Staff
from app.schemas.staff import StaffCreate, StaffUpdate

logger = logging.getLogger(__name__)


class StaffService:
    """Handles staff CRUD. Bookings are never touched here."""

    @staticmethod
    def list_staff(db: Session) -> List[Staff]:
        return db.query(Staff).order_by(Staff.display_order, Staff.name).all()

    @staticmethod
    def list_by_category(db: Session, category: str) -> List[Staff]:
        return (
            db.query(Staff)
            .filter(Staff.service_category == category)
            .order_by(Staff.display_order, Staff.name)
            .all()
        )

    @staticmethod
    def get_staff(db: Session, staff_id: str) -> Optional[Staff]:
        return db.query(Staff).filter(Staff.id == staff_id).first()

    @staticmethod
    def staff_group(db: Session, staff: Staff) -> List[str]:
        """Ids of every staff entry sharing this member's calendar (at least the member itself)"""
        if not staff.calendar_id:
            return [staff.id]
        ids = [
            row.id
            for row in db.query(Staff.id).filter(Staff.calendar_id == staff.calendar_id).all()
        ]
        if len(ids) > 1:
            logger.info(f"Staff {staff.name} shares calendar with {len(ids)} staff member(s)")
        return ids

    @staticmethod
    def create_staff(db: Session, data: StaffCreate) -> Staff:
        staff = Staff(
            name=data.name,
            service_category=data.service_category.value,
            calendar_id=data.calendar_id,
            display_order=data.display_order,
        )
        db.add(staff)
        db.commit()
        db.refresh(staff)
        logger.info(f"Created staff member {staff.id} ({staff.name})")
        return staff

    @staticmethod
    def update_staff(db: Session, staff_id: str, data: StaffUpdate) -> Staff:
        staff = StaffService.get_staff(db, staff_id)
        if not staff:
            raise StaffNotFoundError(staff_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            # Only the calendar id may be cleared
            if value is None and field != "calendar_id":
                continue
            if field == "service_category":
                value = value.value if hasattr(value, "value") else value
            setattr(staff, field, value)

        db.commit()
        db.refresh(staff)
        return staff

    @staticmethod
    def delete_staff(db: Session, staff_id: str) -> None:
        staff = StaffService.get_staff(db, staff_id)
        if not staff:
            raise StaffNotFoundError(staff_id)

        db.delete(staff)
        db.commit()
        logger.info(f"Deleted staff member {staff_id}")
