# ============================================================================
# FILE: app/api/v1/admin/staff.py
# Operator endpoints for managing specialists
# ============================================================================
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from app.api.dependencies import get_calendar_service, get_db, require_admin
from app.core.exceptions import StaffNotFoundError
from app.schemas.booking import DeleteResponse
from app.schemas.staff import StaffCreate, StaffRead, StaffUpdate
from app.services.calendar.google_calendar_service import GoogleCalendarService
from app.services.staff.staff_service import StaffService

router = APIRouter(
    prefix="/admin/staff",
    tags=["Admin - Staff"],
    dependencies=[Depends(require_admin)],
)


@router.get("", response_model=List[StaffRead])
async def list_staff(db: Session = Depends(get_db)):
    return StaffService.list_staff(db)


@router.post("", response_model=StaffRead, status_code=status.HTTP_201_CREATED)
async def create_staff(data: StaffCreate, db: Session = Depends(get_db)):
    return StaffService.create_staff(db, data)


@router.put("/{staff_id}", response_model=StaffRead)
async def update_staff(staff_id: str, data: StaffUpdate, db: Session = Depends(get_db)):
    """Partial update; send ``calendarId: null`` to detach the calendar"""
    return StaffService.update_staff(db, staff_id, data)


@router.delete("/{staff_id}", response_model=DeleteResponse)
async def delete_staff(staff_id: str, db: Session = Depends(get_db)):
    """Delete a specialist. Existing bookings keep the stored staff name."""
    StaffService.delete_staff(db, staff_id)
    return DeleteResponse(success=True, message="Staff member deleted successfully")


@router.get("/{staff_id}/calendar-check")
async def check_staff_calendar(
        staff_id: str,
        db: Session = Depends(get_db),
        calendar: GoogleCalendarService = Depends(get_calendar_service),
):
    """
    Verify the service account can read this specialist's calendar.

    Returns ``{"success": true, "calendarSummary": ...}`` or
    ``{"success": false, "error": ...}``; never fails with 5xx.
    """
    staff = StaffService.get_staff(db, staff_id)
    if staff is None:
        raise StaffNotFoundError(staff_id)

    if not staff.calendar_id:
        return {"success": False, "error": "No calendar configured for this staff member"}

    return await calendar.check_access(staff.calendar_id)
