# app/api/v1/public/staff.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.models.staff import ServiceCategory
from app.schemas.staff import StaffRead
from app.services.staff.staff_service import StaffService

router = APIRouter(prefix="/staff", tags=["Staff"])


@router.get("", response_model=List[StaffRead])
async def list_staff(db: Session = Depends(get_db)):
    """All specialists in display order"""
    return StaffService.list_staff(db)


@router.get("/category/{category}", response_model=List[StaffRead])
async def list_staff_by_category(category: ServiceCategory, db: Session = Depends(get_db)):
    """Specialists offering one service category"""
    return StaffService.list_by_category(db, category.value)
