# ============================================================================
# FILE: app/api/v1/public/bookings.py
# Public booking form endpoints - no authentication
# ============================================================================
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.api.dependencies import get_availability_service, get_booking_service
from app.schemas.booking import AvailabilityResponse, BookingCreate, BookingRead, parse_booking_date
from app.services.availability.availability_service import AvailabilityService
from app.services.booking.booking_service import BookingService
from app.services.booking.slot_catalog import SLOT_CATALOG

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("", response_model=BookingRead, status_code=201)
async def create_booking(
        booking: BookingCreate,
        service: BookingService = Depends(get_booking_service),
):
    """
    Submit a booking request. It is stored as pending until an operator
    approves or rejects it.
    """
    return await service.create_booking(booking)


@router.get("/availability", response_model=AvailabilityResponse)
async def get_availability(
        date: Optional[str] = Query(None, description="Day to check, YYYY-MM-DD"),
        staff_id: Optional[str] = Query(None, alias="staffId", description="Optional specialist"),
        availability: AvailabilityService = Depends(get_availability_service),
):
    """
    Blocked and free slots for a day.

    ``bookedTimes`` lists every catalog slot that cannot be booked (existing
    bookings, the specialist's calendar, same-day lead time).
    """
    if not date:
        raise HTTPException(status_code=400, detail="Date parameter is required")
    try:
        day = parse_booking_date(date)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    available = await availability.get_available_slots(day, staff_id)
    free = set(available)

    return AvailabilityResponse(
        date=day,
        booked_times=[slot for slot in SLOT_CATALOG if slot not in free],
        available_times=available,
    )
