# ============================================================================
# FILE: app/api/v1/admin/bookings.py
# Operator endpoints for reviewing and managing bookings
# ============================================================================
from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from app.api.dependencies import get_booking_service, require_admin
from app.core.exceptions import BookingNotFoundError
from app.models.booking import BookingStatus
from app.schemas.booking import BookingModify, BookingRead, BookingReject, DeleteResponse
from app.services.booking.booking_service import BookingService

router = APIRouter(
    prefix="/admin/bookings",
    tags=["Admin - Bookings"],
    dependencies=[Depends(require_admin)],
)


# ============================================================================
# Listing
# ============================================================================

@router.get("", response_model=List[BookingRead])
async def list_bookings(
        status: Optional[BookingStatus] = Query(None, description="Filter by status"),
        service: BookingService = Depends(get_booking_service),
):
    """All bookings in chronological order"""
    return service.list_bookings(status)


@router.get("/pending", response_model=List[BookingRead])
async def list_pending_bookings(service: BookingService = Depends(get_booking_service)):
    return service.list_bookings(BookingStatus.PENDING)


@router.get("/confirmed", response_model=List[BookingRead])
async def list_confirmed_bookings(service: BookingService = Depends(get_booking_service)):
    return service.list_bookings(BookingStatus.CONFIRMED)


@router.get("/{booking_id}", response_model=BookingRead)
async def get_booking(booking_id: str, service: BookingService = Depends(get_booking_service)):
    booking = service.get_booking(booking_id)
    if booking is None:
        raise BookingNotFoundError(booking_id)
    return booking


# ============================================================================
# Lifecycle
# ============================================================================

@router.post("/{booking_id}/approve", response_model=BookingRead)
async def approve_booking(booking_id: str, service: BookingService = Depends(get_booking_service)):
    """
    Confirm a booking.

    Creates the event on the specialist's calendar and emails the client.
    Both are best-effort; the booking is confirmed even if they fail.
    """
    return await service.approve_booking(booking_id)


@router.post("/{booking_id}/reject", response_model=BookingRead)
async def reject_booking(
        booking_id: str,
        body: Optional[BookingReject] = None,
        service: BookingService = Depends(get_booking_service),
):
    """Reject a booking with an optional reason that is passed on to the client"""
    reason = body.reason if body is not None else None
    return await service.reject_booking(booking_id, reason)


@router.put("/{booking_id}/modify", response_model=BookingRead)
async def modify_booking(
        booking_id: str,
        changes: BookingModify,
        service: BookingService = Depends(get_booking_service),
):
    """Move a booking to another slot and/or change its duration"""
    return service.modify_booking(booking_id, changes)


@router.delete("/{booking_id}", response_model=DeleteResponse)
async def delete_booking(booking_id: str, service: BookingService = Depends(get_booking_service)):
    """Permanently delete a booking and its calendar event"""
    await service.delete_booking(booking_id)
    return DeleteResponse(success=True, message="Booking deleted successfully")
