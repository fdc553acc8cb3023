# ============================================================================
# app/services/booking/booking_service.py
# ============================================================================
"""Booking lifecycle: pending -> confirmed | rejected, plus modify and delete"""
import logging
from datetime import datetime, time, timedelta
from typing import List, Optional
from zoneinfo import ZoneInfo

from fastapi import BackgroundTasks
from sqlalchemy.orm import Session

from app.config.settings import Settings, get_settings
from app.core.exceptions import BookingNotFoundError, BookingValidationError
from app.models.booking import Booking, BookingStatus
from app.schemas.booking import BookingCreate, BookingModify, BookingRead
from app.services.calendar.google_calendar_service import GoogleCalendarService
from app.services.notifications.booking_notifier import BookingNotifier
from app.services.staff.staff_service import StaffService

logger = logging.getLogger(__name__)

DEFAULT_EVENT_DURATION_MINUTES = 90


class BookingService:
    """
    Owns the Booking entity and its state machine.

    The database write is the only step whose failure aborts an operation.
    Calendar sync and emails are best-effort: they are bounded by a timeout,
    their errors are logged, and emails go through ``background`` (sent after
    the response) when one is supplied.
    """

    def __init__(
            self,
            db: Session,
            calendar: Optional[GoogleCalendarService] = None,
            notifier: Optional[BookingNotifier] = None,
            background: Optional[BackgroundTasks] = None,
            settings: Optional[Settings] = None,
    ):
        self.db = db
        self.calendar = calendar
        self.notifier = notifier
        self.background = background
        self.settings = settings or get_settings()
        self.tz = ZoneInfo(self.settings.BUSINESS_TIMEZONE)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_booking(self, booking_id: str) -> Optional[Booking]:
        return self.db.query(Booking).filter(Booking.id == booking_id).first()

    def list_bookings(self, status: Optional[BookingStatus] = None) -> List[Booking]:
        """Bookings in chronological order, optionally filtered by status"""
        query = self.db.query(Booking)
        if status is not None:
            query = query.filter(Booking.status == BookingStatus(status).value)
        return query.order_by(Booking.date, Booking.time, Booking.created_at).all()

    def _get_or_raise(self, booking_id: str) -> Booking:
        booking = self.get_booking(booking_id)
        if booking is None:
            raise BookingNotFoundError(booking_id)
        return booking

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def create_booking(self, data: BookingCreate) -> Booking:
        """
        Store a new pending booking.

        Slot conflicts are not re-checked here; the availability endpoint is
        advisory and an operator resolves double submissions at approval time.
        """
        staff_name = data.staff_name
        if data.staff_id:
            staff = StaffService.get_staff(self.db, data.staff_id)
            if staff is None:
                raise BookingValidationError("staffId: unknown staff member")
            staff_name = staff.name

        booking = Booking(
            full_name=data.full_name,
            email=str(data.email),
            phone=data.phone,
            service=data.service,
            staff_id=data.staff_id,
            staff_name=staff_name,
            date=data.date,
            time=data.time,
            duration=data.duration,
            notes=data.notes,
            status=BookingStatus.PENDING.value,
        )
        self.db.add(booking)
        self.db.commit()
        self.db.refresh(booking)

        logger.info(f"Created booking {booking.id} for {booking.date} {booking.time}")

        if self.notifier is not None:
            await self._notify(self.notifier.booking_created, BookingRead.model_validate(booking))
        return booking

    async def approve_booking(self, booking_id: str) -> Booking:
        """
        Confirm a pending (or previously rejected) booking.

        Approving an already confirmed booking is a no-op and returns it unchanged.
        """
        booking = self._get_or_raise(booking_id)

        if booking.status == BookingStatus.CONFIRMED.value:
            logger.info(f"Booking {booking_id} already confirmed, nothing to do")
            return booking

        event_id = None
        if booking.calendar_event_id:
            # Left over from a rejection whose event delete failed
            if await self._delete_calendar_event(booking):
                booking.calendar_event_id = None
            else:
                logger.warning(
                    f"Keeping existing calendar event {booking.calendar_event_id} for booking {booking_id}"
                )

        if not booking.calendar_event_id:
            event_id = await self._create_calendar_event(booking)

        booking.status = BookingStatus.CONFIRMED.value
        booking.rejection_reason = None
        if event_id:
            booking.calendar_event_id = event_id
        self.db.commit()
        self.db.refresh(booking)

        logger.info(f"Approved booking {booking_id}")

        if self.notifier is not None:
            await self._notify(self.notifier.booking_confirmed, BookingRead.model_validate(booking))
        return booking

    async def reject_booking(self, booking_id: str, reason: Optional[str] = None) -> Booking:
        """
        Reject a pending or confirmed booking, freeing its slot.

        Rejecting an already rejected booking is a no-op and returns it unchanged.
        """
        booking = self._get_or_raise(booking_id)

        if booking.status == BookingStatus.REJECTED.value:
            logger.info(f"Booking {booking_id} already rejected, nothing to do")
            return booking

        if booking.calendar_event_id and await self._delete_calendar_event(booking):
            booking.calendar_event_id = None

        booking.status = BookingStatus.REJECTED.value
        booking.rejection_reason = reason
        self.db.commit()
        self.db.refresh(booking)

        logger.info(f"Rejected booking {booking_id}")

        if self.notifier is not None:
            await self._notify(self.notifier.booking_rejected, BookingRead.model_validate(booking), reason)
        return booking

    def modify_booking(self, booking_id: str, changes: BookingModify) -> Booking:
        """
        Change time and/or duration. Status is untouched and conflicts are not re-checked.

        A mirrored calendar event is not moved; it keeps the old time until the
        booking is rejected or deleted.
        """
        booking = self._get_or_raise(booking_id)

        if changes.time is not None:
            booking.time = changes.time
        if changes.duration is not None:
            booking.duration = changes.duration

        self.db.commit()
        self.db.refresh(booking)

        logger.info(f"Modified booking {booking_id}: time={booking.time} duration={booking.duration}")
        return booking

    async def delete_booking(self, booking_id: str) -> bool:
        """Hard delete, removing the mirrored calendar event first when there is one"""
        booking = self._get_or_raise(booking_id)

        if booking.calendar_event_id:
            await self._delete_calendar_event(booking)

        self.db.delete(booking)
        self.db.commit()

        logger.info(f"Deleted booking {booking_id}")
        return True

    # ------------------------------------------------------------------
    # Best-effort side effects
    # ------------------------------------------------------------------

    async def _notify(self, send, *args) -> None:
        if self.background is not None:
            self.background.add_task(send, *args)
        else:
            await send(*args)

    def _staff_calendar_id(self, booking: Booking) -> Optional[str]:
        if self.calendar is None or not self.calendar.is_configured or not booking.staff_id:
            return None
        staff = StaffService.get_staff(self.db, booking.staff_id)
        return staff.calendar_id if staff else None

    async def _create_calendar_event(self, booking: Booking) -> Optional[str]:
        calendar_id = self._staff_calendar_id(booking)
        if not calendar_id:
            return None

        try:
            start = datetime.combine(booking.date, time.fromisoformat(booking.time), tzinfo=self.tz)
            end = start + timedelta(minutes=booking.duration_minutes or DEFAULT_EVENT_DURATION_MINUTES)

            description = "\n".join(filter(None, [
                "Booking Details:",
                f"Client: {booking.full_name}",
                f"Phone: {booking.phone}",
                f"Email: {booking.email}",
                f"Service: {booking.service}",
                f"Staff: {booking.staff_name}",
                f"Duration: {booking.duration} minutes",
                f"Notes: {booking.notes}" if booking.notes else None,
            ]))

            event_id = await self.calendar.create_event(
                calendar_id,
                summary=f"{booking.service} - {booking.full_name}",
                description=description,
                start=start,
                end=end,
                attendee_email=booking.email,
            )
        except Exception as e:
            logger.error(f"Failed to create calendar event for booking {booking.id}: {e!r}")
            return None

        logger.info(f"Calendar event {event_id} created for booking {booking.id}")
        return event_id

    async def _delete_calendar_event(self, booking: Booking) -> bool:
        calendar_id = self._staff_calendar_id(booking)
        if not calendar_id:
            return False

        try:
            await self.calendar.delete_event(calendar_id, booking.calendar_event_id)
        except Exception as e:
            logger.error(
                f"Failed to delete calendar event {booking.calendar_event_id} for booking {booking.id}: {e!r}"
            )
            return False
        return True
