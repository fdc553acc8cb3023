# ===== app/services/availability/availability_service.py =====
from datetime import date, datetime, time, timedelta, timezone
from typing import Callable, List, Optional, Set
from zoneinfo import ZoneInfo
import logging

from sqlalchemy.orm import Session

from app.config.settings import Settings, get_settings
from app.models.booking import Booking, BLOCKING_STATUSES
from app.models.staff import Staff
from app.services.booking.slot_catalog import (
    SLOT_CATALOG,
    ordered,
    slot_to_minutes,
    slots_covering,
    slots_in_hours,
    is_catalog_slot,
)
from app.services.calendar.google_calendar_service import BusyPeriod, GoogleCalendarService
from app.services.staff.staff_service import StaffService

logger = logging.getLogger(__name__)


def busy_period_slots(period: BusyPeriod, day: date, tz: ZoneInfo) -> Set[str]:
    """
    Catalog slots blocked by an external busy period on ``day``.

    The period is clipped to the local day and blocks every slot in the whole
    hours from its start hour through the hour of ``end - 1ms``.
    """
    start, end = period.start, period.end
    if start.tzinfo is None:
        start = start.replace(tzinfo=timezone.utc)
    if end.tzinfo is None:
        end = end.replace(tzinfo=timezone.utc)

    day_start = datetime.combine(day, time.min, tzinfo=tz)
    day_end = day_start + timedelta(days=1)
    start = max(start.astimezone(tz), day_start)
    end = min(end.astimezone(tz), day_end)
    if end <= start:
        return set()

    last = end - timedelta(milliseconds=1)
    return slots_in_hours(range(start.hour, last.hour + 1))


class AvailabilityService:
    """Computes which catalog slots are still free on a given day"""

    def __init__(
            self,
            db: Session,
            calendar: Optional[GoogleCalendarService] = None,
            clock: Optional[Callable[[], datetime]] = None,
            settings: Optional[Settings] = None,
    ):
        self.db = db
        self.calendar = calendar
        self.settings = settings or get_settings()
        self.tz = ZoneInfo(self.settings.BUSINESS_TIMEZONE)
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    async def get_available_slots(self, day: date, staff_id: Optional[str] = None) -> List[str]:
        """Free slots for ``day`` in catalog order"""
        blocked = await self._blocked(day, staff_id)
        return [slot for slot in SLOT_CATALOG if slot not in blocked]

    async def get_blocked_slots(self, day: date, staff_id: Optional[str] = None) -> List[str]:
        """Catalog complement of get_available_slots"""
        return ordered(await self._blocked(day, staff_id))

    async def _blocked(self, day: date, staff_id: Optional[str]) -> Set[str]:
        staff = self._resolve_staff(staff_id)

        blocked = self._booked_slots(day, staff)

        if staff is not None and staff.calendar_id:
            blocked |= await self._calendar_busy_slots(staff.calendar_id, day)

        blocked |= self._lead_time_slots(day)
        return blocked

    def _resolve_staff(self, staff_id: Optional[str]) -> Optional[Staff]:
        if not staff_id:
            return None
        staff = StaffService.get_staff(self.db, staff_id)
        if staff is None:
            # Unknown staff: fall back to every booking of the day
            logger.warning(f"Availability requested for unknown staff {staff_id}, ignoring staff filter")
        return staff

    def _booked_slots(self, day: date, staff: Optional[Staff]) -> Set[str]:
        query = self.db.query(Booking).filter(
            Booking.date == day,
            Booking.status.in_(BLOCKING_STATUSES),
        )
        if staff is not None:
            query = query.filter(Booking.staff_id.in_(StaffService.staff_group(self.db, staff)))

        blocked = set()
        for booking in query.all():
            try:
                start_minutes = slot_to_minutes(booking.time)
            except ValueError:
                logger.error(f"Invalid time for booking {booking.id}: {booking.time!r}")
                continue

            duration = booking.duration_minutes
            if duration is None:
                logger.error(f"Invalid duration for booking {booking.id}: {booking.duration!r}")
                if is_catalog_slot(booking.time):
                    blocked.add(booking.time)
                continue

            blocked |= slots_covering(start_minutes, duration)
        return blocked

    async def _calendar_busy_slots(self, calendar_id: str, day: date) -> Set[str]:
        if self.calendar is None or not self.calendar.is_configured:
            return set()

        try:
            periods = await self.calendar.get_busy_periods([calendar_id], day)
        except Exception as e:
            # Fail open: a calendar outage must not block every booking
            logger.error(f"Error checking calendar {calendar_id} availability: {e!r}")
            return set()

        busy = set()
        for period in periods:
            busy |= busy_period_slots(period, day, self.tz)
        return busy

    def _lead_time_slots(self, day: date) -> Set[str]:
        now = self.clock().astimezone(self.tz)
        if day != now.date():
            return set()

        threshold = now + timedelta(minutes=self.settings.BOOKING_LEAD_TIME_MINUTES)
        return {
            slot
            for slot in SLOT_CATALOG
            if datetime.combine(day, time.fromisoformat(slot), tzinfo=self.tz) < threshold
        }
