"""Availability resolution: bookings, shared calendars, busy periods, lead time."""
from datetime import date, datetime, timezone

import pytest

from app.services.availability.availability_service import AvailabilityService, busy_period_slots
from app.services.booking.slot_catalog import SLOT_CATALOG
from app.services.calendar.google_calendar_service import BusyPeriod
from tests.conftest import BOOKING_DAY, TBILISI, FakeCalendar, local_clock, make_booking, make_staff


def service(db, calendar=None, clock=None):
    return AvailabilityService(db, calendar, clock=clock or local_clock())


class TestBookedSlots:

    async def test_empty_day_is_whole_catalog(self, db):
        assert await service(db).get_available_slots(BOOKING_DAY) == list(SLOT_CATALOG)

    async def test_result_is_ordered_subset_without_duplicates(self, db):
        staff = make_staff(db)
        make_booking(db, "12:00", staff=staff, duration="90")
        make_booking(db, "12:30", staff=staff, status="confirmed")

        slots = await service(db).get_available_slots(BOOKING_DAY, staff.id)

        assert set(slots) <= set(SLOT_CATALOG)
        assert len(slots) == len(set(slots))
        assert slots == [s for s in SLOT_CATALOG if s in slots]

    async def test_pending_and_confirmed_block_rejected_frees(self, db):
        staff = make_staff(db)
        make_booking(db, "11:00", staff=staff, status="pending")
        make_booking(db, "12:00", staff=staff, status="confirmed")
        make_booking(db, "13:00", staff=staff, status="rejected")

        slots = await service(db).get_available_slots(BOOKING_DAY, staff.id)

        assert "11:00" not in slots
        assert "12:00" not in slots
        assert "13:00" in slots

    async def test_duration_blocks_covered_slots(self, db):
        staff = make_staff(db)
        make_booking(db, "14:00", staff=staff, duration="90")

        blocked = await service(db).get_blocked_slots(BOOKING_DAY, staff.id)

        assert blocked == ["14:00", "14:30", "15:00"]

    async def test_stored_huge_duration_blocks_rest_of_day(self, db):
        staff = make_staff(db)
        make_booking(db, "17:00", staff=staff, duration="100000000000000")

        blocked = await service(db).get_blocked_slots(BOOKING_DAY, staff.id)

        assert blocked == ["17:00", "17:30", "18:00", "18:30"]

    @pytest.mark.parametrize("duration", ["abc", "0", "-30"])
    async def test_invalid_duration_blocks_start_only(self, db, duration):
        staff = make_staff(db)
        make_booking(db, "14:00", staff=staff, duration=duration)

        assert await service(db).get_blocked_slots(BOOKING_DAY, staff.id) == ["14:00"]

    async def test_other_days_ignored(self, db):
        staff = make_staff(db)
        make_booking(db, "14:00", day=date(2026, 1, 11), staff=staff)

        assert "14:00" in await service(db).get_available_slots(BOOKING_DAY, staff.id)

    async def test_staff_filter_only_counts_that_staff(self, db):
        nino = make_staff(db, "Nino")
        ana = make_staff(db, "Ana")
        make_booking(db, "14:00", staff=ana)

        assert "14:00" in await service(db).get_available_slots(BOOKING_DAY, nino.id)
        assert "14:00" not in await service(db).get_available_slots(BOOKING_DAY, ana.id)

    async def test_no_staff_filter_counts_every_booking(self, db):
        ana = make_staff(db, "Ana")
        make_booking(db, "14:00", staff=ana)
        make_booking(db, "16:00")

        blocked = await service(db).get_blocked_slots(BOOKING_DAY)

        assert blocked == ["14:00", "16:00"]

    async def test_unknown_staff_falls_back_to_all_bookings(self, db):
        ana = make_staff(db, "Ana")
        make_booking(db, "14:00", staff=ana)
        calendar = FakeCalendar()

        slots = await service(db, calendar).get_available_slots(BOOKING_DAY, "no-such-staff")

        assert "14:00" not in slots
        assert calendar.busy_queries == []

    async def test_shared_calendar_groups_staff(self, db):
        laser_1 = make_staff(db, "Laser 1", "epilation", calendar_id="laser@studio")
        laser_2 = make_staff(db, "Laser 2", "epilation", calendar_id="laser@studio")
        make_booking(db, "15:00", staff=laser_2)

        slots = await service(db).get_available_slots(BOOKING_DAY, laser_1.id)

        assert "15:00" not in slots


class TestCalendarBusy:

    async def test_busy_period_blocks_whole_hours(self, db):
        staff = make_staff(db, calendar_id="nino@studio")
        calendar = FakeCalendar()
        calendar.busy = [BusyPeriod(
            datetime(2026, 1, 10, 12, 15, tzinfo=TBILISI),
            datetime(2026, 1, 10, 13, 0, tzinfo=TBILISI),
        )]

        blocked = await service(db, calendar).get_blocked_slots(BOOKING_DAY, staff.id)

        assert blocked == ["12:00", "12:30"]
        assert calendar.busy_queries == [(["nino@studio"], BOOKING_DAY)]

    async def test_utc_busy_period_converted_to_local_time(self, db):
        staff = make_staff(db, calendar_id="nino@studio")
        calendar = FakeCalendar()
        # 11:00-12:30 UTC is 15:00-16:30 in Tbilisi
        calendar.busy = [BusyPeriod(
            datetime(2026, 1, 10, 11, 0, tzinfo=timezone.utc),
            datetime(2026, 1, 10, 12, 30, tzinfo=timezone.utc),
        )]

        blocked = await service(db, calendar).get_blocked_slots(BOOKING_DAY, staff.id)

        assert blocked == ["15:00", "15:30", "16:00", "16:30"]

    async def test_calendar_failure_fails_open(self, db):
        staff = make_staff(db, calendar_id="nino@studio")
        calendar = FakeCalendar()
        calendar.fail_busy = True

        assert await service(db, calendar).get_available_slots(BOOKING_DAY, staff.id) == list(SLOT_CATALOG)

    async def test_unconfigured_calendar_not_queried(self, db):
        staff = make_staff(db, calendar_id="nino@studio")
        calendar = FakeCalendar(configured=False)

        await service(db, calendar).get_available_slots(BOOKING_DAY, staff.id)

        assert calendar.busy_queries == []

    def test_busy_period_clipped_to_day(self):
        period = BusyPeriod(
            datetime(2026, 1, 9, 20, 0, tzinfo=TBILISI),
            datetime(2026, 1, 10, 10, 30, tzinfo=TBILISI),
        )
        assert busy_period_slots(period, BOOKING_DAY, TBILISI) == {"10:00", "10:30"}

    def test_busy_period_on_other_day_blocks_nothing(self):
        period = BusyPeriod(
            datetime(2026, 1, 11, 12, 0, tzinfo=TBILISI),
            datetime(2026, 1, 11, 13, 0, tzinfo=TBILISI),
        )
        assert busy_period_slots(period, BOOKING_DAY, TBILISI) == set()


class TestLeadTime:

    async def test_same_day_slots_inside_lead_time_removed(self, db):
        clock = local_clock(2026, 1, 10, 17, 15)

        slots = await service(db, clock=clock).get_available_slots(BOOKING_DAY)

        assert "17:30" not in slots
        assert "18:00" not in slots
        assert slots == ["18:30"]

    async def test_lead_time_boundary_is_exclusive(self, db):
        clock = local_clock(2026, 1, 10, 17, 0)

        slots = await service(db, clock=clock).get_available_slots(BOOKING_DAY)

        assert slots == ["18:00", "18:30"]

    async def test_other_days_unaffected(self, db):
        clock = local_clock(2026, 1, 9, 17, 15)

        assert await service(db, clock=clock).get_available_slots(BOOKING_DAY) == list(SLOT_CATALOG)

    async def test_clock_in_utc_uses_business_day(self, db):
        # 13:30 UTC is 17:30 in Tbilisi
        clock = lambda: datetime(2026, 1, 10, 13, 30, tzinfo=timezone.utc)

        assert await service(db, clock=clock).get_available_slots(BOOKING_DAY) == ["18:30"]
