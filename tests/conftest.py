"""Shared test fixtures and helpers."""
import os

# Configure the app for an isolated in-memory run before anything imports settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["EMAIL_USERNAME"] = ""
os.environ["EMAIL_PASSWORD"] = ""
os.environ["GOOGLE_CALENDAR_SERVICE_ACCOUNT"] = ""
os.environ["BUSINESS_TIMEZONE"] = "Asia/Tbilisi"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"

from datetime import date, datetime
from typing import List, Optional
from zoneinfo import ZoneInfo

import pytest
from fastapi import Depends
from fastapi.testclient import TestClient

from app.api.dependencies import (
    get_availability_service,
    get_calendar_service,
    get_notifier,
)
from app.config.database import SessionLocal, engine, get_db
from app.main import app
from app.models import AdminUser, Base, Booking, Staff
from app.services.availability.availability_service import AvailabilityService
from app.services.calendar.google_calendar_service import BusyPeriod

TBILISI = ZoneInfo("Asia/Tbilisi")
BOOKING_DAY = date(2026, 1, 10)
ADMIN_USERNAME = "owner"
ADMIN_PASSWORD = "SecurePass123!"


class FakeCalendar:
    """Stands in for GoogleCalendarService and records every call."""

    def __init__(self, configured: bool = True):
        self.is_configured = configured
        self.busy: List[BusyPeriod] = []
        self.fail_busy = False
        self.fail_create = False
        self.fail_delete = False
        self.busy_queries = []
        self.created = []
        self.deleted = []
        self._next_id = 0

    async def get_busy_periods(self, calendar_ids, day):
        self.busy_queries.append((list(calendar_ids), day))
        if self.fail_busy:
            raise TimeoutError("calendar timed out")
        return list(self.busy)

    async def create_event(self, calendar_id, summary, description, start, end, attendee_email=None):
        if self.fail_create:
            raise RuntimeError("calendar unavailable")
        self._next_id += 1
        event_id = f"evt-{self._next_id}"
        self.created.append({
            "id": event_id,
            "calendar_id": calendar_id,
            "summary": summary,
            "description": description,
            "start": start,
            "end": end,
            "attendee_email": attendee_email,
        })
        return event_id

    async def delete_event(self, calendar_id, event_id):
        if self.fail_delete:
            raise RuntimeError("calendar unavailable")
        self.deleted.append((calendar_id, event_id))

    async def check_access(self, calendar_id):
        return {"success": True, "calendarSummary": f"Calendar {calendar_id}"}


class RecordingNotifier:
    """Collects notifications instead of sending email."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent = []

    async def _record(self, kind, booking, *args):
        self.sent.append((kind, booking.id, *args))
        if self.fail:
            raise RuntimeError("smtp down")
        return True

    async def booking_created(self, booking):
        return await self._record("created", booking)

    async def booking_confirmed(self, booking):
        return await self._record("confirmed", booking)

    async def booking_rejected(self, booking, reason=None):
        return await self._record("rejected", booking, reason)

    def kinds(self):
        return [entry[0] for entry in self.sent]


def local_clock(year=2026, month=1, day=1, hour=9, minute=0):
    """Clock fixed at a business-local wall time."""
    moment = datetime(year, month, day, hour, minute, tzinfo=TBILISI)
    return lambda: moment


def make_staff(db, name="Nino", category="nails", calendar_id=None, display_order=0) -> Staff:
    staff = Staff(name=name, service_category=category, calendar_id=calendar_id, display_order=display_order)
    db.add(staff)
    db.commit()
    db.refresh(staff)
    return staff


def make_booking(
        db,
        time: str = "14:00",
        day: date = BOOKING_DAY,
        staff: Optional[Staff] = None,
        status: str = "pending",
        duration: str = "30",
        **fields,
) -> Booking:
    booking = Booking(
        full_name=fields.pop("full_name", "Mariam Beridze"),
        email=fields.pop("email", "mariam@example.com"),
        phone=fields.pop("phone", "+995555123456"),
        service=fields.pop("service", "Gel manicure"),
        staff_id=staff.id if staff else None,
        staff_name=staff.name if staff else None,
        date=day,
        time=time,
        duration=duration,
        status=status,
        **fields,
    )
    db.add(booking)
    db.commit()
    db.refresh(booking)
    return booking


def booking_payload(**overrides) -> dict:
    payload = {
        "fullName": "Mariam Beridze",
        "email": "mariam@example.com",
        "phone": "+995555123456",
        "service": "Gel manicure",
        "date": BOOKING_DAY.isoformat(),
        "time": "14:00",
        "duration": "60",
    }
    payload.update(overrides)
    return {k: v for k, v in payload.items() if v is not None}


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def calendar():
    return FakeCalendar()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def clock():
    return local_clock()


@pytest.fixture
def client(db, calendar, notifier, clock):
    def override_db():
        yield db

    def override_availability(
            session=Depends(get_db),
            calendar_service=Depends(get_calendar_service),
    ):
        return AvailabilityService(session, calendar_service, clock=clock)

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_calendar_service] = lambda: calendar
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_availability_service] = override_availability

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def admin_user(db) -> AdminUser:
    user = AdminUser(username=ADMIN_USERNAME, hashed_password=AdminUser.hash_password(ADMIN_PASSWORD))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def admin_client(client, admin_user):
    response = client.post("/api/admin/login", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return client
