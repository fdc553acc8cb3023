# app/services/calendar/google_calendar_service.py
import asyncio
import base64
import binascii
import json
import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import Dict, List, NamedTuple, Optional
from zoneinfo import ZoneInfo

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from app.config.settings import Settings
from app.services.calendar.token_cache import AccessTokenCache, service_account_fetcher

logger = logging.getLogger(__name__)


class BusyPeriod(NamedTuple):
    start: datetime
    end: datetime


def _parse_rfc3339(value: str) -> datetime:
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


class GoogleCalendarService:
    """
    Narrow client for the Google Calendar v3 API.

    Every public method runs the blocking Google client in a worker thread and
    gives up after ``timeout`` seconds. Errors are raised to the caller, which
    decides whether the call is best-effort.
    """
    SCOPES = ['https://www.googleapis.com/auth/calendar']

    def __init__(
            self,
            token_cache: Optional[AccessTokenCache],
            timezone_name: str = "Asia/Tbilisi",
            timeout: float = 10.0,
    ):
        self.token_cache = token_cache
        self.timezone_name = timezone_name
        self.tz = ZoneInfo(timezone_name)
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "GoogleCalendarService":
        """Build the service from the base64 encoded service account in settings."""
        token_cache = None
        raw = settings.GOOGLE_CALENDAR_SERVICE_ACCOUNT

        if raw:
            try:
                info = json.loads(base64.b64decode(raw).decode("utf-8"))
                token_cache = AccessTokenCache(
                    service_account_fetcher(info, cls.SCOPES),
                    refresh_margin_seconds=settings.CALENDAR_TOKEN_REFRESH_MARGIN_SECONDS,
                )
            except (binascii.Error, UnicodeDecodeError, ValueError) as e:
                logger.error(f"Invalid GOOGLE_CALENDAR_SERVICE_ACCOUNT, calendar sync disabled: {e}")
        else:
            logger.warning("GOOGLE_CALENDAR_SERVICE_ACCOUNT not set, calendar sync disabled")

        return cls(
            token_cache,
            timezone_name=settings.BUSINESS_TIMEZONE,
            timeout=settings.SIDE_EFFECT_TIMEOUT_SECONDS,
        )

    @property
    def is_configured(self) -> bool:
        return self.token_cache is not None

    def _client(self):
        if not self.is_configured:
            raise RuntimeError("Google Calendar is not configured")
        credentials = Credentials(token=self.token_cache.get())
        return build('calendar', 'v3', credentials=credentials, cache_discovery=False)

    def _execute(self, request):
        try:
            return request.execute()
        except HttpError as e:
            if e.resp is not None and e.resp.status == 401:
                # Token revoked or expired early, fetch a new one next time
                self.token_cache.invalidate()
            raise

    async def _run(self, fn, *args):
        return await asyncio.wait_for(asyncio.to_thread(fn, *args), timeout=self.timeout)

    # ------------------------------------------------------------------
    # Free/busy
    # ------------------------------------------------------------------

    async def get_busy_periods(self, calendar_ids: List[str], day: date) -> List[BusyPeriod]:
        """Busy periods of the given calendars during the local business day."""
        if not calendar_ids:
            return []
        return await self._run(self._query_busy, list(calendar_ids), day)

    def _query_busy(self, calendar_ids: List[str], day: date) -> List[BusyPeriod]:
        day_start = datetime.combine(day, time.min, tzinfo=self.tz)
        day_end = day_start + timedelta(days=1)

        body = {
            "timeMin": day_start.isoformat(),
            "timeMax": day_end.isoformat(),
            "timeZone": self.timezone_name,
            "items": [{"id": calendar_id} for calendar_id in calendar_ids],
        }
        response = self._execute(self._client().freebusy().query(body=body))

        periods = []
        for calendar_id, data in (response.get("calendars") or {}).items():
            for error in data.get("errors", []):
                logger.warning(f"Free/busy error for calendar {calendar_id}: {error.get('reason')}")
            for busy in data.get("busy", []):
                if busy.get("start") and busy.get("end"):
                    periods.append(BusyPeriod(_parse_rfc3339(busy["start"]), _parse_rfc3339(busy["end"])))

        logger.info(f"Checked {len(calendar_ids)} calendar(s) for {day}, found {len(periods)} busy period(s)")
        return periods

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    async def create_event(
            self,
            calendar_id: str,
            summary: str,
            description: str,
            start: datetime,
            end: datetime,
            attendee_email: Optional[str] = None,
    ) -> Optional[str]:
        """Create an event and return its id"""
        event = {
            "summary": summary,
            "description": description,
            "start": {"dateTime": start.isoformat(), "timeZone": self.timezone_name},
            "end": {"dateTime": end.isoformat(), "timeZone": self.timezone_name},
            "attendees": [{"email": attendee_email}] if attendee_email else [],
            "reminders": {
                "useDefault": False,
                "overrides": [
                    {"method": "email", "minutes": 24 * 60},
                    {"method": "popup", "minutes": 60},
                ],
            },
        }
        created = await self._run(self._insert_event, calendar_id, event)
        return created.get("id")

    def _insert_event(self, calendar_id: str, event: Dict) -> Dict:
        return self._execute(
            self._client().events().insert(calendarId=calendar_id, body=event, sendUpdates="all")
        )

    async def delete_event(self, calendar_id: str, event_id: str) -> None:
        await self._run(self._delete_event, calendar_id, event_id)
        logger.info(f"Deleted calendar event {event_id} from calendar {calendar_id}")

    def _delete_event(self, calendar_id: str, event_id: str) -> None:
        self._execute(
            self._client().events().delete(calendarId=calendar_id, eventId=event_id, sendUpdates="all")
        )

    async def check_access(self, calendar_id: str) -> Dict:
        """Verify the service account can read a calendar. Never raises."""
        if not self.is_configured:
            return {"success": False, "error": "Google Calendar is not configured"}
        try:
            response = await self._run(self._list_one_event, calendar_id)
            return {"success": True, "calendarSummary": response.get("summary") or "No summary"}
        except HttpError as e:
            status = e.resp.status if e.resp is not None else "UNKNOWN"
            return {"success": False, "error": f"[{status}] {e}"}
        except Exception as e:
            return {"success": False, "error": f"[UNKNOWN] {e}"}

    def _list_one_event(self, calendar_id: str) -> Dict:
        return self._execute(
            self._client().events().list(
                calendarId=calendar_id,
                maxResults=1,
                timeMin=datetime.now(timezone.utc).isoformat(),
            )
        )
