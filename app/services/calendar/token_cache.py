# app/services/calendar/token_cache.py
"""In-memory cache for the short-lived Google Calendar access token"""
import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from google.auth.transport.requests import Request
from google.oauth2 import service_account

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccessToken:
    value: str
    expires_at: datetime  # timezone aware, UTC


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AccessTokenCache:
    """
    Holds one access token together with its expiry.

    The token is reused until ``expires_at - refresh_margin`` and fetched again
    lazily on the next ``get()`` after that. Nothing is written to disk.
    One instance is created per application and handed to the calendar service.
    """

    def __init__(
            self,
            fetcher: Callable[[], AccessToken],
            refresh_margin_seconds: int = 60,
            clock: Callable[[], datetime] = _utcnow,
    ):
        self._fetcher = fetcher
        self._margin = timedelta(seconds=refresh_margin_seconds)
        self._clock = clock
        self._token: Optional[AccessToken] = None
        self._lock = threading.Lock()

    @property
    def expires_at(self) -> Optional[datetime]:
        return self._token.expires_at if self._token else None

    def _is_fresh(self, now: datetime) -> bool:
        return self._token is not None and now < self._token.expires_at - self._margin

    def get(self) -> str:
        """Return a usable access token, refreshing it when missing or expiring."""
        with self._lock:
            if not self._is_fresh(self._clock()):
                self._token = self._fetcher()
                logger.info(f"Calendar access token refreshed, valid until {self._token.expires_at.isoformat()}")
            return self._token.value

    def invalidate(self) -> None:
        with self._lock:
            self._token = None


def service_account_fetcher(info: dict, scopes) -> Callable[[], AccessToken]:
    """Build a fetcher that exchanges service account credentials for an access token."""
    credentials = service_account.Credentials.from_service_account_info(info, scopes=scopes)

    def fetch() -> AccessToken:
        credentials.refresh(Request())
        # google-auth reports expiry as naive UTC
        expiry = credentials.expiry or (_utcnow() + timedelta(minutes=5)).replace(tzinfo=None)
        return AccessToken(value=credentials.token, expires_at=expiry.replace(tzinfo=timezone.utc))

    return fetch
