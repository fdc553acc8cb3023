# ============================================================================
# FILE: app/api/dependencies.py
# Admin session handling and service providers
# ============================================================================
from fastapi import BackgroundTasks, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session
from typing import Optional
from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt

from app.config.database import get_db
from app.config.settings import settings
from app.models.user import AdminUser
from app.services.availability.availability_service import AvailabilityService
from app.services.booking.booking_service import BookingService
from app.services.calendar.google_calendar_service import GoogleCalendarService
from app.services.notifications.booking_notifier import BookingNotifier

SESSION_TOKEN_TYPE = "admin_session"


# ============================================================================
# Session Token Functions
# ============================================================================

def create_session_token(user: AdminUser, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create the signed token stored in the admin session cookie.

    Args:
        user: Authenticated admin user
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT string
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ADMIN_SESSION_EXPIRE_MINUTES))

    to_encode = {
        "sub": user.id,
        "adm": bool(user.is_admin),
        "exp": expire,
        "iat": now,
        "type": SESSION_TOKEN_TYPE,
    }

    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_session_token(token: str) -> Optional[dict]:
    """Decode a session token, returning None when it is invalid or expired."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None

    if payload.get("type") != SESSION_TOKEN_TYPE:
        return None
    return payload


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.ADMIN_SESSION_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(key=settings.SESSION_COOKIE_NAME)


# ============================================================================
# Authentication Dependencies
# ============================================================================

async def optional_admin(request: Request, db: Session = Depends(get_db)) -> Optional[AdminUser]:
    """Admin user of the current session, or None."""
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        return None

    payload = decode_session_token(token)
    if not payload or not payload.get("adm"):
        return None

    user = db.query(AdminUser).filter(AdminUser.id == payload.get("sub")).first()
    if user is None or not user.is_admin:
        return None
    return user


async def require_admin(user: Optional[AdminUser] = Depends(optional_admin)) -> AdminUser:
    """
    Dependency that requires a valid admin session.

    Usage in routes:
        @router.post("/bookings/{booking_id}/approve")
        async def approve(admin: AdminUser = Depends(require_admin)):
            pass

    Raises:
        HTTPException 401: If there is no valid admin session
    """
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return user


# ============================================================================
# Service Dependencies
# ============================================================================

def get_calendar_service(request: Request) -> GoogleCalendarService:
    """Application-wide calendar client created at start-up."""
    return request.app.state.calendar_service


def get_notifier() -> BookingNotifier:
    return BookingNotifier()


def get_availability_service(
        db: Session = Depends(get_db),
        calendar: GoogleCalendarService = Depends(get_calendar_service),
) -> AvailabilityService:
    return AvailabilityService(db, calendar)


def get_booking_service(
        background_tasks: BackgroundTasks,
        db: Session = Depends(get_db),
        calendar: GoogleCalendarService = Depends(get_calendar_service),
        notifier: BookingNotifier = Depends(get_notifier),
) -> BookingService:
    return BookingService(db, calendar=calendar, notifier=notifier, background=background_tasks)
