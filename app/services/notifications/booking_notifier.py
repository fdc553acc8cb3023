# app/services/notifications/booking_notifier.py
"""Best-effort booking emails. Nothing in here ever raises to the caller."""
import asyncio
import logging
from typing import Callable, Optional

from app.config.settings import Settings, get_settings
from app.schemas.booking import BookingRead
from app.services.email.email_service import EmailService
from app.services.notifications.templates import (
    booking_confirmed_email,
    booking_rejected_email,
    new_booking_email,
)

logger = logging.getLogger(__name__)


class BookingNotifier:
    """Sends booking lifecycle emails through an SMTP sender with a hard deadline"""

    def __init__(
            self,
            settings: Optional[Settings] = None,
            send_email: Callable[..., bool] = EmailService.send_email,
    ):
        self.settings = settings or get_settings()
        self._send_email = send_email

    @property
    def enabled(self) -> bool:
        return self.settings.email_enabled

    async def _deliver(self, kind: str, to_email: Optional[str], message, booking_id: str) -> bool:
        if not self.enabled:
            logger.info(f"Skipping {kind} email for booking {booking_id} (email not configured)")
            return False
        if not to_email:
            logger.info(f"Skipping {kind} email for booking {booking_id} (no recipient)")
            return False

        subject, html, text = message
        try:
            await asyncio.wait_for(
                asyncio.to_thread(
                    self._send_email,
                    to_email=to_email,
                    subject=subject,
                    html_content=html,
                    plain_text=text,
                ),
                timeout=self.settings.SIDE_EFFECT_TIMEOUT_SECONDS,
            )
        except asyncio.TimeoutError:
            logger.error(f"Timed out sending {kind} email for booking {booking_id}")
            return False
        except Exception as e:
            logger.error(f"Failed to send {kind} email for booking {booking_id}: {e}")
            return False

        logger.info(f"{kind.capitalize()} email sent for booking {booking_id}")
        return True

    async def booking_created(self, booking: BookingRead) -> bool:
        return await self._deliver(
            "new booking",
            self.settings.ADMIN_NOTIFICATION_EMAIL,
            new_booking_email(booking),
            booking.id,
        )

    async def booking_confirmed(self, booking: BookingRead) -> bool:
        return await self._deliver("confirmation", booking.email, booking_confirmed_email(booking), booking.id)

    async def booking_rejected(self, booking: BookingRead, reason: Optional[str] = None) -> bool:
        return await self._deliver(
            "rejection",
            booking.email,
            booking_rejected_email(booking, reason),
            booking.id,
        )
