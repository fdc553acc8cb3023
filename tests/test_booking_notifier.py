"""Booking emails are best-effort: skipped when disabled, never raising."""
import time
from datetime import date

from app.config.settings import Settings
from app.models.booking import BookingStatus
from app.schemas.booking import BookingRead
from app.services.email.email_service import EmailService
from app.services.notifications.booking_notifier import BookingNotifier
from app.services.notifications.templates import booking_rejected_email, new_booking_email


def sample_booking(**overrides) -> BookingRead:
    data = dict(
        id="b-1",
        full_name="Mariam <Beridze>",
        email="mariam@example.com",
        phone="+995555123456",
        service="Gel manicure",
        staff_name="Nino",
        date=date(2026, 1, 10),
        time="14:00",
        duration="90",
        status=BookingStatus.PENDING,
    )
    data.update(overrides)
    return BookingRead(**data)


def email_settings(**overrides) -> Settings:
    values = dict(
        EMAIL_USERNAME="studio@example.com",
        EMAIL_PASSWORD="app-password",
        ADMIN_NOTIFICATION_EMAIL="ops@example.com",
        SIDE_EFFECT_TIMEOUT_SECONDS=1.0,
    )
    values.update(overrides)
    return Settings(**values)


class Outbox:
    def __init__(self, error=None, delay=0.0):
        self.messages = []
        self.error = error
        self.delay = delay

    def __call__(self, to_email, subject, html_content, plain_text=None):
        if self.delay:
            time.sleep(self.delay)
        if self.error:
            raise self.error
        self.messages.append((to_email, subject, html_content, plain_text))
        return True


class TestBookingNotifier:

    async def test_new_booking_goes_to_operator(self):
        outbox = Outbox()
        notifier = BookingNotifier(email_settings(), send_email=outbox)

        assert await notifier.booking_created(sample_booking()) is True

        to_email, subject, _, text = outbox.messages[0]
        assert to_email == "ops@example.com"
        assert "New Booking Request" in subject
        assert "2026-01-10 14:00" in text

    async def test_confirmation_goes_to_client(self):
        outbox = Outbox()
        notifier = BookingNotifier(email_settings(), send_email=outbox)

        assert await notifier.booking_confirmed(sample_booking(status=BookingStatus.CONFIRMED)) is True

        assert outbox.messages[0][0] == "mariam@example.com"

    async def test_rejection_includes_reason(self):
        outbox = Outbox()
        notifier = BookingNotifier(email_settings(), send_email=outbox)

        await notifier.booking_rejected(sample_booking(status=BookingStatus.REJECTED), "fully booked")

        _, _, html, text = outbox.messages[0]
        assert "fully booked" in html
        assert "Reason: fully booked" in text

    async def test_disabled_email_skips(self):
        outbox = Outbox()
        notifier = BookingNotifier(email_settings(EMAIL_USERNAME="", EMAIL_PASSWORD=""), send_email=outbox)

        assert await notifier.booking_confirmed(sample_booking()) is False
        assert outbox.messages == []

    async def test_missing_operator_address_skips(self):
        outbox = Outbox()
        notifier = BookingNotifier(email_settings(ADMIN_NOTIFICATION_EMAIL=""), send_email=outbox)

        assert await notifier.booking_created(sample_booking()) is False
        assert outbox.messages == []

    async def test_send_failure_is_swallowed(self):
        notifier = BookingNotifier(email_settings(), send_email=Outbox(error=OSError("connection refused")))

        assert await notifier.booking_confirmed(sample_booking()) is False

    async def test_slow_send_times_out(self):
        notifier = BookingNotifier(
            email_settings(SIDE_EFFECT_TIMEOUT_SECONDS=0.05),
            send_email=Outbox(delay=0.5),
        )

        assert await notifier.booking_confirmed(sample_booking()) is False


class TestTemplates:

    def test_html_is_escaped(self):
        _, html, text = new_booking_email(sample_booking())

        assert "Mariam &lt;Beridze&gt;" in html
        assert "Mariam <Beridze>" in text

    def test_rejection_without_reason(self):
        _, html, text = booking_rejected_email(sample_booking())

        assert "Reason" not in html
        assert "Reason" not in text


class FakeSmtp:
    def __init__(self):
        self.sent = []
        self.closed = False

    def sendmail(self, from_address, recipients, message):
        self.sent.append((from_address, recipients, message))

    def quit(self):
        self.closed = True


class TestEmailService:

    def test_send_email_to_single_recipient(self, monkeypatch):
        server = FakeSmtp()
        monkeypatch.setattr(EmailService, "_get_smtp_connection", staticmethod(lambda: server))

        assert EmailService.send_email("mariam@example.com", "Hello", "<p>Hi</p>", "Hi") is True

        _, recipients, message = server.sent[0]
        assert recipients == ["mariam@example.com"]
        assert "Subject: Hello" in message
        assert server.closed
