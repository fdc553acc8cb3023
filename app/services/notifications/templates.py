# app/services/notifications/templates.py
"""HTML and plain text bodies for booking emails"""
from html import escape
from typing import Optional, Tuple

from app.schemas.booking import BookingRead

STUDIO_NAME = "THE MR Studio"

_WRAPPER = """
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; color: #333;">
{body}
  <div style="margin-top: 30px; padding-top: 20px; border-top: 1px solid #eee; font-size: 12px; color: #888;">
    <p><strong>{studio}</strong><br>Nail &amp; Laser Artistic Studio</p>
  </div>
</div>
"""


def _row(label: str, value) -> str:
    return f"<p><strong>{escape(label)}:</strong> {escape(str(value))}</p>"


def new_booking_email(booking: BookingRead) -> Tuple[str, str, str]:
    """Operator notification for a freshly submitted request"""
    subject = f"New Booking Request - {booking.full_name}"

    details = "".join([
        _row("Name", booking.full_name),
        _row("Email", booking.email),
        _row("Phone", booking.phone),
        _row("Service", booking.service),
        _row("Staff", booking.staff_name or "Not specified"),
        _row("Date", booking.date.isoformat()),
        _row("Time", booking.time),
        _row("Duration", f"{booking.duration} minutes"),
    ])
    if booking.notes:
        details += _row("Notes", booking.notes)

    html = _WRAPPER.format(
        studio=STUDIO_NAME,
        body=f"""
  <h2 style="border-bottom: 2px solid #000; padding-bottom: 10px;">New Booking Request</h2>
  <div style="background: #f5f5f5; padding: 20px; border-radius: 8px;">{details}</div>
  <div style="background: #fff3cd; padding: 15px; margin: 20px 0; border-radius: 8px; border-left: 4px solid #ffc107;">
    <p style="margin: 0;">This booking is pending approval. Log in to the admin dashboard to approve or reject it.</p>
  </div>""",
    )

    text = (
        f"New booking request from {booking.full_name}\n\n"
        f"Email: {booking.email}\nPhone: {booking.phone}\n"
        f"Service: {booking.service}\nStaff: {booking.staff_name or 'Not specified'}\n"
        f"Date: {booking.date.isoformat()} {booking.time} ({booking.duration} minutes)\n"
        + (f"Notes: {booking.notes}\n" if booking.notes else "")
        + "\nThis booking is pending approval."
    )
    return subject, html, text


def booking_confirmed_email(booking: BookingRead) -> Tuple[str, str, str]:
    """Client notification once an operator approves the request"""
    subject = f"Booking Confirmed - {STUDIO_NAME}"

    details = "".join([
        _row("Service", booking.service),
        _row("Specialist", booking.staff_name or "N/A"),
        _row("Date", booking.date.isoformat()),
        _row("Time", booking.time),
    ])
    html = _WRAPPER.format(
        studio=STUDIO_NAME,
        body=f"""
  <h2 style="color: #c9a063; border-bottom: 1px solid #eee; padding-bottom: 10px;">Your visit is confirmed!</h2>
  <p>Hello {escape(booking.full_name)},</p>
  <p>We are happy to let you know that your booking at {STUDIO_NAME} is confirmed.</p>
  <div style="background: #fafafa; padding: 20px; margin: 20px 0; border-radius: 8px; border: 1px solid #eee;">{details}</div>
  <p>Please arrive on time. If your plans change, let us know in advance.</p>""",
    )

    text = (
        f"Hello {booking.full_name},\n\n"
        f"Your booking at {STUDIO_NAME} is confirmed.\n"
        f"Service: {booking.service}\nSpecialist: {booking.staff_name or 'N/A'}\n"
        f"Date: {booking.date.isoformat()} {booking.time}\n"
    )
    return subject, html, text


def booking_rejected_email(booking: BookingRead, reason: Optional[str] = None) -> Tuple[str, str, str]:
    """Client notification when the requested time cannot be confirmed"""
    subject = f"Booking Status Update - {STUDIO_NAME}"

    reason_block = ""
    if reason:
        reason_block = (
            '<div style="background: #fff5f5; padding: 15px; margin: 20px 0; border-radius: 8px; '
            f'border-left: 4px solid #fc8181;"><p style="margin: 0;"><strong>Reason:</strong> {escape(reason)}</p></div>'
        )

    html = _WRAPPER.format(
        studio=STUDIO_NAME,
        body=f"""
  <h2 style="color: #666; border-bottom: 1px solid #eee; padding-bottom: 10px;">Booking Update</h2>
  <p>Hello {escape(booking.full_name)},</p>
  <p>Unfortunately we cannot confirm your booking for {booking.date.isoformat()} at {escape(booking.time)}.</p>
  {reason_block}
  <p>Please try another time or contact us for details.</p>""",
    )

    text = (
        f"Hello {booking.full_name},\n\n"
        f"Unfortunately we cannot confirm your booking for {booking.date.isoformat()} at {booking.time}.\n"
        + (f"Reason: {reason}\n" if reason else "")
        + "Please try another time or contact us for details.\n"
    )
    return subject, html, text
