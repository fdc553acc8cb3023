# app/core/exceptions.py
"""Domain errors raised by the service layer and mapped to HTTP responses in app.main"""


class StudioError(Exception):
    """Base class for errors the API reports to the caller"""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BookingValidationError(StudioError):
    status_code = 400


class BookingNotFoundError(StudioError):
    status_code = 404

    def __init__(self, booking_id: str):
        super().__init__("Booking not found")
        self.booking_id = booking_id


class StaffNotFoundError(StudioError):
    status_code = 404

    def __init__(self, staff_id: str):
        super().__init__("Staff member not found")
        self.staff_id = staff_id
