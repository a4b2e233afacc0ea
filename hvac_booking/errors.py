from __future__ import annotations


class BookingError(Exception):
    """Base class for failures that are reported to the client as JSON."""

    status_code = 500
    default_message = "Server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(BookingError):
    status_code = 400
    default_message = "Missing required fields"


class ConflictError(BookingError):
    status_code = 409
    default_message = "That time is already booked"

    def __init__(self, date: str, time: str, message: str | None = None) -> None:
        self.date = date
        self.time = time
        super().__init__(message)


class InviteEncodingError(BookingError):
    default_message = "Booking created but failed to create calendar invite"


class DeliveryError(BookingError):
    default_message = "Booking created but failed to send email"

    def __init__(self, message: str | None = None, recipients: list[str] | None = None) -> None:
        self.recipients = recipients or []
        super().__init__(message)
