"""
Custom exceptions for the booking engine.
Raised in booking/services/ and caught in views.py, where each one is turned
into a JSON error response using its status_code and code.
"""


class BookingError(Exception):
    """Base exception for all expected, recoverable booking outcomes."""
    code = "booking_error"
    status_code = 400
    default_message = "The booking request could not be completed."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFound(BookingError):
    """Referenced barber, service or booking does not exist (or is inactive)."""
    code = "not_found"
    status_code = 404
    default_message = "Not found."


class PastTimestamp(BookingError):
    """Requested start time is not strictly in the future."""
    code = "past_timestamp"
    status_code = 400
    default_message = "Cannot book a time in the past."


class InvalidSlot(BookingError):
    """Requested start time is not one of the catalog slots."""
    code = "invalid_slot"
    status_code = 400
    default_message = "Requested time is not a bookable slot."


class Conflict(BookingError):
    """An active booking already occupies the (barber, start_time) key."""
    code = "conflict"
    status_code = 409
    default_message = "This time slot is already booked. Please pick another one."


class InvalidTransition(BookingError):
    """Lifecycle rule violated (e.g. cancelling a finished booking)."""
    code = "invalid_transition"
    status_code = 409
    default_message = "This booking cannot change to the requested status."


class Denied(BookingError):
    """Acting user is not allowed to act on the booking."""
    code = "denied"
    status_code = 403
    default_message = "You are not allowed to change this booking."


class PaymentError(Exception):
    """Base exception for payment provider integration problems."""
    pass


class PaymentConfigurationError(PaymentError):
    """Raised when the payment provider keys are missing."""
    pass


class PaymentVerificationError(PaymentError):
    """Raised when a webhook payload fails signature verification."""
    pass
