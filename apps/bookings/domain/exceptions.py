"""
Booking Domain Errors

Every failure of the admission engine maps to exactly one class below,
so that API responses are deterministic.

Client input errors (ValidationFailure) carry the offending field and a
message naming the bound that was violated; they are shown to the user
verbatim. Authorization and consistency errors expose only a generic
public message.
"""


class BookingError(Exception):
    """Base class for booking engine errors"""

    code = "booking_error"
    public_message = "Booking request failed."

    def __init__(self, message: str | None = None, *, field: str | None = None):
        self.message = message or self.public_message
        self.field = field
        super().__init__(self.message)

    @property
    def detail(self) -> str:
        """Text that may be shown to the requesting user"""
        return self.public_message


# ===== Client input errors =====

class ValidationFailure(BookingError):
    """Rejected user input; the message is safe to show as-is"""

    code = "invalid"

    @property
    def detail(self) -> str:
        return self.message


class OutOfRangeDate(ValidationFailure):
    code = "out_of_range_date"


class OutOfRangeTime(ValidationFailure):
    code = "out_of_range_time"


class InvalidOrder(ValidationFailure):
    code = "invalid_order"


class NonPositiveDuration(ValidationFailure):
    code = "non_positive_duration"


# ===== Authorization / consistency errors =====

class NotFound(BookingError):
    code = "not_found"
    public_message = "The requested booking or space was not found."


class Forbidden(BookingError):
    code = "forbidden"
    public_message = "You are not allowed to perform this action."


class InvalidState(BookingError):
    code = "invalid_state"
    public_message = "This booking can no longer be changed."


# ===== Infrastructure =====

class StorageUnavailable(BookingError):
    code = "storage_unavailable"
    public_message = "Service temporarily unavailable, try again later."
