"""Domain errors raised by the booking core and mapped to HTTP responses in main.py."""


class ParkPassError(Exception):
    """Base class for user-visible rejections"""
    status_code = 400
    error_code = "bad_request"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ParkPassError):
    status_code = 404
    error_code = "not_found"


class ConflictError(ParkPassError):
    status_code = 409
    error_code = "conflict"


class ForbiddenError(ParkPassError):
    status_code = 403
    error_code = "forbidden"


class InvalidDurationError(ParkPassError):
    status_code = 400
    error_code = "invalid_duration"


class InvalidStateError(ParkPassError):
    status_code = 400
    error_code = "invalid_state"


class EntryWindowError(InvalidStateError):
    """Entry code presented outside the booking's start..reserved end window"""

    NOT_STARTED = "not_started"
    EXPIRED = "expired"

    def __init__(self, reason: str):
        message = "Booking has not started yet" if reason == self.NOT_STARTED else "Booking has expired"
        super().__init__(message)
        self.reason = reason
        self.error_code = reason
