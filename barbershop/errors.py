# barbershop/errors.py

from typing import List, Optional


class BookingError(Exception):
    status_code = 500
    message = "Something went wrong"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        self.message = message or self.message

    def to_dict(self) -> dict:
        return {"error": self.message}


class ValidationError(BookingError):
    status_code = 400
    message = "Invalid request"


class InvalidCode(BookingError):
    status_code = 400
    message = "Invalid or expired verification code"


class _SlotConflict(BookingError):
    status_code = 409

    def __init__(self, message: Optional[str] = None, available_times: Optional[List[str]] = None):
        super().__init__(message)
        self.available_times = available_times or []

    def to_dict(self) -> dict:
        return {"error": self.message, "availableTimes": self.available_times}


class SlotUnavailable(_SlotConflict):
    message = "The selected time is no longer available"


class SlotTaken(_SlotConflict):
    message = "This time slot has just been booked. Please choose another time"


class TransportError(BookingError):
    message = "Failed to send SMS"


class ConfigError(BookingError):
    message = "SMS service not configured"


class PersistenceError(BookingError):
    message = "Database error"


class WorkflowStateError(BookingError):
    message = "Invalid booking state"
