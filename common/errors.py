"""
Purpose: Typed, caller-visible failures for the dispatch core.
What it does:
Every operation on rides, drivers and chat reports failure by raising one of
these. None of them are retried by the core; each one is scoped to a single
request. The `code` is stable and is what the HTTP layer puts in the
"error" field of a response.
"""

from __future__ import annotations


class DispatchError(Exception):
    """Base class for every failure the dispatch core reports."""
    code = "dispatch_error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.code)
        self.message = message or self.code


class ValidationError(DispatchError):
    """Missing or malformed input."""
    code = "validation_error"


class NotFound(DispatchError):
    code = "not_found"


class RideNotFound(NotFound):
    code = "ride_not_found"

    def __init__(self, ride_id: str):
        super().__init__(f"Ride {ride_id} does not exist")
        self.ride_id = ride_id


class DriverNotFound(NotFound):
    code = "driver_not_found"

    def __init__(self, driver_id: str):
        super().__init__(f"Driver {driver_id} does not exist")
        self.driver_id = driver_id


class MessageNotFound(NotFound):
    code = "message_not_found"

    def __init__(self, message_id: str):
        super().__init__(f"Message {message_id} does not exist")
        self.message_id = message_id


class InvalidTransition(DispatchError):
    """The requested state change is not in the transition table."""
    code = "invalid_transition"


class AlreadyTerminal(DispatchError):
    """The ride is already completed or cancelled."""
    code = "already_terminal"


class NoDriverAvailable(DispatchError):
    code = "no_driver_available"


class InvalidRating(DispatchError):
    code = "invalid_rating"


class RideNotCompleted(DispatchError):
    code = "ride_not_completed"
