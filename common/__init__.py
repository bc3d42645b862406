#Shared building blocks used by every domain package.
#Only error types live here; no business logic.

from .errors import (
    DispatchError,
    ValidationError,
    NotFound,
    RideNotFound,
    DriverNotFound,
    MessageNotFound,
    InvalidTransition,
    AlreadyTerminal,
    NoDriverAvailable,
    InvalidRating,
    RideNotCompleted,
)

__all__ = [
    "DispatchError",
    "ValidationError",
    "NotFound",
    "RideNotFound",
    "DriverNotFound",
    "MessageNotFound",
    "InvalidTransition",
    "AlreadyTerminal",
    "NoDriverAvailable",
    "InvalidRating",
    "RideNotCompleted",
]
