from dataclasses import replace
from datetime import datetime
from typing import Dict, FrozenSet, Optional

from common.errors import AlreadyTerminal, InvalidTransition, RideNotCompleted
from rides.models import Ride, RideStatus

# Legal moves. Terminal states have no way out.
TRANSITIONS: Dict[RideStatus, FrozenSet[RideStatus]] = {
    RideStatus.REQUESTED: frozenset({RideStatus.ASSIGNED, RideStatus.IN_PROGRESS, RideStatus.CANCELLED}),
    # A driver may close a ride without ever marking it started.
    RideStatus.ASSIGNED: frozenset({RideStatus.IN_PROGRESS, RideStatus.COMPLETED, RideStatus.CANCELLED}),
    RideStatus.IN_PROGRESS: frozenset({RideStatus.COMPLETED, RideStatus.CANCELLED}),
    RideStatus.COMPLETED: frozenset(),
    RideStatus.CANCELLED: frozenset(),
}


class RideStateException(InvalidTransition):
    """Raised when an invalid ride transition is attempted."""
    pass


def can_transition(current: RideStatus, target: RideStatus) -> bool:
    # Re-sending the current status of a live ride is a no-op (location pings).
    if current == target:
        return current.is_active
    return target in TRANSITIONS[current]


def ensure_transition(ride: Ride, target: RideStatus) -> None:
    if not can_transition(ride.status, target):
        raise RideStateException(
            f"Cannot move ride {ride.id} from {ride.status.value} to {target.value}"
        )


def transition_ride_to_assigned(ride: Ride, driver_id: str, *, now: datetime, estimated_arrival: datetime) -> Ride:
    """
    Called right after a ride is created and the matching engine found a driver.
    Attaches the driver; the caller is responsible for making them unavailable.
    """
    if ride.status != RideStatus.REQUESTED:
        raise RideStateException(f"Cannot assign ride {ride.id} from {ride.status.value}")

    return replace(
        ride,
        status=RideStatus.ASSIGNED,
        driver_id=driver_id,
        estimated_arrival=estimated_arrival,
        updated_at=now,
    )


def transition_ride_status(ride: Ride, target: RideStatus, *, now: datetime) -> Ride:
    """
    Moves a ride forward (in_progress, completed) or keeps it where it is.
    Cancellation goes through transition_ride_to_cancelled so the reason and
    timestamps are handled in one place.
    """
    if target == RideStatus.CANCELLED:
        return transition_ride_to_cancelled(ride, None, now=now)

    ensure_transition(ride, target)

    if target == RideStatus.IN_PROGRESS and ride.driver_id is None:
        raise RideStateException(f"Ride {ride.id} has no driver and cannot start")

    completed_at = now if target == RideStatus.COMPLETED else ride.completed_at
    return replace(ride, status=target, updated_at=now, completed_at=completed_at)


def transition_ride_to_cancelled(ride: Ride, reason: Optional[str], *, now: datetime) -> Ride:
    if ride.status.is_terminal:
        raise AlreadyTerminal(f"Ride is already {ride.status.value}")

    return replace(
        ride,
        status=RideStatus.CANCELLED,
        cancelled_at=now,
        cancellation_reason=reason,
        updated_at=now,
    )


def transition_ride_to_rated(ride: Ride, rating: int, feedback: Optional[str], *, now: datetime) -> Ride:
    """
    Rating is only allowed once the ride is completed. A second call
    overwrites the earlier rating.
    """
    if ride.status != RideStatus.COMPLETED:
        raise RideNotCompleted(f"Can only rate completed rides (ride {ride.id} is {ride.status.value})")

    return replace(ride, rating=rating, feedback=feedback, rated_at=now, updated_at=now)
