"""
Purpose: Domain models for the Rides capability.
What it does:
- Defines core data structures:
- RideRequest (what a passenger asks for when booking)
- Ride (id, passenger, driver, locations, requirements, status, fare, timestamps, rating)

Defines enums/constants:
- RideStatus = requested | assigned | in_progress | completed | cancelled
- RideType = standard | access-rides

Rule: No matching, no transitions. Models only.
The transition table lives in dispatch/state_machines/ride_state.py.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import FrozenSet, Iterable, Optional, Tuple
import uuid

LatLon = Tuple[float, float]


class RideStatus(str, Enum):
    REQUESTED = "requested"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (RideStatus.COMPLETED, RideStatus.CANCELLED)

    @property
    def is_active(self) -> bool:
        return not self.is_terminal


class RideType(str, Enum):
    STANDARD = "standard"
    ACCESS_RIDES = "access-rides"


@dataclass(frozen=True)
class RideRequest:
    """
    Input to booking. Validation happens in the lifecycle, not here,
    so a request can be built straight from untrusted payloads.
    """
    passenger_id: Optional[str]
    pickup_location: Optional[str]
    destination: Optional[str]
    special_requirements: FrozenSet[str] = field(default_factory=frozenset)
    ride_type: str = RideType.ACCESS_RIDES.value
    estimated_fare: Optional[float] = None
    fare: Optional[float] = None

    # Only used to rank candidates by distance when the policy asks for it.
    pickup_coordinates: Optional[LatLon] = None


@dataclass(frozen=True)
class Ride:
    """
    One passenger transport request from creation through a terminal state.
    Frozen: transitions produce a new Ride that the store then saves.
    """
    id: str
    passenger_id: str
    pickup_location: str
    destination: str
    ride_type: RideType
    special_requirements: FrozenSet[str]
    fare: float

    created_at: datetime
    updated_at: datetime
    status: RideStatus = RideStatus.REQUESTED
    driver_id: Optional[str] = None
    pickup_coordinates: Optional[LatLon] = None
    estimated_arrival: Optional[datetime] = None

    completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    cancellation_reason: Optional[str] = None

    rating: Optional[int] = None
    feedback: Optional[str] = None
    rated_at: Optional[datetime] = None

    @staticmethod
    def new(
        passenger_id: str,
        pickup_location: str,
        destination: str,
        *,
        now: datetime,
        ride_type: RideType = RideType.ACCESS_RIDES,
        special_requirements: Iterable[str] = (),
        fare: float = 0.0,
        pickup_coordinates: Optional[LatLon] = None,
    ) -> Ride:
        return Ride(
            id=f"ride_{uuid.uuid4().hex}",
            passenger_id=passenger_id,
            pickup_location=pickup_location,
            destination=destination,
            ride_type=ride_type,
            special_requirements=frozenset(special_requirements),
            fare=fare,
            created_at=now,
            updated_at=now,
            pickup_coordinates=pickup_coordinates,
        )
