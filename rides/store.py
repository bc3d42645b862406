"""
Purpose: In-memory store for ride records (the RideStore).
What it does:
- Owns every ride by id, in creation order.
- Provides lookups used by the lifecycle, rating and chat layers:
   - find_by_id / get
   - active ride for a driver
   - rated rides for a driver
   - passenger history (newest first, paginated)

Rides are never deleted; cancellation is a terminal status.
Rule: Store owns ride records, the state machine owns which changes are legal.
"""

from __future__ import annotations

from dataclasses import dataclass
from threading import RLock
from typing import Dict, Iterable, List, Optional

from common.errors import RideNotFound, ValidationError
from drivers.registry import DriverRegistry
from drivers.models import Driver
from .models import Ride


@dataclass(frozen=True)
class RidePage:
    rides: List[Ride]
    total: int
    limit: int
    offset: int


class RideStore:
    """
    Holds rides and resolves their driver references through the DriverRegistry.
    """

    def __init__(self, drivers: DriverRegistry, rides: Iterable[Ride] = ()):
        self.drivers = drivers
        self._rides: Dict[str, Ride] = {}
        self._lock = RLock()
        for ride in rides:
            self.add(ride)

    # --- Public API ---

    def add(self, ride: Ride) -> Ride:
        with self._lock:
            if ride.id in self._rides:
                raise ValidationError(f"Ride {ride.id} already exists")
            self._rides[ride.id] = ride
        return ride

    def save(self, ride: Ride) -> Ride:
        with self._lock:
            if ride.id not in self._rides:
                raise RideNotFound(ride.id)
            self._rides[ride.id] = ride
        return ride

    def get(self, ride_id: str) -> Optional[Ride]:
        return self._rides.get(ride_id)

    def find_by_id(self, ride_id: str) -> Ride:
        ride = self._rides.get(ride_id)
        if ride is None:
            raise RideNotFound(ride_id)
        return ride

    def exists(self, ride_id: str) -> bool:
        return ride_id in self._rides

    def driver_for(self, ride: Ride) -> Optional[Driver]:
        return self.drivers.get(ride.driver_id)

    def all_rides(self) -> List[Ride]:
        with self._lock:
            return list(self._rides.values())

    def active_ride_for_driver(self, driver_id: str) -> Optional[Ride]:
        with self._lock:
            for ride in self._rides.values():
                if ride.driver_id == driver_id and ride.status.is_active:
                    return ride
        return None

    def rated_rides_for_driver(self, driver_id: str) -> List[Ride]:
        with self._lock:
            return [
                ride for ride in self._rides.values()
                if ride.driver_id == driver_id and ride.rating is not None
            ]

    def ride_ids_for_user(self, user_id: str, user_type: str) -> List[str]:
        """
        Rides a user takes part in: as the passenger, or as the assigned driver.
        """
        with self._lock:
            if user_type == "driver":
                return [ride.id for ride in self._rides.values() if ride.driver_id == user_id]
            return [ride.id for ride in self._rides.values() if ride.passenger_id == user_id]

    def history(self, passenger_id: str, limit: int = 10, offset: int = 0) -> RidePage:
        """
        A passenger's rides, newest first.
        """
        with self._lock:
            rides = [ride for ride in self._rides.values() if ride.passenger_id == passenger_id]
        rides.sort(key=lambda ride: ride.created_at, reverse=True)
        return RidePage(
            rides=rides[offset: offset + limit],
            total=len(rides),
            limit=limit,
            offset=offset,
        )

    def __len__(self) -> int:
        return len(self._rides)
