"""
Purpose: Orchestrator for a ride's life (the "glue").
What it does:
Accepts a booking, asks the MatchingEngine for a driver, creates the ride and
attaches the driver in one step, then drives later status updates and
cancellations through the ride state machine while keeping driver
availability in sync.

Every write path (book, update_status, cancel) runs under a single lock so a
driver can never be handed to two rides by concurrent requests. Each path
computes the new ride and driver records first and only then commits them,
so a failed call leaves nothing behind.
"""

import logging
from datetime import datetime, timedelta
from threading import RLock
from typing import Callable, Iterable, Optional, Tuple

from common.errors import ValidationError
from drivers.models import Driver
from drivers.registry import DriverRegistry
from rides.models import Ride, RideRequest, RideStatus, RideType
from rides.store import RidePage, RideStore
from .matching import MatchingEngine
from .policy import MatchPolicy, default_match_policy
from .state_machines.driver_state import (
    handle_driver_assignment,
    handle_driver_cancellation,
    handle_driver_completion,
)
from .state_machines.ride_state import (
    transition_ride_status,
    transition_ride_to_assigned,
    transition_ride_to_cancelled,
)

logger = logging.getLogger(__name__)

LatLon = Tuple[float, float]


def parse_status(value) -> RideStatus:
    if isinstance(value, RideStatus):
        return value
    try:
        return RideStatus(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(status.value for status in RideStatus)
        raise ValidationError(f"Unknown ride status {value!r}; expected one of: {allowed}")


def parse_coordinates(value) -> LatLon:
    """
    Accepts (lat, lng) or {"latitude": .., "longitude": ..}.
    """
    try:
        if isinstance(value, dict):
            lat, lng = float(value["latitude"]), float(value["longitude"])
        else:
            lat, lng = (float(part) for part in value)
    except (KeyError, TypeError, ValueError):
        raise ValidationError("Location must provide numeric latitude and longitude")

    if not -90.0 <= lat <= 90.0 or not -180.0 <= lng <= 180.0:
        raise ValidationError(f"Location ({lat}, {lng}) is out of range")
    return (lat, lng)


def _required_text(value, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


class RideLifecycle:
    """
    Coordinates rides and drivers through the ride state machine.
    """
    def __init__(
        self,
        rides: RideStore,
        drivers: DriverRegistry,
        matching: MatchingEngine,
        policy: Optional[MatchPolicy] = None,
        clock: Callable[[], datetime] = datetime.utcnow,
        lock: Optional[RLock] = None,
    ):
        self.rides = rides
        self.drivers = drivers
        self.matching = matching
        self.policy = policy or default_match_policy()
        self._clock = clock
        self.lock = lock or RLock()

    # --- Booking ---

    def _validate_request(self, request: RideRequest):
        missing = [
            name for name, value in (
                ("passengerId", request.passenger_id),
                ("pickupLocation", request.pickup_location),
                ("destination", request.destination),
            )
            if value is None or not str(value).strip()
        ]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        try:
            ride_type = RideType(request.ride_type or RideType.ACCESS_RIDES.value)
        except ValueError:
            raise ValidationError(f"Unknown ride type {request.ride_type!r}")

        requirements = request.special_requirements
        if isinstance(requirements, str) or not isinstance(requirements, Iterable):
            raise ValidationError("specialRequirements must be a list of feature tags")
        requirements = frozenset(str(tag).strip() for tag in requirements if str(tag).strip())

        # estimatedFare wins over fare; a missing or zero estimate falls back.
        fare = request.estimated_fare or request.fare or 0.0
        try:
            fare = float(fare)
        except (TypeError, ValueError):
            raise ValidationError("Fare must be a number")
        if fare < 0:
            raise ValidationError("Fare must be non-negative")

        pickup = None
        if request.pickup_coordinates is not None:
            pickup = parse_coordinates(request.pickup_coordinates)

        return ride_type, requirements, fare, pickup

    def book(self, request: RideRequest) -> Tuple[Ride, Driver]:
        """
        Match and persist a ride in one step.

        Raises ValidationError for bad input and NoDriverAvailable when no
        driver qualifies; in both cases nothing is stored.
        """
        ride_type, requirements, fare, pickup = self._validate_request(request)

        with self.lock:
            driver = self.matching.match(requirements, pickup)
            now = self._clock()

            ride = Ride.new(
                passenger_id=str(request.passenger_id).strip(),
                pickup_location=str(request.pickup_location).strip(),
                destination=str(request.destination).strip(),
                now=now,
                ride_type=ride_type,
                special_requirements=requirements,
                fare=fare,
                pickup_coordinates=pickup,
            )
            busy_driver = handle_driver_assignment(driver, ride)
            ride = transition_ride_to_assigned(
                ride,
                driver.id,
                now=now,
                estimated_arrival=now + timedelta(minutes=self.policy.booking_lead_minutes),
            )

            self.rides.add(ride)
            self.drivers.save(busy_driver)

        logger.info("Booked ride %s for passenger %s with driver %s", ride.id, ride.passenger_id, driver.id)
        return ride, busy_driver

    # --- Reads ---

    def get_status(self, ride_id: str) -> Tuple[Ride, Optional[Driver]]:
        ride = self.rides.find_by_id(ride_id)
        return ride, self.rides.driver_for(ride)

    def history(self, passenger_id: str, limit: int = 10, offset: int = 0) -> RidePage:
        passenger_id = _required_text(passenger_id, "passengerId")
        if limit < 0 or offset < 0:
            raise ValidationError("limit and offset must be >= 0")
        return self.rides.history(passenger_id, limit=limit, offset=offset)

    # --- Transitions ---

    def update_status(self, ride_id: str, new_status, location=None) -> Ride:
        """
        Move a ride along the state machine and optionally record where its
        driver is. Completing a ride releases the driver; cancelling through
        here behaves like cancel() without a reason.
        """
        target = parse_status(new_status)
        coordinates = parse_coordinates(location) if location is not None else None

        with self.lock:
            ride = self.rides.find_by_id(ride_id)
            if target == RideStatus.CANCELLED:
                updated = self._cancel_locked(ride, None)
            else:
                now = self._clock()
                updated = transition_ride_status(ride, target, now=now)

                driver = self.rides.driver_for(ride)
                released = None
                if driver is not None and target == RideStatus.COMPLETED:
                    released = handle_driver_completion(driver, updated)

                self.rides.save(updated)
                if released is not None:
                    self.drivers.save(released)

            if coordinates is not None and updated.driver_id is not None and self.drivers.get(updated.driver_id):
                self.drivers.update_location(updated.driver_id, *coordinates)

        logger.info("Ride %s: %s -> %s", ride_id, ride.status.value, updated.status.value)
        return updated

    def cancel(self, ride_id: str, reason: Optional[str] = None) -> Ride:
        with self.lock:
            ride = self.rides.find_by_id(ride_id)
            updated = self._cancel_locked(ride, reason)

        logger.info("Ride %s cancelled (%s)", ride_id, reason or "no reason given")
        return updated

    def _cancel_locked(self, ride: Ride, reason: Optional[str]) -> Ride:
        updated = transition_ride_to_cancelled(ride, reason, now=self._clock())

        driver = self.rides.driver_for(ride)
        released = handle_driver_cancellation(driver, ride) if driver is not None else None

        self.rides.save(updated)
        if released is not None:
            self.drivers.save(released)
        return updated
