from dataclasses import replace

from common.errors import InvalidTransition
from drivers.models import Driver
from rides.models import Ride


class DriverStateException(InvalidTransition):
    """Raised when an invalid driver transition is attempted."""
    pass


def handle_driver_assignment(driver: Driver, ride: Ride) -> Driver:
    """
    Called when a driver is attached to a ride.
    A driver who is already on an active ride cannot be booked again,
    which is the double-booking guard of the whole engine.
    """
    if not driver.is_available:
        raise DriverStateException(f"Driver {driver.id} is not available for ride {ride.id}")

    # Because Driver is a frozen dataclass, we must return a new instance via replace
    return replace(driver, is_available=False)


def handle_driver_completion(driver: Driver, ride: Ride) -> Driver:
    """
    Ride finished: the driver is free again and gets credit for the trip.
    """
    if ride.driver_id != driver.id:
        raise DriverStateException(f"Driver {driver.id} is not assigned to ride {ride.id}")

    return replace(driver, is_available=True, total_rides=driver.total_rides + 1)


def handle_driver_cancellation(driver: Driver, ride: Ride) -> Driver:
    """
    Ride cancelled before completion: release the driver, symmetric with completion
    but without counting the trip.
    """
    if ride.driver_id != driver.id:
        raise DriverStateException(f"Driver {driver.id} is not assigned to ride {ride.id}")

    return replace(driver, is_available=True)
