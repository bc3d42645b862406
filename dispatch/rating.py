"""
Purpose: Fold a passenger's rating into the ride and the driver's average.
What it does:
Validates the rating, stamps it on a completed ride and recomputes the
driver's rating from scratch as the mean over every rated ride they drove.
Rating the same ride again replaces the earlier rating.
"""

import logging
from datetime import datetime
from threading import RLock
from typing import Callable, Optional, Tuple

from common.errors import InvalidRating
from drivers.models import Driver
from drivers.registry import DriverRegistry
from rides.models import Ride
from rides.store import RideStore
from .state_machines.ride_state import transition_ride_to_rated

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


def validate_rating(rating) -> int:
    if isinstance(rating, bool) or not isinstance(rating, (int, float)):
        raise InvalidRating("Rating must be a whole number between 1 and 5")
    if isinstance(rating, float) and not rating.is_integer():
        raise InvalidRating("Rating must be a whole number between 1 and 5")
    if not MIN_RATING <= rating <= MAX_RATING:
        raise InvalidRating("Rating must be between 1 and 5")
    return int(rating)


class RatingAggregator:
    def __init__(
        self,
        rides: RideStore,
        drivers: DriverRegistry,
        clock: Callable[[], datetime] = datetime.utcnow,
        lock: Optional[RLock] = None,
    ):
        self.rides = rides
        self.drivers = drivers
        self._clock = clock
        # Shared with RideLifecycle so a rating never races a status change.
        self.lock = lock or RLock()

    def driver_average(self, driver_id: str) -> Optional[float]:
        rated = self.rides.rated_rides_for_driver(driver_id)
        if not rated:
            return None
        return sum(ride.rating for ride in rated) / len(rated)

    def rate(self, ride_id: str, rating, feedback: Optional[str] = None) -> Tuple[Ride, Optional[Driver]]:
        """
        Returns the updated ride and the driver with their recomputed rating.
        Raises InvalidRating, RideNotFound or RideNotCompleted before any write.
        """
        value = validate_rating(rating)

        with self.lock:
            ride = self.rides.find_by_id(ride_id)
            rated = transition_ride_to_rated(ride, value, feedback, now=self._clock())
            self.rides.save(rated)

            driver = self.rides.driver_for(rated)
            if driver is not None:
                average = self.driver_average(driver.id)
                driver = self.drivers.update_rating(driver.id, average)

        logger.info(
            "Ride %s rated %s; driver %s now %.2f",
            ride_id, value, rated.driver_id, driver.rating if driver else float("nan"),
        )
        return rated, driver
