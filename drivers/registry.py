"""
Purpose: In-memory store of driver records (the DriverRegistry).
What it does:
- Owns every known Driver, keyed by id, in insertion order.
- Answers lookups and the "who is free right now" question.
- Applies the few mutations drivers go through (availability, location pings, rating).

Rule: Registry owns driver state, not the rules for when it changes.
Those live in dispatch/state_machines/driver_state.py.
Any durable store can replace this class as long as it keeps the same
methods and the per-call atomicity.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from threading import RLock
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from common.errors import DriverNotFound, ValidationError
from .models import Driver, DriverLocation

logger = logging.getLogger(__name__)


class DriverRegistry:
    """
    Drivers are kept in insertion order, which is also the order
    `list_available()` returns them in and therefore the matching tie-break.
    """

    def __init__(self, drivers: Iterable[Driver] = (), clock: Callable[[], datetime] = datetime.utcnow):
        self._drivers: Dict[str, Driver] = {}
        self._lock = RLock()
        self._clock = clock
        for driver in drivers:
            self.add(driver)

    # --- Public API ---

    def add(self, driver: Driver) -> Driver:
        with self._lock:
            if driver.id in self._drivers:
                raise ValidationError(f"Driver {driver.id} is already registered")
            self._drivers[driver.id] = driver
        return driver

    def find_by_id(self, driver_id: str) -> Driver:
        driver = self._drivers.get(driver_id)
        if driver is None:
            raise DriverNotFound(driver_id)
        return driver

    def get(self, driver_id: Optional[str]) -> Optional[Driver]:
        if driver_id is None:
            return None
        return self._drivers.get(driver_id)

    def list_all(self) -> List[Driver]:
        with self._lock:
            return list(self._drivers.values())

    def list_available(self) -> List[Driver]:
        with self._lock:
            return [driver for driver in self._drivers.values() if driver.is_available]

    def snapshot(self) -> Tuple[Driver, ...]:
        """
        Immutable view for read-only consumers such as geo search.
        """
        with self._lock:
            return tuple(self._drivers.values())

    def save(self, driver: Driver) -> Driver:
        """
        Replace a known driver's record wholesale.
        """
        with self._lock:
            if driver.id not in self._drivers:
                raise DriverNotFound(driver.id)
            self._drivers[driver.id] = driver
        return driver

    # --- Mutations ---

    def set_availability(self, driver_id: str, is_available: bool) -> Driver:
        with self._lock:
            driver = self.find_by_id(driver_id)
            updated = replace(driver, is_available=is_available)
            self._drivers[driver_id] = updated
        logger.debug("Driver %s availability -> %s", driver_id, is_available)
        return updated

    def update_location(self, driver_id: str, lat: float, lng: float) -> Driver:
        with self._lock:
            driver = self.find_by_id(driver_id)
            updated = replace(
                driver,
                location=DriverLocation(latitude=lat, longitude=lng, last_updated=self._clock()),
            )
            self._drivers[driver_id] = updated
        return updated

    def update_rating(self, driver_id: str, rating: float) -> Driver:
        with self._lock:
            driver = self.find_by_id(driver_id)
            updated = replace(driver, rating=rating)
            self._drivers[driver_id] = updated
        return updated

    def __len__(self) -> int:
        return len(self._drivers)
