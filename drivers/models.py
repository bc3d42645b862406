"""
Purpose: Core data models for the drivers domain.
What it does:
Defines the structure of a Driver, their vehicle and last known location
without relying on any storage engine.
Records are frozen: the registry swaps in a new instance on every change.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import FrozenSet, Iterable, Optional, Tuple

LatLon = Tuple[float, float]


@dataclass(frozen=True)
class Vehicle:
    make: str
    model: str
    year: int
    color: str
    plate_number: str

    # Capability tags the vehicle/driver supports, e.g. "wheelchair_ramp".
    accessibility_features: FrozenSet[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class DriverLocation:
    latitude: float
    longitude: float
    last_updated: datetime

    @property
    def coordinates(self) -> LatLon:
        return (self.latitude, self.longitude)


@dataclass(frozen=True)
class Driver:
    """
    A snapshot of a Driver at a specific point in time.

    `is_available` is false exactly while the driver is attached to a ride
    that is requested, assigned or in progress.
    """
    id: str
    name: str
    phone: str
    vehicle: Vehicle
    location: DriverLocation

    rating: float = 5.0
    total_rides: int = 0
    is_available: bool = True
    languages: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def accessibility_features(self) -> FrozenSet[str]:
        return self.vehicle.accessibility_features

    @classmethod
    def new(
        cls,
        driver_id: str,
        name: str,
        lat: float,
        lon: float,
        *,
        phone: str = "",
        make: str = "",
        model: str = "",
        year: int = 0,
        color: str = "",
        plate_number: str = "",
        accessibility_features: Iterable[str] = (),
        rating: float = 5.0,
        total_rides: int = 0,
        is_available: bool = True,
        languages: Iterable[str] = (),
        last_updated: Optional[datetime] = None,
    ) -> Driver:
        if not 1.0 <= rating <= 5.0:
            raise ValueError(f"Driver rating must be within [1.0, 5.0], got {rating}")

        return cls(
            id=driver_id,
            name=name,
            phone=phone,
            vehicle=Vehicle(
                make=make,
                model=model,
                year=year,
                color=color,
                plate_number=plate_number,
                accessibility_features=frozenset(accessibility_features),
            ),
            location=DriverLocation(
                latitude=lat,
                longitude=lon,
                last_updated=last_updated or datetime.utcnow(),
            ),
            rating=rating,
            total_rides=total_rides,
            is_available=is_available,
            languages=frozenset(languages),
        )
