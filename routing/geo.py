#Purpose: Straight-line geo search over a driver snapshot (GeoSearch).
#Given an origin point + radius → great-circle distance to every available driver
#Typical responsibilities:
#haversine distance in meters
#drop unavailable drivers and drivers beyond the radius
#sort by nearest first
#Output: a list of "geo-qualified drivers" with their distance.
#Pure: no registry writes, safe to call concurrently on a snapshot.

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple
import math

from drivers.models import Driver

#internal coordinate type :(lat,lon)
LatLon = Tuple[float, float]

EARTH_RADIUS_M = 6_371_000


@dataclass(frozen=True)
class NearbyDriver:
    """
    A driver that passed the radius filter, with the metrics the caller
    sorts and displays on.
    """
    driver: Driver
    distance_m: float
    eta_s: Optional[float] = None  # road duration, filled in by routing.eta when OSRM is configured


def haversine_m(origin: LatLon, target: LatLon) -> float:
    """
    Great-circle distance in meters between two (lat, lon) points.
    """
    lat1, lon1 = origin
    lat2, lon2 = target

    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (math.sin(delta_lat / 2) ** 2 +
         math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) *
         math.sin(delta_lon / 2) ** 2)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_M * c


def nearby(drivers: Iterable[Driver], origin: LatLon, radius_m: float) -> List[NearbyDriver]:
    """
    Available drivers within `radius_m` of `origin`, nearest first.

    Args:
        drivers: a snapshot of the registry (DriverRegistry.snapshot())
        origin: (lat, lon) search center
        radius_m: inclusive radius in meters

    Returns:
        List[NearbyDriver], sorted by distance_m ascending (driver id breaks ties).
    """
    if radius_m < 0:
        raise ValueError("radius_m must be >= 0")

    results: List[NearbyDriver] = []
    for driver in drivers:
        if not driver.is_available:
            continue

        distance = haversine_m(origin, driver.location.coordinates)
        if distance > radius_m:
            continue

        results.append(NearbyDriver(driver=driver, distance_m=distance))

    results.sort(key=lambda candidate: (candidate.distance_m, candidate.driver.id))
    return results
