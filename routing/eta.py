#Purpose: Road ETA for drivers already found by geo search.
#Converts one OSRM /table call into per-driver "arrives in X seconds".
#Straight-line distance stays the filter and sort key; ETA is display only.

from dataclasses import replace
from typing import List, Tuple

from .geo import NearbyDriver
from .osrm_client import OSRMClient

LatLon = Tuple[float, float]


def attach_road_eta(osrm: OSRMClient, origin: LatLon, candidates: List[NearbyDriver]) -> List[NearbyDriver]:
    """
    Fill `eta_s` with the driver -> origin road duration.

    One OSRM table request: every driver is a source, the origin is the only
    destination. Drivers OSRM cannot route keep eta_s=None (fail open: they
    are still within the straight-line radius).
    """
    if not candidates:
        return []

    sources = [candidate.driver.location.coordinates for candidate in candidates]
    matrix = osrm.compute_table(sources=sources, destinations=[origin])
    durations = matrix["durations"]

    annotated = []
    for index, candidate in enumerate(candidates):
        row = durations[index] if index < len(durations) else None
        duration = row[0] if row else None
        annotated.append(replace(candidate, eta_s=duration))
    return annotated
