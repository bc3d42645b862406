#Purpose: Ranking model (the "who is best" layer).
#Takes candidates (already eligible) + the pickup point
#Produces an ordered list:
#great-circle distance to pickup (closest first)
#rating (highest first) breaks distance ties
#registry order breaks whatever is left (sort is stable)
#Without a pickup point the registry order is kept as-is.

from typing import List, Optional, Tuple

from drivers.models import Driver
from routing.geo import haversine_m

LatLon = Tuple[float, float]


def rank_candidates(candidates: List[Driver], pickup: Optional[LatLon] = None) -> List[Driver]:
    if pickup is None:
        return list(candidates)

    return sorted(
        candidates,
        key=lambda driver: (haversine_m(pickup, driver.location.coordinates), -driver.rating),
    )
