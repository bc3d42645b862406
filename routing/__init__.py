#Marks routing as a package.
#Re-exports clean public APIs (haversine_m, nearby, OSRMClient, attach_road_eta)
#so other modules import from routing without knowing internal file names.
#No business logic.

from .geo import NearbyDriver, haversine_m, nearby
from .osrm_client import OSRMClient, OSRMError
from .eta import attach_road_eta

__all__ = [
    "NearbyDriver",
    "haversine_m",
    "nearby",
    "OSRMClient",
    "OSRMError",
    "attach_road_eta",
]
