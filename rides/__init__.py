"""
Rides domain package.

Public API:
- Domain models: Ride, RideRequest, RideStatus, RideType
- Storage: RideStore, RidePage
"""
from .models import Ride, RideRequest, RideStatus, RideType
from .store import RideStore, RidePage

__all__ = ["Ride",
           "RideRequest",
             "RideStatus",
               "RideType",
               "RideStore",
               "RidePage",
               ]
