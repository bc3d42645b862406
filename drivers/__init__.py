"""
Drivers domain package.

Public API:
- Domain models: Driver, Vehicle, DriverLocation
- Storage: DriverRegistry
- Seed loading: load_drivers_csv
"""
from .models import Driver, Vehicle, DriverLocation
from .registry import DriverRegistry
from .loader import load_drivers_csv

__all__ = [
    "Driver",
    "Vehicle",
    "DriverLocation",
    "DriverRegistry",
    "load_drivers_csv",
]
