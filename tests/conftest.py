from datetime import datetime, timedelta

import pytest

from dispatch.context import build_context
from drivers.models import Driver
from rides.models import RideRequest


class FakeClock:
    """Frozen time that tests move forward by hand."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 3, 1, 9, 0, 0))


@pytest.fixture
def seed_drivers(clock):
    # Same two drivers as sampledata/drivers.csv
    return [
        Driver.new(
            "driver_1", "Ahmed Hassan", 40.7128, -74.0060,
            phone="+1234567890", make="Toyota", model="Camry", year=2022, color="Silver",
            plate_number="ABC-123",
            accessibility_features=["wheelchair_ramp", "voice_guidance", "sign_language_support"],
            rating=4.8, total_rides=1250, languages=["English", "Arabic", "Sign Language"],
            last_updated=clock(),
        ),
        Driver.new(
            "driver_2", "Sarah Johnson", 40.7589, -73.9851,
            phone="+1234567891", make="Honda", model="Accord", year=2021, color="Blue",
            plate_number="XYZ-789",
            accessibility_features=["wheelchair_ramp", "voice_guidance"],
            rating=4.9, total_rides=890, languages=["English", "Spanish", "Sign Language"],
            last_updated=clock(),
        ),
    ]


@pytest.fixture
def context(seed_drivers, clock):
    return build_context(seed_drivers, clock=clock)


@pytest.fixture
def make_request():
    def _make(passenger_id="passenger_1", requirements=(), **kwargs):
        return RideRequest(
            passenger_id=passenger_id,
            pickup_location=kwargs.pop("pickup_location", "A"),
            destination=kwargs.pop("destination", "B"),
            special_requirements=frozenset(requirements),
            **kwargs,
        )
    return _make
