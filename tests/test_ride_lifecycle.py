import random
import threading
from datetime import timedelta

import pytest

from common.errors import (
    AlreadyTerminal,
    InvalidTransition,
    NoDriverAvailable,
    RideNotFound,
    ValidationError,
)
from dispatch.context import build_context
from drivers.models import Driver
from rides.models import RideRequest, RideStatus, RideType


def assert_availability_in_sync(context):
    busy = {ride.driver_id for ride in context.rides.all_rides() if ride.status.is_active and ride.driver_id}
    for driver in context.drivers.list_all():
        assert driver.is_available == (driver.id not in busy), driver.id


def test_book_assigns_driver_and_marks_busy(context, make_request, clock):
    ride, driver = context.lifecycle.book(make_request(estimated_fare=22.5, fare=10))

    # 1. Ride is stored already assigned
    stored = context.rides.find_by_id(ride.id)
    assert stored == ride
    assert ride.status == RideStatus.ASSIGNED
    assert ride.driver_id == "driver_1"
    assert ride.ride_type == RideType.ACCESS_RIDES

    # 2. Estimated fare wins over fare
    assert ride.fare == 22.5

    # 3. Arrival estimate is 15 minutes out
    assert ride.created_at == clock.now
    assert ride.estimated_arrival == clock.now + timedelta(minutes=15)

    # 4. Driver is no longer available
    assert driver.is_available is False
    assert context.drivers.find_by_id("driver_1").is_available is False


def test_fare_fallbacks(context, make_request):
    ride, _ = context.lifecycle.book(make_request(fare=12))
    assert ride.fare == 12.0

    ride, _ = context.lifecycle.book(make_request())
    assert ride.fare == 0.0


@pytest.mark.parametrize("overrides", [
    {"passenger_id": None},
    {"pickup_location": "  "},
    {"destination": ""},
    {"fare": -1},
    {"ride_type": "helicopter"},
    {"special_requirements": "wheelchair_ramp"},
    {"pickup_coordinates": (200, 0)},
])
def test_invalid_booking_persists_nothing(context, overrides):
    fields = dict(passenger_id="passenger_1", pickup_location="A", destination="B")
    fields.update(overrides)

    with pytest.raises(ValidationError):
        context.lifecycle.book(RideRequest(**fields))

    assert len(context.rides) == 0
    assert all(driver.is_available for driver in context.drivers.list_all())


def test_missing_fields_are_named(context):
    with pytest.raises(ValidationError) as excinfo:
        context.lifecycle.book(RideRequest(passenger_id=None, pickup_location="A", destination=None))

    assert "passengerId" in excinfo.value.message
    assert "destination" in excinfo.value.message


def test_no_driver_available_persists_nothing(context, make_request):
    with pytest.raises(NoDriverAvailable):
        context.lifecycle.book(make_request(requirements={"hearing_loop"}))

    assert len(context.rides) == 0


def test_end_to_end_sign_language_booking(clock):
    drivers = [
        Driver.new("driver_1", "Ahmed Hassan", 40.7128, -74.0060,
                   accessibility_features=["wheelchair_ramp"], last_updated=clock()),
        Driver.new("driver_2", "Sarah Johnson", 40.7589, -73.9851,
                   accessibility_features=["wheelchair_ramp", "sign_language_support"], last_updated=clock()),
    ]
    context = build_context(drivers, clock=clock)

    ride, driver = context.lifecycle.book(RideRequest(
        passenger_id="passenger_1",
        pickup_location="A",
        destination="B",
        special_requirements=frozenset({"sign_language_support"}),
    ))
    assert ride.driver_id == "driver_2"
    assert context.drivers.find_by_id("driver_2").is_available is False

    clock.advance(minutes=25)
    completed = context.lifecycle.update_status(ride.id, "completed")

    assert completed.status == RideStatus.COMPLETED
    assert completed.completed_at == clock.now
    assert context.drivers.find_by_id("driver_2").is_available is True


def test_full_trip_counts_ride(context, make_request, clock):
    ride, _ = context.lifecycle.book(make_request())

    started = context.lifecycle.update_status(ride.id, RideStatus.IN_PROGRESS)
    assert started.status == RideStatus.IN_PROGRESS
    assert context.drivers.find_by_id("driver_1").is_available is False

    clock.advance(minutes=30)
    done = context.lifecycle.update_status(ride.id, "completed")
    driver = context.drivers.find_by_id("driver_1")

    assert done.completed_at == clock.now
    assert done.cancelled_at is None
    assert driver.is_available is True
    assert driver.total_rides == 1251


def test_same_status_update_moves_driver(context, make_request, clock):
    ride, _ = context.lifecycle.book(make_request())
    context.lifecycle.update_status(ride.id, "in_progress")

    clock.advance(minutes=2)
    updated = context.lifecycle.update_status(ride.id, "in_progress", location={"latitude": 40.73, "longitude": -73.99})

    driver = context.drivers.find_by_id("driver_1")
    assert updated.status == RideStatus.IN_PROGRESS
    assert driver.location.coordinates == (40.73, -73.99)
    assert driver.location.last_updated == clock.now


def test_illegal_transition_leaves_state_unchanged(context, make_request):
    ride, _ = context.lifecycle.book(make_request())
    done = context.lifecycle.update_status(ride.id, "completed")
    driver_before = context.drivers.find_by_id("driver_1")

    with pytest.raises(InvalidTransition):
        context.lifecycle.update_status(ride.id, "in_progress")

    with pytest.raises(InvalidTransition):
        context.lifecycle.update_status(ride.id, "completed")

    assert context.rides.find_by_id(ride.id) == done
    assert context.drivers.find_by_id("driver_1") == driver_before


def test_assigned_ride_cannot_go_back_to_requested(context, make_request):
    ride, _ = context.lifecycle.book(make_request())

    with pytest.raises(InvalidTransition):
        context.lifecycle.update_status(ride.id, "requested")

    assert context.rides.find_by_id(ride.id).status == RideStatus.ASSIGNED


def test_unknown_status_and_ride(context, make_request):
    ride, _ = context.lifecycle.book(make_request())

    with pytest.raises(ValidationError):
        context.lifecycle.update_status(ride.id, "teleported")

    with pytest.raises(RideNotFound):
        context.lifecycle.update_status("ride_missing", "completed")

    with pytest.raises(RideNotFound):
        context.lifecycle.cancel("ride_missing")

    with pytest.raises(RideNotFound):
        context.lifecycle.get_status("ride_missing")


def test_cancel_releases_driver(context, make_request, clock):
    ride, _ = context.lifecycle.book(make_request())
    clock.advance(minutes=3)

    cancelled = context.lifecycle.cancel(ride.id, "Plans changed")

    assert cancelled.status == RideStatus.CANCELLED
    assert cancelled.cancelled_at == clock.now
    assert cancelled.cancellation_reason == "Plans changed"
    assert cancelled.completed_at is None
    assert context.drivers.find_by_id("driver_1").is_available is True
    assert context.drivers.find_by_id("driver_1").total_rides == 1250


def test_double_cancel_fails_without_side_effects(context, make_request):
    ride, _ = context.lifecycle.book(make_request())
    first = context.lifecycle.cancel(ride.id)

    # driver_1 is picked up by the next booking
    context.lifecycle.book(make_request(passenger_id="passenger_2"))

    with pytest.raises(AlreadyTerminal):
        context.lifecycle.cancel(ride.id, "again")

    with pytest.raises(AlreadyTerminal):
        context.lifecycle.update_status(ride.id, "cancelled")

    assert context.rides.find_by_id(ride.id) == first
    assert context.drivers.find_by_id("driver_1").is_available is False
    assert_availability_in_sync(context)


def test_get_status_returns_driver(context, make_request):
    ride, _ = context.lifecycle.book(make_request())

    found, driver = context.lifecycle.get_status(ride.id)
    assert found == ride
    assert driver.id == "driver_1"


def test_history_newest_first_and_paginated(context, make_request, clock):
    ids = []
    for _ in range(3):
        ride, _ = context.lifecycle.book(make_request())
        context.lifecycle.update_status(ride.id, "completed")
        ids.append(ride.id)
        clock.advance(minutes=10)
    context.lifecycle.book(make_request(passenger_id="someone_else"))

    page = context.lifecycle.history("passenger_1")
    assert [ride.id for ride in page.rides] == list(reversed(ids))
    assert page.total == 3

    page = context.lifecycle.history("passenger_1", limit=1, offset=1)
    assert [ride.id for ride in page.rides] == [ids[1]]
    assert (page.limit, page.offset, page.total) == (1, 1, 3)

    with pytest.raises(ValidationError):
        context.lifecycle.history("passenger_1", limit=-1)


@pytest.mark.parametrize("seed", [1, 7, 42, 2024])
def test_availability_invariant_under_random_sequences(context, make_request, seed):
    rng = random.Random(seed)
    features = ["wheelchair_ramp", "voice_guidance", "sign_language_support", "hearing_loop"]

    for _ in range(150):
        action = rng.choice(["book", "start", "complete", "cancel"])
        rides = context.rides.all_rides()
        try:
            if action == "book":
                context.lifecycle.book(make_request(requirements=rng.sample(features, k=rng.randint(0, 2))))
            elif rides and action == "start":
                context.lifecycle.update_status(rng.choice(rides).id, "in_progress")
            elif rides and action == "complete":
                context.lifecycle.update_status(rng.choice(rides).id, "completed")
            elif rides:
                context.lifecycle.cancel(rng.choice(rides).id)
        except (NoDriverAvailable, InvalidTransition, AlreadyTerminal):
            pass

        assert_availability_in_sync(context)


def test_concurrent_bookings_never_share_a_driver(context, make_request):
    barrier = threading.Barrier(10)
    booked, rejected = [], []

    def worker(index):
        barrier.wait()
        try:
            ride, driver = context.lifecycle.book(make_request(passenger_id=f"passenger_{index}"))
            booked.append(driver.id)
        except NoDriverAvailable:
            rejected.append(index)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(10)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(booked) == ["driver_1", "driver_2"]
    assert len(rejected) == 8
    assert_availability_in_sync(context)


def test_active_ride_for_driver_follows_lifecycle(context, make_request):
    assert context.rides.active_ride_for_driver("driver_1") is None

    ride, _ = context.lifecycle.book(make_request())
    assert context.rides.active_ride_for_driver("driver_1").id == ride.id
    assert context.rides.active_ride_for_driver("driver_2") is None

    context.lifecycle.update_status(ride.id, "completed")
    assert context.rides.active_ride_for_driver("driver_1") is None
