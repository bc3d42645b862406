import pytest

from common.errors import InvalidRating, RideNotCompleted, RideNotFound
from dispatch.context import build_context


@pytest.fixture
def solo_context(seed_drivers, clock):
    # Only driver_1, so every booking lands on the same driver
    return build_context(seed_drivers[:1], clock=clock)


def complete_ride(context, make_request):
    ride, _ = context.lifecycle.book(make_request())
    return context.lifecycle.update_status(ride.id, "completed")


def test_driver_rating_is_mean_of_rated_rides(solo_context, make_request, clock):
    rides = [complete_ride(solo_context, make_request) for _ in range(3)]

    for ride, stars in zip(rides, [5, 4, 3]):
        clock.advance(minutes=1)
        rated, driver = solo_context.ratings.rate(ride.id, stars, "thanks")
        assert rated.rating == stars
        assert rated.feedback == "thanks"
        assert rated.rated_at == clock.now

    assert driver.rating == pytest.approx(4.0)
    assert solo_context.drivers.find_by_id("driver_1").rating == pytest.approx(4.0)


def test_rating_again_overwrites(solo_context, make_request):
    first = complete_ride(solo_context, make_request)
    second = complete_ride(solo_context, make_request)

    solo_context.ratings.rate(first.id, 5)
    solo_context.ratings.rate(second.id, 3)
    _, driver = solo_context.ratings.rate(first.id, 1)

    # (1 + 3) / 2, the first rating of 5 is gone
    assert driver.rating == pytest.approx(2.0)
    assert solo_context.rides.find_by_id(first.id).rating == 1


def test_float_whole_numbers_accepted(solo_context, make_request):
    ride = complete_ride(solo_context, make_request)

    rated, _ = solo_context.ratings.rate(ride.id, 4.0)
    assert rated.rating == 4
    assert isinstance(rated.rating, int)


@pytest.mark.parametrize("bad", [0, 6, 4.5, True, "5", None, -3])
def test_invalid_rating_changes_nothing(solo_context, make_request, bad):
    ride = complete_ride(solo_context, make_request)
    driver_before = solo_context.drivers.find_by_id("driver_1")

    with pytest.raises(InvalidRating):
        solo_context.ratings.rate(ride.id, bad)

    assert solo_context.rides.find_by_id(ride.id) == ride
    assert solo_context.drivers.find_by_id("driver_1") == driver_before


def test_rating_requires_completed_ride(solo_context, make_request):
    ride, _ = solo_context.lifecycle.book(make_request())

    with pytest.raises(RideNotCompleted):
        solo_context.ratings.rate(ride.id, 5)

    assert solo_context.rides.find_by_id(ride.id).rating is None
    assert solo_context.drivers.find_by_id("driver_1").rating == 4.8

    cancelled = solo_context.lifecycle.cancel(ride.id)
    with pytest.raises(RideNotCompleted):
        solo_context.ratings.rate(cancelled.id, 5)


def test_rating_unknown_ride(solo_context):
    with pytest.raises(RideNotFound):
        solo_context.ratings.rate("ride_missing", 5)


def test_unrated_driver_keeps_seed_rating(solo_context, make_request):
    complete_ride(solo_context, make_request)

    assert solo_context.ratings.driver_average("driver_1") is None
    assert solo_context.drivers.find_by_id("driver_1").rating == 4.8
