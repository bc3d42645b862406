import pytest
from rest_framework.test import APIClient, APIRequestFactory

from rides_api.views import NearbyDriverViewSet, RideViewSet


@pytest.fixture
def factory():
    return APIRequestFactory()


@pytest.fixture
def call(context, factory):
    """
    Dispatch a request straight to a viewset action bound to the test context.
    """
    def _call(viewset, actions, method, data=None, **kwargs):
        view = viewset.as_view(actions, dispatch_context=context)
        if method == "get":
            request = factory.get("/", data or {})
        else:
            request = getattr(factory, method)("/", data or {}, format="json")
        return view(request, **kwargs)
    return _call


def book(call, **overrides):
    payload = {
        "passengerId": "passenger_1",
        "pickupLocation": "123 Main Street",
        "destination": "456 Oak Avenue",
        "specialRequirements": ["sign_language_support"],
        "estimatedFare": 18.5,
    }
    payload.update(overrides)
    return call(RideViewSet, {"post": "book"}, "post", payload)


def test_book_ride(call):
    response = book(call)

    assert response.status_code == 201
    assert response.data["success"] is True

    ride = response.data["ride"]
    assert ride["status"] == "assigned"
    assert ride["driverId"] == "driver_1"
    assert ride["rideType"] == "access-rides"
    assert ride["specialRequirements"] == ["sign_language_support"]
    assert ride["fare"] == 18.5
    assert ride["completedAt"] is None

    driver = response.data["driver"]
    assert driver["id"] == "driver_1"
    assert driver["isAvailable"] is False
    assert driver["vehicle"]["plateNumber"] == "ABC-123"


def test_book_validation_error(call):
    response = book(call, passengerId="", estimatedFare=-4)

    assert response.status_code == 400
    assert response.data["error"] == "validation_error"
    assert set(response.data["fields"]) == {"passengerId", "estimatedFare"}


def test_book_no_driver(call, context):
    response = book(call, specialRequirements=["hearing_loop"])

    assert response.status_code == 404
    assert response.data["error"] == "no_driver_available"
    assert len(context.rides) == 0


def test_status_lifecycle(call):
    ride_id = book(call).data["ride"]["id"]
    status_actions = {"get": "get_status", "patch": "update_status"}

    response = call(RideViewSet, status_actions, "get", ride_id=ride_id)
    assert response.status_code == 200
    assert response.data["driver"]["id"] == "driver_1"

    response = call(
        RideViewSet, status_actions, "patch",
        {"status": "in_progress", "location": {"latitude": 40.72, "longitude": -74.0}},
        ride_id=ride_id,
    )
    assert response.status_code == 200
    assert response.data["ride"]["status"] == "in_progress"

    response = call(RideViewSet, status_actions, "patch", {"status": "completed"}, ride_id=ride_id)
    assert response.data["ride"]["completedAt"] is not None

    response = call(RideViewSet, status_actions, "patch", {"status": "in_progress"}, ride_id=ride_id)
    assert response.status_code == 400
    assert response.data["error"] == "invalid_transition"

    response = call(RideViewSet, status_actions, "get", ride_id="ride_missing")
    assert response.status_code == 404
    assert response.data["error"] == "ride_not_found"


def test_unknown_status_rejected(call):
    ride_id = book(call).data["ride"]["id"]

    response = call(RideViewSet, {"patch": "update_status"}, "patch", {"status": "flying"}, ride_id=ride_id)
    assert response.status_code == 400
    assert response.data["error"] == "validation_error"


def test_cancel_twice(call, context):
    ride_id = book(call).data["ride"]["id"]

    response = call(RideViewSet, {"post": "cancel"}, "post", {"reason": "Changed plans"}, ride_id=ride_id)
    assert response.status_code == 200
    assert response.data["ride"]["status"] == "cancelled"
    assert response.data["ride"]["cancellationReason"] == "Changed plans"
    assert context.drivers.find_by_id("driver_1").is_available is True

    response = call(RideViewSet, {"post": "cancel"}, "post", {}, ride_id=ride_id)
    assert response.status_code == 400
    assert response.data["error"] == "already_terminal"


def test_rate_ride(call):
    ride_id = book(call).data["ride"]["id"]

    response = call(RideViewSet, {"post": "rate"}, "post", {"rating": 5}, ride_id=ride_id)
    assert response.status_code == 400
    assert response.data["error"] == "ride_not_completed"

    call(RideViewSet, {"patch": "update_status"}, "patch", {"status": "completed"}, ride_id=ride_id)

    response = call(RideViewSet, {"post": "rate"}, "post", {"rating": 7}, ride_id=ride_id)
    assert response.status_code == 400
    assert response.data["error"] == "invalid_rating"

    response = call(RideViewSet, {"post": "rate"}, "post", {"rating": 3, "feedback": "Kind driver"}, ride_id=ride_id)
    assert response.status_code == 200
    assert response.data["ride"]["rating"] == 3
    assert response.data["ride"]["feedback"] == "Kind driver"
    assert response.data["driver"]["rating"] == 3.0


def test_history(call):
    book(call)
    book(call, specialRequirements=[])

    response = call(RideViewSet, {"get": "history"}, "get", {"limit": 1}, user_id="passenger_1")
    assert response.status_code == 200
    assert response.data["total"] == 2
    assert len(response.data["rides"]) == 1

    response = call(RideViewSet, {"get": "history"}, "get", user_id="nobody")
    assert response.data["rides"] == []


def test_nearby_drivers(call):
    response = call(
        NearbyDriverViewSet, {"get": "list"}, "get",
        {"latitude": 40.7128, "longitude": -74.0060, "radius": 6000},
    )
    assert response.status_code == 200
    assert response.data["count"] == 2
    assert [driver["id"] for driver in response.data["drivers"]] == ["driver_1", "driver_2"]
    assert response.data["drivers"][0]["distance"] == 0
    assert response.data["drivers"][1]["etaSeconds"] is None

    response = call(NearbyDriverViewSet, {"get": "list"}, "get", {"latitude": 40.7128})
    assert response.status_code == 400
    assert "longitude" in response.data["fields"]


def test_urls_serve_seed_fleet():
    client = APIClient()

    response = client.get("/api/v1/rides/drivers/nearby", {"latitude": 40.7128, "longitude": -74.0060})
    assert response.status_code == 200
    assert response.json()["drivers"][0]["id"] == "driver_1"

    response = client.get("/api/v1/rides/ride_missing/status")
    assert response.status_code == 404
    assert response.json()["error"] == "ride_not_found"


def test_rate_rejects_non_object_body(call, context, factory):
    ride_id = book(call).data["ride"]["id"]
    view = RideViewSet.as_view({"post": "rate"}, dispatch_context=context)

    response = view(factory.post("/", [5], format="json"), ride_id=ride_id)

    assert response.status_code == 400
    assert response.data["error"] == "validation_error"


def test_rate_passes_raw_value_to_core(call):
    ride_id = book(call).data["ride"]["id"]
    call(RideViewSet, {"patch": "update_status"}, "patch", {"status": "completed"}, ride_id=ride_id)

    response = call(RideViewSet, {"post": "rate"}, "post", {"rating": "5"}, ride_id=ride_id)
    assert response.status_code == 400
    assert response.data["error"] == "invalid_rating"
