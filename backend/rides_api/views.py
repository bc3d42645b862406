from rest_framework import permissions, status, viewsets
from rest_framework.response import Response

from rides.models import RideRequest
from .serializers import (
    BookRideSerializer,
    CancelRideSerializer,
    DriverSerializer,
    NearbyDriverSerializer,
    NearbyQuerySerializer,
    PageQuerySerializer,
    RateRideSerializer,
    RideSerializer,
    UpdateStatusSerializer,
)


def _coordinates(data):
    if not data:
        return None
    return (data["latitude"], data["longitude"])


def _driver_data(driver):
    return DriverSerializer(driver).data if driver is not None else None


class DispatchViewSet(viewsets.ViewSet):
    """
    Base for views served from a DispatchContext.
    The context is handed over through as_view(dispatch_context=...).
    """
    permission_classes = [permissions.AllowAny]
    dispatch_context = None


class RideViewSet(DispatchViewSet):
    """
    Booking and the ride lifecycle.
    - book: match a driver and create the ride
    - get_status / update_status / cancel: follow the ride state machine
    - rate: passenger rating once the ride is completed
    - history: a passenger's rides, newest first
    """

    def book(self, request):
        serializer = BookRideSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        ride, driver = self.dispatch_context.lifecycle.book(RideRequest(
            passenger_id=data["passengerId"],
            pickup_location=data["pickupLocation"],
            destination=data["destination"],
            special_requirements=frozenset(data["specialRequirements"]),
            ride_type=data["rideType"],
            estimated_fare=data.get("estimatedFare"),
            fare=data.get("fare"),
            pickup_coordinates=_coordinates(data.get("pickupCoordinates")),
        ))
        return Response(
            {"success": True, "ride": RideSerializer(ride).data, "driver": _driver_data(driver)},
            status=status.HTTP_201_CREATED,
        )

    def get_status(self, request, ride_id=None):
        ride, driver = self.dispatch_context.lifecycle.get_status(ride_id)
        return Response({"success": True, "ride": RideSerializer(ride).data, "driver": _driver_data(driver)})

    def update_status(self, request, ride_id=None):
        serializer = UpdateStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        ride = self.dispatch_context.lifecycle.update_status(
            ride_id,
            data["status"],
            location=_coordinates(data.get("location")),
        )
        return Response({"success": True, "ride": RideSerializer(ride).data})

    def cancel(self, request, ride_id=None):
        serializer = CancelRideSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        ride = self.dispatch_context.lifecycle.cancel(ride_id, serializer.validated_data.get("reason"))
        return Response({"success": True, "ride": RideSerializer(ride).data})

    def rate(self, request, ride_id=None):
        serializer = RateRideSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        ride, driver = self.dispatch_context.ratings.rate(ride_id, data.get("rating"), data.get("feedback"))
        return Response({"success": True, "ride": RideSerializer(ride).data, "driver": _driver_data(driver)})

    def history(self, request, user_id=None):
        query = PageQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        page = self.dispatch_context.lifecycle.history(
            user_id,
            limit=query.validated_data["limit"],
            offset=query.validated_data["offset"],
        )
        return Response({
            "success": True,
            "rides": RideSerializer(page.rides, many=True).data,
            "total": page.total,
            "limit": page.limit,
            "offset": page.offset,
        })


class NearbyDriverViewSet(DispatchViewSet):

    def list(self, request):
        query = NearbyQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        data = query.validated_data

        found = self.dispatch_context.nearby_drivers(
            (data["latitude"], data["longitude"]),
            radius_m=data.get("radius"),
        )
        return Response({
            "success": True,
            "drivers": NearbyDriverSerializer(found, many=True).data,
            "count": len(found),
        })
