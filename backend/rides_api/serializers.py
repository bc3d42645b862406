from rest_framework import serializers

from rides.models import RideStatus, RideType


# --- Input ---

class CoordinateSerializer(serializers.Serializer):
    latitude = serializers.FloatField(min_value=-90, max_value=90)
    longitude = serializers.FloatField(min_value=-180, max_value=180)


class BookRideSerializer(serializers.Serializer):
    passengerId = serializers.CharField()
    pickupLocation = serializers.CharField()
    destination = serializers.CharField()
    rideType = serializers.ChoiceField(choices=[kind.value for kind in RideType], default=RideType.ACCESS_RIDES.value)
    specialRequirements = serializers.ListField(child=serializers.CharField(), default=list)
    estimatedFare = serializers.FloatField(required=False, allow_null=True, min_value=0)
    fare = serializers.FloatField(required=False, allow_null=True, min_value=0)
    pickupCoordinates = CoordinateSerializer(required=False, allow_null=True)


class UpdateStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[kind.value for kind in RideStatus])
    location = CoordinateSerializer(required=False, allow_null=True)


class CancelRideSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class RateRideSerializer(serializers.Serializer):
    # Passed through as sent; RatingAggregator owns the 1..5 whole-number rule.
    rating = serializers.JSONField(required=False, allow_null=True)
    feedback = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class NearbyQuerySerializer(serializers.Serializer):
    latitude = serializers.FloatField(min_value=-90, max_value=90)
    longitude = serializers.FloatField(min_value=-180, max_value=180)
    radius = serializers.IntegerField(required=False, min_value=1)


class PageQuerySerializer(serializers.Serializer):
    limit = serializers.IntegerField(required=False, min_value=0, default=10)
    offset = serializers.IntegerField(required=False, min_value=0, default=0)


# --- Output ---

class VehicleSerializer(serializers.Serializer):
    make = serializers.CharField()
    model = serializers.CharField()
    year = serializers.IntegerField()
    color = serializers.CharField()
    plateNumber = serializers.CharField(source="plate_number")
    accessibilityFeatures = serializers.SerializerMethodField()

    def get_accessibilityFeatures(self, vehicle):
        return sorted(vehicle.accessibility_features)


class DriverLocationSerializer(serializers.Serializer):
    latitude = serializers.FloatField()
    longitude = serializers.FloatField()
    lastUpdated = serializers.DateTimeField(source="last_updated")


class DriverSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    phone = serializers.CharField()
    rating = serializers.FloatField()
    totalRides = serializers.IntegerField(source="total_rides")
    isAvailable = serializers.BooleanField(source="is_available")
    vehicle = VehicleSerializer()
    location = DriverLocationSerializer()
    languages = serializers.SerializerMethodField()

    def get_languages(self, driver):
        return sorted(driver.languages)


class NearbyDriverSerializer(serializers.Serializer):
    """
    Flattens a NearbyDriver into the driver's fields plus distance (meters)
    and, when OSRM is configured, the road ETA in seconds.
    """
    def to_representation(self, instance):
        data = DriverSerializer(instance.driver).data
        data["distance"] = instance.distance_m
        data["etaSeconds"] = instance.eta_s
        return data


class RideSerializer(serializers.Serializer):
    id = serializers.CharField()
    passengerId = serializers.CharField(source="passenger_id")
    driverId = serializers.CharField(source="driver_id", allow_null=True)
    pickupLocation = serializers.CharField(source="pickup_location")
    destination = serializers.CharField()
    status = serializers.CharField(source="status.value")
    rideType = serializers.CharField(source="ride_type.value")
    specialRequirements = serializers.SerializerMethodField()
    fare = serializers.FloatField()
    createdAt = serializers.DateTimeField(source="created_at")
    updatedAt = serializers.DateTimeField(source="updated_at")
    estimatedArrival = serializers.DateTimeField(source="estimated_arrival", allow_null=True)
    completedAt = serializers.DateTimeField(source="completed_at", allow_null=True)
    cancelledAt = serializers.DateTimeField(source="cancelled_at", allow_null=True)
    cancellationReason = serializers.CharField(source="cancellation_reason", allow_null=True)
    rating = serializers.IntegerField(allow_null=True)
    feedback = serializers.CharField(allow_null=True)
    ratedAt = serializers.DateTimeField(source="rated_at", allow_null=True)

    def get_specialRequirements(self, ride):
        return sorted(ride.special_requirements)
