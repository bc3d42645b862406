from django.urls import path

from .views import NearbyDriverViewSet, RideViewSet


def build_urlpatterns(dispatch_context):
    """
    Ride endpoints bound to one DispatchContext.
    """
    def ride_view(actions):
        return RideViewSet.as_view(actions, dispatch_context=dispatch_context)

    return [
        path("book", ride_view({"post": "book"}), name="ride-book"),
        path(
            "drivers/nearby",
            NearbyDriverViewSet.as_view({"get": "list"}, dispatch_context=dispatch_context),
            name="drivers-nearby",
        ),
        path("user/<str:user_id>/history", ride_view({"get": "history"}), name="ride-history"),
        path("<str:ride_id>/status", ride_view({"get": "get_status", "patch": "update_status"}), name="ride-status"),
        path("<str:ride_id>/cancel", ride_view({"post": "cancel"}), name="ride-cancel"),
        path("<str:ride_id>/rate", ride_view({"post": "rate"}), name="ride-rate"),
    ]
