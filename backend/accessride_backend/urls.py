from django.urls import include, path

from chat_api.urls import build_urlpatterns as chat_urlpatterns
from rides_api.urls import build_urlpatterns as rides_urlpatterns
from .services import build_default_context

dispatch_context = build_default_context()

urlpatterns = [
    path("api/v1/rides/", include(rides_urlpatterns(dispatch_context))),
    path("api/v1/chat/", include(chat_urlpatterns(dispatch_context))),
]
