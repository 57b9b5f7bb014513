from django.urls import include, path

from gateway.views import HealthView, index

urlpatterns = [
    path("", index, name="index"),
    path("health", HealthView.as_view(), name="health"),
    path("api/", include("gateway.urls")),
]
