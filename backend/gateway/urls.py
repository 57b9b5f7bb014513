from django.urls import re_path

from gateway.views import api_entry

urlpatterns = [
    re_path(r"^(?P<path>.*)$", api_entry, name="api-entry"),
]
