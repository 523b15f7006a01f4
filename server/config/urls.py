"""Root URL configuration.

All API endpoints live under /api/ and are declared by the pulsezen app.
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/", include("pulsezen.urls")),
]
